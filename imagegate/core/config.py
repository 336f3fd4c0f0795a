# centralized configuration loader
# runs load_dotenv() to read .env
# deployment flags live here; providers get them through RuntimeCapabilities, never directly

import os
from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "y"}


# Provider selection
DEFAULT_PROVIDER = os.getenv("DEFAULT_PROVIDER", "cloudflare")

# Runtime detection
EDGE_RUNTIME = _flag("EDGE_RUNTIME")
PROVIDER_CLOUDFLARE_BUILTIN = _flag("PROVIDER_CLOUDFLARE_BUILTIN")

# Outbound HTTP
CLOUDFLARE_API_BASE = os.getenv("CLOUDFLARE_API_BASE", "https://api.cloudflare.com/client/v4").rstrip("/")
HTTP_TIMEOUT = float(os.getenv("HTTP_TIMEOUT", "120"))
HTTP_CONNECT_TIMEOUT = float(os.getenv("HTTP_CONNECT_TIMEOUT", "10"))

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
