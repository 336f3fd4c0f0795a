# imagegate/main.py
import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from imagegate.core import config
from imagegate.core.context import RuntimeCapabilities
from imagegate.api.routers.health import router as health_router
from imagegate.api.routers.providers import router as providers_router
from imagegate.api.routers.generate import router as generate_router


def create_app(capabilities: Optional[RuntimeCapabilities] = None) -> FastAPI:
    logging.getLogger("imagegate").setLevel(config.LOG_LEVEL)

    app = FastAPI(title="Image Gateway", version="0.1.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # resolved once per process; an edge host passes its AI binding in here
    app.state.capabilities = capabilities or RuntimeCapabilities.from_config()

    # Routers
    app.include_router(health_router)
    app.include_router(providers_router)
    app.include_router(generate_router)

    return app


app = create_app()
