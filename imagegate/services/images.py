# data URI codec and the one place backend image payloads get normalized
# everything leaving a provider is a data URI string

import base64
import re
from typing import Any, AsyncIterable, Mapping

DEFAULT_MEDIA_TYPE = "image/png"

_DATA_URI = re.compile(r"^data:(?P<media>[\w.+-]+/[\w.+-]+)?(?:;[^,;]+)*;base64,(?P<payload>.*)$", re.DOTALL)


def to_data_uri(b64: str, media_type: str = DEFAULT_MEDIA_TYPE) -> str:
    return f"data:{media_type};base64,{b64}"


def bytes_to_data_uri(data: bytes, media_type: str = DEFAULT_MEDIA_TYPE) -> str:
    return to_data_uri(base64.b64encode(data).decode("ascii"), media_type)


def data_uri_to_base64(value: str) -> str:
    """Strip the `data:<media>;base64,` prefix and return the raw payload.

    A bare base64 string is returned unchanged; a data URI that is not
    base64 encoded raises ValueError.
    """
    if not value.startswith("data:"):
        return value
    match = _DATA_URI.match(value)
    if match is None:
        raise ValueError("Reference image is not a base64 data URI")
    return match.group("payload")


async def read_stream(stream: AsyncIterable[bytes]) -> bytes:
    chunks = []
    async for chunk in stream:
        chunks.append(bytes(chunk))
    return b"".join(chunks)


async def normalize_image(payload: Any, media_type: str = DEFAULT_MEDIA_TYPE) -> str:
    """Turn a backend result into a data URI.

    Accepts raw bytes, an async byte stream, a mapping carrying a base64
    `image` field, or a base64 string.
    """
    if isinstance(payload, (bytes, bytearray, memoryview)):
        return bytes_to_data_uri(bytes(payload), media_type)
    if isinstance(payload, str):
        return to_data_uri(payload, media_type)
    if isinstance(payload, Mapping):
        image = payload.get("image")
        if not isinstance(image, str) or not image:
            raise TypeError("Backend result has no base64 'image' field")
        return to_data_uri(image, media_type)
    if hasattr(payload, "__aiter__"):
        return bytes_to_data_uri(await read_stream(payload), media_type)
    raise TypeError(f"Unsupported backend result type: {type(payload).__name__}")
