from fastapi import Request

from imagegate.core.context import RuntimeCapabilities


def get_capabilities(request: Request) -> RuntimeCapabilities:
    return request.app.state.capabilities
