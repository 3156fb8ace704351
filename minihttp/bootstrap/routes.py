"""Route table for the server application."""

from minihttp.domain.http_types import HttpMethod
from minihttp.handlers.file_handler import FileHandlers
from minihttp.handlers.system_handlers import (
    handle_echo,
    handle_index,
    handle_user_agent,
)
from minihttp.pipeline.router import Router


def build_router(directory: str) -> Router:
    """Register every application route, in match order."""
    files = FileHandlers(directory)

    router = Router()
    router.add_route(HttpMethod.GET, "/", handle_index)
    router.add_route(HttpMethod.GET, "/user-agent", handle_user_agent)
    router.add_route(HttpMethod.GET, "/echo/:message", handle_echo)
    router.add_route(HttpMethod.GET, "/files/:filename", files.read_file)
    router.add_route(HttpMethod.POST, "/files/:filename", files.write_file)
    return router
