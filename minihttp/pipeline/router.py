"""Request routing logic."""

import logging
from typing import Callable, Union

from minihttp.domain.correlation_id import CorrelationLoggerAdapter
from minihttp.domain.http_types import Handler, HttpMethod, HttpRequest, HttpResponse
from minihttp.domain.response_builders import (
    internal_error_response,
    not_found_response,
)
from minihttp.pipeline.route import Route

ROUTER_LOGGER = CorrelationLoggerAdapter(
    logging.getLogger("minihttp.pipeline.router"), {}
)


class Router:
    """Ordered route table; the first registered match wins.

    Routes are registered once at startup and only read afterwards, so a
    single router can be shared by every worker thread without locking.
    """

    def __init__(self) -> None:
        self._routes: list[Route] = []

    @property
    def routes(self) -> tuple[Route, ...]:
        return tuple(self._routes)

    def add_route(
        self, method: Union[HttpMethod, str], template: str, handler: Handler
    ) -> Route:
        """Compile ``template`` and append the route to the table."""
        route = Route(template, method, handler)
        self._routes.append(route)
        if ROUTER_LOGGER.logger.isEnabledFor(logging.DEBUG):
            ROUTER_LOGGER.debug(
                "Route registered",
                extra={
                    "event": "route_registered",
                    "method": route.method.value,
                    "route": template,
                },
            )
        return route

    def get(self, template: str) -> Callable[[Handler], Handler]:
        """Register the decorated function for GET requests on ``template``."""
        return self._register(HttpMethod.GET, template)

    def post(self, template: str) -> Callable[[Handler], Handler]:
        """Register the decorated function for POST requests on ``template``."""
        return self._register(HttpMethod.POST, template)

    def _register(
        self, method: HttpMethod, template: str
    ) -> Callable[[Handler], Handler]:
        def decorator(handler: Handler) -> Handler:
            self.add_route(method, template, handler)
            return handler

        return decorator

    def route(self, request: HttpRequest) -> HttpResponse:
        """Dispatch ``request`` to the first matching handler."""
        for route in self._routes:
            bindings = route.match(request)
            if bindings is None:
                continue

            request.params.update(bindings)
            if ROUTER_LOGGER.logger.isEnabledFor(logging.DEBUG):
                ROUTER_LOGGER.debug(
                    "Route matched",
                    extra={"event": "route_matched", "route": route.template},
                )
            return self._invoke(route, request)

        ROUTER_LOGGER.info(
            "No matching route found",
            extra={
                "event": "route_not_found",
                "route": request.path,
                "method": request.method.value,
            },
        )
        return not_found_response()

    def _invoke(self, route: Route, request: HttpRequest) -> HttpResponse:
        try:
            response = route.handler(request, HttpResponse())
            if not isinstance(response, HttpResponse):
                raise TypeError(
                    f"Handler for {route.template} returned {type(response).__name__}"
                )
            return response
        except Exception as error:  # pylint: disable=broad-except
            ROUTER_LOGGER.error(
                "Route handler failed",
                extra={
                    "event": "handler_failed",
                    "route": route.template,
                    "error_type": type(error).__name__,
                },
                exc_info=True,
            )
            return internal_error_response()
