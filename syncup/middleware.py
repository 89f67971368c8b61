import logging
import time
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response


def _route_of(request: Request) -> str:
    """Matched route template, e.g. ``/api/events/{event_id}/summary``."""
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path


class HTTPLogMiddleware(BaseHTTPMiddleware):
    """Debug log of every request, keyed by route template and event id."""

    def __init__(self, app, logger_name: str = "syncup.http"):
        super().__init__(app)
        self._logger = logging.getLogger(logger_name)

    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        method = request.method
        self._logger.debug("http.request start method=%s path=%s", method, request.url.path)
        try:
            response: Response = await call_next(request)
        except Exception as e:
            dur_ms = int((time.perf_counter() - start) * 1000)
            self._logger.warning("http.request error method=%s route=%s dur_ms=%s err=%r",
                                 method, _route_of(request), dur_ms, e)
            raise
        dur_ms = int((time.perf_counter() - start) * 1000)
        self._logger.debug("http.request end method=%s route=%s event=%s status=%s dur_ms=%s",
                           method, _route_of(request), request.path_params.get("event_id", "-"),
                           response.status_code, dur_ms)
        return response
