"""
Request tracing middleware
"""
import logging
import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from bidwell.core import metrics
from bidwell.core.logging_config import generate_trace_id, reset_trace_id, set_trace_id

logger = logging.getLogger(__name__)


def _route_template(request: Request) -> str:
    route = request.scope.get("route")
    return getattr(route, "path", "unmatched")


class TracingMiddleware(BaseHTTPMiddleware):
    """Adds a trace ID to every request and records request metrics"""

    async def dispatch(self, request: Request, call_next):
        trace_id = request.headers.get("X-Trace-ID") or generate_trace_id()
        token = set_trace_id(trace_id)
        start_time = time.time()

        logger.info(
            f"Request started: {request.method} {request.url.path}",
            extra={"method": request.method, "path": request.url.path},
        )

        try:
            response = await call_next(request)
        except Exception:
            duration_ms = (time.time() - start_time) * 1000
            logger.error(
                f"Request failed: {request.method} {request.url.path}",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "duration_ms": round(duration_ms, 2),
                },
                exc_info=True,
            )
            raise
        else:
            duration = time.time() - start_time
            endpoint = _route_template(request)
            metrics.http_requests_total.labels(
                method=request.method, endpoint=endpoint, status=response.status_code
            ).inc()
            metrics.http_request_duration_seconds.labels(
                method=request.method, endpoint=endpoint
            ).observe(duration)

            logger.info(
                f"Request completed: {request.method} {request.url.path}",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": response.status_code,
                    "duration_ms": round(duration * 1000, 2),
                },
            )

            response.headers["X-Trace-ID"] = trace_id
            return response
        finally:
            reset_trace_id(token)
