import re
import time

from prometheus_client import Counter, Gauge, Histogram
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "path", "status"],
)

REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "path"],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)

REQUESTS_IN_PROGRESS = Gauge(
    "http_requests_in_progress",
    "HTTP requests currently being served",
    ["method"],
)

# /orders/12/items/3 -> /orders/{id}/items/{id}
_ID_SEGMENT = re.compile(r"/\d+(?=/|$)")


def normalise_path(path: str) -> str:
    return _ID_SEGMENT.sub("/{id}", path)


class MetricsMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        if request.url.path.startswith("/metrics"):
            return await call_next(request)

        method = request.method
        path = normalise_path(request.url.path)
        status = "500"
        start = time.perf_counter()
        REQUESTS_IN_PROGRESS.labels(method).inc()
        try:
            response = await call_next(request)
            status = str(response.status_code)
            return response
        finally:
            REQUEST_LATENCY.labels(method=method, path=path).observe(time.perf_counter() - start)
            REQUEST_COUNT.labels(method=method, path=path, status=status).inc()
            REQUESTS_IN_PROGRESS.labels(method).dec()
