import time
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response


def new_metrics() -> dict:
    return {
        "requests": 0,
        "total_response_ms": 0.0,
        "pricing_failures": 0,
    }


class MetricsMiddleware(BaseHTTPMiddleware):
    """
    Collects in-process counters on app.state.metrics:
      - total requests and total response time (ms)
      - pricing failures, counted from 503 responses on the checkout routes
    app.state is read lazily; it may not exist yet while the middleware
    stack is being built.
    """

    async def dispatch(self, request: Request, call_next):
        metrics = getattr(request.app.state, "metrics", None)
        if metrics is None:
            metrics = request.app.state.metrics = new_metrics()

        start = time.perf_counter()
        response: Response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000.0

        metrics["requests"] = metrics.get("requests", 0) + 1
        metrics["total_response_ms"] = metrics.get("total_response_ms", 0.0) + elapsed_ms
        if response.status_code == 503 and request.url.path.startswith("/orders"):
            metrics["pricing_failures"] = metrics.get("pricing_failures", 0) + 1

        return response
