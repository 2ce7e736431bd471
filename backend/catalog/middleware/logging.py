"""
Catalog Backend: Access Log Middleware
=======================================

What:  One access log line per API request, keyed by route template.
How:   After the route has run, the matched FastAPI route is read back from
       the ASGI scope, so the line carries `/api/products/{product_id}`
       rather than the concrete id, plus the handler name. Catalog-specific
       response headers are appended when present:

           GET /api/products 200 4.1ms op=list_products total=37 [a1b2c3d4]
           POST /api/products 201 9.8ms op=create_product created=/api/products/<id> [..]

       Unmatched paths (404 from the router) fall back to the raw path.
When:  Inside RequestIDMiddleware, so the request ID is already set.

Request bodies are never logged.
"""

import logging
import time
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from catalog.middleware.request_id import request_id_var

logger = logging.getLogger("catalog.access")

# Polled every few seconds by orchestrators
SKIPPED_PATHS = frozenset({"/health"})


def route_template(request: Request) -> str:
    route = request.scope.get("route")
    return getattr(route, "path_format", None) or request.url.path


def route_name(request: Request) -> Optional[str]:
    return getattr(request.scope.get("route"), "name", None)


def access_level(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    # 404 and 409 stay at INFO
    if status == 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Access log keyed by route template, with paging and creation details."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in SKIPPED_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        template = route_template(request)
        op = route_name(request)
        total = response.headers.get("X-Total-Count")
        created = response.headers.get("Location")

        parts = [f"{request.method} {template} {response.status_code} {elapsed_ms:.1f}ms"]
        if op:
            parts.append(f"op={op}")
        if total is not None:
            parts.append(f"total={total}")
        if created:
            parts.append(f"created={created}")
        rid = request_id_var.get("")
        parts.append(f"[{rid}]")

        logger.log(
            access_level(response.status_code),
            " ".join(parts),
            extra={
                "request_id": rid,
                "route": template,
                "operation": op,
                "status": response.status_code,
                "duration_ms": round(elapsed_ms, 2),
                "total_count": int(total) if total is not None else None,
            },
        )
        return response
