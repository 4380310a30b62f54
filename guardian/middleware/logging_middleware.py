"""
Logging Middleware - Request/Response logging
"""
import time
from typing import Callable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from guardian.utils.logger import get_logger

logger = get_logger(__name__)

QUIET_PREFIXES = ("/api/v1/health",)


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Log every API call with its status and duration

    Health checks are not logged. The duration in milliseconds is returned
    in the ``X-Process-Time`` header.
    """

    async def dispatch(self, request: Request, call_next: Callable):
        if request.url.path.startswith(QUIET_PREFIXES):
            return await call_next(request)

        method = request.method
        path = request.url.path
        client_host = request.client.host if request.client else "unknown"
        start_time = time.perf_counter()

        logger.debug(f"→ {method} {path} from {client_host}")

        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = int((time.perf_counter() - start_time) * 1000)
            logger.error(f"✗ {method} {path} ERROR ({duration_ms}ms): {e}", exc_info=True)
            raise

        duration_ms = int((time.perf_counter() - start_time) * 1000)
        log = logger.warning if response.status_code >= 400 else logger.info
        log(f"← {method} {path} {response.status_code} ({duration_ms}ms)")

        response.headers["X-Process-Time"] = str(duration_ms)
        return response
