"""HTTP middleware for request logging"""
import logging
import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from infrastructure.logging import set_request_id

log = logging.getLogger(__name__)

# Threshold for slow request warning (ms)
SLOW_REQUEST_MS = 2000


class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        rid = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:8]
        set_request_id(rid)
        t0 = time.perf_counter()

        method = request.method
        path = request.url.path

        try:
            log.info("-> %s %s", method, path)
            try:
                response = await call_next(request)
            except Exception:
                dt = (time.perf_counter() - t0) * 1000
                log.exception("<- %s %s -> unhandled error %.0fms", method, path, dt)
                raise

            dt = (time.perf_counter() - t0) * 1000
            response.headers["X-Request-ID"] = rid

            status = response.status_code
            if status >= 500:
                log.error("<- %s %s -> %s %.0fms", method, path, status, dt)
            elif status >= 400:
                log.warning("<- %s %s -> %s %.0fms", method, path, status, dt)
            elif dt > SLOW_REQUEST_MS:
                log.warning("<- %s %s -> %s %.0fms [SLOW]", method, path, status, dt)
            else:
                log.info("<- %s %s -> %s %.0fms", method, path, status, dt)
            return response
        finally:
            set_request_id(None)
