# app/middleware/request_logging.py

import time
import logging
from fastapi import Request

access_logger = logging.getLogger("access")

TIMING_HEADER = "X-Process-Time-Ms"


def _access_line(request: Request, status_code: int, elapsed_ms: float) -> dict:
    # Set by get_current_caller once the bearer token checks out
    caller = getattr(request.state, "caller", None)
    return {
        "client_addr": request.client.host if request.client else "unknown",
        "method": request.method,
        "path": request.url.path,
        "status_code": status_code,
        "process_time_ms": round(elapsed_ms, 2),
        "company_id": caller.company_id if caller else "-",
    }


async def request_logging_middleware(request: Request, call_next):
    started = time.perf_counter()

    try:
        response = await call_next(request)
    except Exception:
        elapsed_ms = (time.perf_counter() - started) * 1000
        access_logger.error("request failed", extra=_access_line(request, 500, elapsed_ms))
        raise

    elapsed_ms = (time.perf_counter() - started) * 1000
    response.headers[TIMING_HEADER] = f"{elapsed_ms:.2f}"
    access_logger.info("", extra=_access_line(request, response.status_code, elapsed_ms))

    return response
