import time
import logging
from fastapi import Request

logger = logging.getLogger("access")

# long-lived event streams would only log their connect time
STREAM_PATHS = {"/customer-view/events"}


async def request_logging_middleware(request: Request, call_next):
    start_time = time.perf_counter()

    response = await call_next(request)

    process_ms = round((time.perf_counter() - start_time) * 1000, 2)
    response.headers["X-Process-Time-Ms"] = str(process_ms)

    if request.url.path in STREAM_PATHS:
        return response

    level = logging.WARNING if response.status_code >= 500 else logging.INFO
    logger.log(
        level,
        "",
        extra={
            "client_addr": request.client.host if request.client else "unknown",
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "process_time_ms": process_ms,
        },
    )

    return response
