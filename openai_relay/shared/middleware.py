import time
import uuid
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from openai_relay.shared.config import logger

REQUEST_ID_HEADER = "X-Request-ID"

class RelayContextMiddleware(BaseHTTPMiddleware):
    """
    Tags each request with an id, times it and logs one summary line.

    The relay endpoint stores the envelope outcome on ``request.state.relay_outcome``
    so the summary says whether the relay succeeded and, if not, which kind of
    failure produced the 400.
    """
    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id
        started = time.perf_counter()

        response = await call_next(request)

        elapsed = time.perf_counter() - started
        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers["X-Process-Time"] = f"{elapsed:.4f}"

        outcome = getattr(request.state, "relay_outcome", None)
        logger.info(
            "%s %s -> %s in %.4fs (request %s%s)",
            request.method, request.url.path, response.status_code, elapsed, request_id,
            f", relay {outcome}" if outcome else "",
        )
        return response
