"""
Request ID middleware.

Associates each HTTP request with a request id: the incoming `X-Request-ID`
header when it is a sane value, otherwise a fresh UUID4. The id is stored in
the logging ContextVar (see `filters.py`) for the duration of the request and
echoed back in the `X-Request-ID` response header.
"""

import re
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from .filters import set_request_id, reset_request_id

REQUEST_ID_HEADER = "X-Request-ID"

# Upstream ids are echoed into logs; keep them short and free of control characters.
_ACCEPTABLE_ID = re.compile(r"^[A-Za-z0-9._:-]{1,128}$")


class RequestIDMiddleware(BaseHTTPMiddleware):

    async def dispatch(self, request: Request, call_next):
        incoming = request.headers.get(REQUEST_ID_HEADER)
        rid = incoming if incoming and _ACCEPTABLE_ID.match(incoming) else str(uuid.uuid4())

        token = set_request_id(rid)
        try:
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = rid
            return response
        finally:
            reset_request_id(token)
