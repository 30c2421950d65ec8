from starlette.requests import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse
from acrolinx_bridge.core import config

class BodySizeLimitMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        cl = request.headers.get("content-length")
        try:
            if cl is not None and int(cl) > config.MAX_BUFFER_BYTES:
                return JSONResponse(status_code=413, content={"detail": "Buffer too large"})
        except ValueError:
            return JSONResponse(status_code=400, content={"detail": "Bad Content-Length"})
        return await call_next(request)
