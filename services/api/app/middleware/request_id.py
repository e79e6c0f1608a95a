from app.core.logging import ensure_request_id, request_id_ctx_var
from starlette.middleware.base import BaseHTTPMiddleware


class RequestIdMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request, call_next):
        req_id = ensure_request_id(request.headers.get("X-Request-Id"))
        request.state.request_id = req_id
        token = request_id_ctx_var.set(req_id)
        try:
            response = await call_next(request)
        finally:
            request_id_ctx_var.reset(token)
        response.headers["X-Request-Id"] = req_id
        return response
