"""slowapi によるレート制限設定."""

import logging

from fastapi import Request, Response
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.responses import JSONResponse

from hero_api.settings.settings import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()

# /api 配下の全エンドポイントで1つのバケットを共有する
API_LIMIT_SCOPE = "api"

limiter = Limiter(
    key_func=get_remote_address,
    storage_uri="memory://",
    enabled=settings.rate_limit_enabled,
)

api_limit = limiter.shared_limit(settings.rate_limit, scope=API_LIMIT_SCOPE)


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> Response:
    """レート制限超過時のレスポンスを返す."""
    logger.warning(
        "rate limit exceeded: client=%s path=%s limit=%s",
        get_remote_address(request),
        request.url.path,
        exc.detail,
    )
    return JSONResponse(
        status_code=429,
        content={
            "status": "error",
            "message": "Too many requests, please try again later.",
        },
    )
