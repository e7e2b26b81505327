"""FastAPIアプリケーションのメインエントリーポイント."""

import logging
import time
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from starlette.responses import JSONResponse

from hero_api.common.errors import AppError
from hero_api.common.log_prefix import LogPrefix
from hero_api.common.ratelimit import limiter, rate_limit_exceeded_handler
from hero_api.database.database import async_engine, create_tables
from hero_api.hero.router import router as hero_router
from hero_api.settings.settings import get_settings

settings = get_settings()
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    """起動時にテーブルを作成し、終了時にDB接続を破棄する."""
    if settings.auto_create_tables:
        await create_tables()
    try:
        yield
    finally:
        await async_engine.dispose()


async def app_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """業務エラー(AppError)を対応するステータスで返す."""
    if not isinstance(exc, AppError):
        return await unhandled_exception_handler(request, exc)
    logger.info(
        "%s %s -> %s %s",
        request.method,
        request.url.path,
        exc.status_code,
        exc.message,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"status": "error", "message": exc.message},
    )


async def validation_exception_handler(
    request: Request, exc: Exception
) -> JSONResponse:
    """リクエスト検証エラーを400で全件返す."""
    if not isinstance(exc, RequestValidationError):
        return await unhandled_exception_handler(request, exc)
    errors = [
        {
            "path": ".".join(str(part) for part in error["loc"]),
            "message": error["msg"],
        }
        for error in exc.errors()
    ]
    logger.warning(
        "request validation failed: %s %s errors=%s",
        request.method,
        request.url.path,
        len(errors),
    )
    return JSONResponse(
        status_code=400,
        content={
            "status": "error",
            "message": "Invalid input data",
            "errors": errors,
        },
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """想定外の例外はログに詳細を残し、クライアントには汎用メッセージのみ返す."""
    logger.exception(
        "unhandled exception: %s %s (%s)",
        request.method,
        request.url.path,
        type(exc).__name__,
    )
    return JSONResponse(
        status_code=500,
        content={"status": "error", "message": "Internal Server Error"},
    )


def create_app() -> FastAPI:
    """アプリケーションを組み立てる.

    Returns
    -------
        FastAPI: ルーター・例外ハンドラ・ミドルウェア登録済みのアプリケーション

    """
    application = FastAPI(title="Hero API", lifespan=lifespan)

    application.state.limiter = limiter
    application.add_exception_handler(AppError, app_error_handler)
    application.add_exception_handler(
        RequestValidationError, validation_exception_handler
    )
    application.add_exception_handler(
        RateLimitExceeded,
        rate_limit_exceeded_handler,  # type: ignore[arg-type]
    )
    application.add_exception_handler(Exception, unhandled_exception_handler)

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @application.middleware("http")
    async def log_requests(
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        started = time.perf_counter()
        # 未処理例外は外側のハンドラで500になるため、ここでは500として記録して再送出する
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            logger.info(
                f"{LogPrefix.HTTP_ACCESS} %s %s %s %.1fms",
                request.method,
                request.url.path,
                status_code,
                (time.perf_counter() - started) * 1000,
            )

    application.include_router(hero_router, prefix="/api")

    @application.get("/health")
    async def health() -> dict[str, str]:
        """ヘルスチェック."""
        return {"status": "ok"}

    return application


app = create_app()
