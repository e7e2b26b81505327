"""データベース接続とセッション管理を提供するモジュール."""

from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from hero_api.database.model import Hero  # noqa: F401  (メタデータ登録用)
from hero_api.settings.settings import get_settings

settings = get_settings()
db_url = settings.db_url


def _connect_args(url: str) -> dict[str, Any]:
    """接続先ドライバに応じた connect_args を返す."""
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {"server_settings": {"timezone": "UTC"}}


async_engine = create_async_engine(
    url=db_url,
    echo=settings.sql_log,
    connect_args=_connect_args(db_url),
)


async def create_tables(engine: AsyncEngine = async_engine) -> None:
    """モデル定義に基づいてテーブルを作成する(既存テーブルはそのまま)."""
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def get_async_db_session() -> AsyncGenerator[AsyncSession]:
    """非同期データベースセッションを生成する.

    FastAPIの依存性注入で使用されるジェネレーター関数。
    セッションのライフサイクルを管理し、リクエスト終了時に自動的にクローズする。

    Yields
    ------
        AsyncSession: 非同期データベースセッション

    """
    async with AsyncSession(async_engine, expire_on_commit=False) as session:
        yield session
