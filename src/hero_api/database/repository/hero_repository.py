"""Heroテーブルのリポジトリモジュール."""

import logging
import uuid
from collections.abc import Sequence
from typing import Annotated

from fastapi import Depends
from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlmodel import col, select
from sqlmodel.ext.asyncio.session import AsyncSession

from hero_api.common.errors import ConflictError, NotFoundError
from hero_api.common.log_prefix import LogPrefix
from hero_api.database.database import get_async_db_session
from hero_api.database.model.hero import Hero, utcnow
from hero_api.hero.schema import HeroCreate, HeroUpdate

# PostgreSQL unique_violation
UNIQUE_VIOLATION_SQLSTATE = "23505"

logger = logging.getLogger(__name__)


def _escape_like(term: str) -> str:
    """LIKE のワイルドカード文字をエスケープする."""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _is_unique_violation(error: IntegrityError) -> bool:
    orig = getattr(error, "orig", None)
    if getattr(orig, "sqlstate", None) == UNIQUE_VIOLATION_SQLSTATE:
        return True
    return "UNIQUE constraint failed" in str(orig)


class HeroRepository:
    """Heroテーブルへのデータアクセスを提供するリポジトリ.

    DBの一意制約違反はここで ConflictError に変換し、
    SQLAlchemyの例外を呼び出し側へ漏らさない。

    Attributes
    ----------
        session: 非同期DBセッション

    """

    def __init__(self, session: AsyncSession) -> None:
        """HeroRepositoryを初期化.

        Args:
        ----
            session: 非同期DBセッション

        """
        self.session = session

    # --- パブリックメソッド ---

    async def create(self, data: HeroCreate) -> Hero:
        """ヒーローを登録.

        Args:
        ----
            data: 登録内容

        Returns:
        -------
            登録したHero

        Raises:
        ------
            ConflictError: nicknameが既に使われている場合

        """
        if await self._nickname_exists(data.nickname):
            logger.info(
                f"{LogPrefix.HERO_CREATE} rejected, nickname exists: %s",
                data.nickname,
            )
            raise ConflictError("Hero creation failed: nickname already exists.")

        hero = Hero(**data.model_dump())
        self.session.add(hero)
        await self._commit("Hero creation failed")
        await self.session.refresh(hero)

        logger.info(f"{LogPrefix.HERO_CREATE} id=%s nickname=%s", hero.id, hero.nickname)
        return hero

    async def find_all(
        self,
        page: int,
        limit: int,
        search: str | None = None,
    ) -> tuple[Sequence[Hero], int]:
        """ヒーローをページ単位で取得(作成日時の降順).

        Args:
        ----
            page: ページ番号(1始まり)
            limit: 1ページあたりの件数
            search: name / nickname の部分一致検索語(大文字小文字を区別しない)

        Returns:
        -------
            (該当ページのHeroリスト, 検索条件に一致する総件数)

        """
        offset = (page - 1) * limit

        stmt = select(Hero)
        count_stmt = select(func.count()).select_from(Hero)
        if search:
            pattern = f"%{_escape_like(search)}%"
            condition = or_(
                col(Hero.name).ilike(pattern, escape="\\"),
                col(Hero.nickname).ilike(pattern, escape="\\"),
            )
            stmt = stmt.where(condition)
            count_stmt = count_stmt.where(condition)

        stmt = (
            stmt.order_by(col(Hero.created_at).desc())
            .offset(offset)
            .limit(limit)
        )

        # ページ内容と総件数は同一セッション・同一トランザクション内で取得する
        heroes = (await self.session.exec(stmt)).all()
        total = (await self.session.exec(count_stmt)).one()
        return heroes, total

    async def find_by_id(self, hero_id: uuid.UUID) -> Hero | None:
        """IDでヒーローを取得(is_active 問わず、存在しなければNone)."""
        return await self.session.get(Hero, hero_id, populate_existing=True)

    async def update(self, hero_id: uuid.UUID, data: HeroUpdate) -> Hero:
        """指定された項目のみヒーローを更新.

        Args:
        ----
            hero_id: 対象ヒーローのID
            data: 更新内容(未指定の項目は変更しない)

        Returns:
        -------
            更新後のHero

        Raises:
        ------
            ConflictError: nicknameが他のヒーローで使われている場合
            NotFoundError: 対象が存在しない場合

        """
        changes = data.changes()

        if "nickname" in changes and await self._nickname_exists(
            changes["nickname"], exclude_id=hero_id
        ):
            logger.info(
                f"{LogPrefix.HERO_UPDATE} rejected, nickname exists: %s",
                changes["nickname"],
            )
            raise ConflictError("Hero update failed: nickname already exists.")

        hero = await self._get_or_raise(hero_id)
        hero.sqlmodel_update(changes)
        hero.updated_at = utcnow()
        self.session.add(hero)
        await self._commit("Hero update failed")
        await self.session.refresh(hero)

        logger.info(
            f"{LogPrefix.HERO_UPDATE} id=%s fields=%s", hero_id, sorted(changes)
        )
        return hero

    async def delete(self, hero_id: uuid.UUID) -> Hero:
        """ヒーローを論理削除(is_active=False).

        Raises
        ------
            NotFoundError: 対象が存在しない場合

        """
        hero = await self._set_active(hero_id, active=False)
        logger.info(f"{LogPrefix.HERO_DELETE} id=%s", hero_id)
        return hero

    async def activate(self, hero_id: uuid.UUID) -> Hero:
        """ヒーローを再有効化(is_active=True).

        Raises
        ------
            NotFoundError: 対象が存在しない場合

        """
        hero = await self._set_active(hero_id, active=True)
        logger.info(f"{LogPrefix.HERO_ACTIVATE} id=%s", hero_id)
        return hero

    # --- プライベートメソッド ---

    async def _nickname_exists(
        self,
        nickname: str,
        exclude_id: uuid.UUID | None = None,
    ) -> bool:
        """nicknameが使用済みか確認(is_active 問わず)."""
        stmt = select(Hero.id).where(col(Hero.nickname) == nickname)
        if exclude_id is not None:
            stmt = stmt.where(col(Hero.id) != exclude_id)
        result = await self.session.exec(stmt)
        return result.first() is not None

    async def _get_or_raise(self, hero_id: uuid.UUID) -> Hero:
        hero = await self.find_by_id(hero_id)
        if hero is None:
            raise NotFoundError(f"Hero with ID {hero_id} not found")
        return hero

    async def _set_active(self, hero_id: uuid.UUID, *, active: bool) -> Hero:
        hero = await self._get_or_raise(hero_id)
        hero.is_active = active
        hero.updated_at = utcnow()
        self.session.add(hero)
        await self._commit("Hero update failed")
        await self.session.refresh(hero)
        return hero

    async def _commit(self, action: str) -> None:
        """コミットし、一意制約違反を ConflictError に変換する.

        事前チェックと INSERT/UPDATE の間に競合が起きた場合も
        DBの一意インデックスがここで検出する。
        """
        try:
            await self.session.commit()
        except IntegrityError as error:
            await self.session.rollback()
            if not _is_unique_violation(error):
                raise
            field = "nickname" if "nickname" in str(error.orig) else "unique constraint"
            logger.warning(
                "unique constraint violated on commit: action=%s field=%s",
                action,
                field,
            )
            raise ConflictError(f"{action}: {field} already exists.") from error


async def get_hero_repository(
    session: Annotated[AsyncSession, Depends(get_async_db_session)],
) -> HeroRepository:
    """FastAPI DI用のHeroRepositoryファクトリ.

    Returns
    -------
        HeroRepository

    """
    return HeroRepository(session)
