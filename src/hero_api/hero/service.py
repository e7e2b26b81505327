"""ヒーローのサービスモジュール."""

import logging
import uuid
from collections.abc import Sequence
from typing import Annotated

from fastapi import Depends

from hero_api.common.errors import BadRequestError, NotFoundError
from hero_api.common.log_prefix import LogPrefix
from hero_api.database.model.hero import Hero
from hero_api.database.repository.hero_repository import (
    HeroRepository,
    get_hero_repository,
)
from hero_api.hero.schema import HeroCreate, HeroUpdate

logger = logging.getLogger(__name__)


class HeroService:
    """ヒーローに関するビジネスロジックを提供するサービス.

    論理削除(is_active=False)されたヒーローは参照・更新の対象外とする。

    Attributes
    ----------
        repository: Heroリポジトリ

    """

    def __init__(self, repository: HeroRepository) -> None:
        """HeroServiceを初期化.

        Args:
        ----
            repository: Heroリポジトリ

        """
        self.repository = repository

    async def create(self, data: HeroCreate) -> Hero:
        """ヒーローを登録."""
        return await self.repository.create(data)

    async def find_all(
        self,
        page: int = 1,
        limit: int = 10,
        search: str | None = None,
    ) -> tuple[Sequence[Hero], int]:
        """ヒーロー一覧と総件数を取得."""
        return await self.repository.find_all(page, limit, search)

    async def find_by_id(self, hero_id: uuid.UUID) -> Hero:
        """有効なヒーローをIDで取得.

        Raises
        ------
            NotFoundError: 存在しない、または論理削除済みの場合

        """
        hero = await self.repository.find_by_id(hero_id)
        if hero is None or not hero.is_active:
            raise NotFoundError("Hero not found")
        return hero

    async def update(self, hero_id: uuid.UUID, data: HeroUpdate) -> Hero:
        """有効なヒーローを更新.

        対象が存在しない/論理削除済みの場合は書き込み前に NotFoundError となる。
        """
        await self.find_by_id(hero_id)
        return await self.repository.update(hero_id, data)

    async def delete(self, hero_id: uuid.UUID) -> Hero:
        """ヒーローを論理削除(可視性チェックはリポジトリに委ねる)."""
        return await self.repository.delete(hero_id)

    async def activate(self, hero_id: uuid.UUID) -> Hero:
        """論理削除済みのヒーローを再有効化.

        Raises
        ------
            NotFoundError: 存在しない場合
            BadRequestError: 既に有効な場合

        """
        hero = await self.repository.find_by_id(hero_id)
        if hero is None:
            raise NotFoundError("Hero not found")
        if hero.is_active:
            logger.info(f"{LogPrefix.HERO_ACTIVATE} already active: id=%s", hero_id)
            raise BadRequestError("Hero is already active")
        return await self.repository.activate(hero_id)


async def get_hero_service(
    repository: Annotated[HeroRepository, Depends(get_hero_repository)],
) -> HeroService:
    """FastAPI DI用のHeroServiceファクトリ.

    Returns
    -------
        HeroService

    """
    return HeroService(repository=repository)
