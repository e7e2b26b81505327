"""Heroモデルとワイヤ形式(レスポンス)の相互変換."""

from datetime import UTC, datetime

from hero_api.database.model.hero import Hero
from hero_api.hero.schema import HeroCreate, HeroResponse


def _to_iso(value: datetime) -> str:
    # SQLiteなどタイムゾーンを保持しないDBから読んだ値はUTCとして扱う
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.isoformat()


def to_hero_response(hero: Hero) -> HeroResponse:
    """HeroモデルをAPIレスポンス形式に変換する."""
    return HeroResponse(
        id=str(hero.id),
        name=hero.name,
        nickname=hero.nickname,
        date_of_birth=hero.date_of_birth.isoformat(),
        universe=hero.universe,
        main_power=hero.main_power,
        avatar_url=hero.avatar_url,
        is_active=hero.is_active,
        created_at=_to_iso(hero.created_at),
        updated_at=_to_iso(hero.updated_at),
    )


def to_hero_create(response: HeroResponse) -> HeroCreate:
    """レスポンス形式から登録リクエストを復元する.

    サーバー側で採番/設定される項目(id, is_active, created_at, updated_at)は破棄する。
    """
    return HeroCreate(
        name=response.name,
        nickname=response.nickname,
        date_of_birth=response.date_of_birth,
        universe=response.universe,
        main_power=response.main_power,
        avatar_url=response.avatar_url,
    )
