"""ヒーロー初期データ投入バッチジョブ.

既定のヒーロー一覧(またはJSONファイル)をデータベースに登録する。
JSONファイルはAPIレスポンスと同じ形式(snake_case)のヒーロー配列とする。
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Annotated

import typer
from sqlalchemy import delete
from sqlmodel.ext.asyncio.session import AsyncSession

from hero_api.common.errors import ConflictError
from hero_api.common.log_prefix import LogPrefix
from hero_api.database.database import async_engine, create_tables
from hero_api.database.model.hero import Hero
from hero_api.database.repository import HeroRepository
from hero_api.hero.formatter import to_hero_create
from hero_api.hero.schema import HeroCreate, HeroResponse
from hero_api.settings.settings import get_settings

app = typer.Typer()

settings = get_settings()
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

DEFAULT_HEROES: list[dict[str, str]] = [
    {
        "name": "Bruce Wayne",
        "nickname": "Batman",
        "dateOfBirth": "1978-02-19",
        "universe": "DC",
        "mainPower": "Intelligence and technology",
        "avatarUrl": "",
    },
    {
        "name": "Clark Kent",
        "nickname": "Superman",
        "dateOfBirth": "1980-04-18",
        "universe": "DC",
        "mainPower": "Super strength and flight",
        "avatarUrl": "",
    },
    {
        "name": "Diana Prince",
        "nickname": "Wonder Woman",
        "dateOfBirth": "1985-07-22",
        "universe": "DC",
        "mainPower": "Superhuman strength and reflexes",
        "avatarUrl": "",
    },
    {
        "name": "Tony Stark",
        "nickname": "Iron Man",
        "dateOfBirth": "1975-05-29",
        "universe": "Marvel",
        "mainPower": "Intelligence and powered armor",
        "avatarUrl": "",
    },
    {
        "name": "Steve Rogers",
        "nickname": "Captain America",
        "dateOfBirth": "1920-07-04",
        "universe": "Marvel",
        "mainPower": "Enhanced strength and agility",
        "avatarUrl": "",
    },
    {
        "name": "Barry Allen",
        "nickname": "The Flash",
        "dateOfBirth": "1989-03-14",
        "universe": "DC",
        "mainPower": "Super speed",
        "avatarUrl": "",
    },
]


def load_heroes(file: Path | None) -> list[HeroCreate]:
    """投入対象のヒーローを読み込む.

    Args:
    ----
        file: APIレスポンス形式のJSONファイル(未指定なら既定の一覧)

    Returns:
    -------
        登録リクエストのリスト

    """
    if file is None:
        return [HeroCreate.model_validate(h) for h in DEFAULT_HEROES]

    raw = json.loads(file.read_text(encoding="utf-8"))
    return [to_hero_create(HeroResponse.model_validate(h)) for h in raw]


@app.command()
def main(
    file: Annotated[
        Path | None,
        typer.Option(help="APIレスポンス形式のヒーローJSONファイル"),
    ] = None,
    reset: Annotated[
        bool,
        typer.Option(help="投入前に既存データを全件削除する"),
    ] = False,
    dry_run: Annotated[
        bool,
        typer.Option(help="ドライランモード(DB書き込みなし)"),
    ] = False,
) -> None:
    """ヒーローの初期データをDBに投入する.

    Args:
    ----
        file: 投入するJSONファイル
        reset: 既存データを削除してから投入する
        dry_run: ドライランモード

    """
    heroes = load_heroes(file)
    asyncio.run(seed_heroes(heroes=heroes, reset=reset, dry_run=dry_run))


async def seed_heroes(
    heroes: list[HeroCreate],
    reset: bool,
    dry_run: bool,
    session: AsyncSession | None = None,
) -> int:
    """ヒーローを非同期で登録.

    nicknameが既に存在するヒーローはスキップする。

    Args:
    ----
        heroes: 登録するヒーロー
        reset: 既存データを削除してから投入する
        dry_run: ドライランモード
        session: 使用するセッション(未指定なら新規作成)

    Returns:
    -------
        登録した件数

    """
    logger.info(
        f"{LogPrefix.SEED_JOB} Starting with heroes={len(heroes)}, "
        f"reset={reset}, dry_run={dry_run}"
    )

    if dry_run:
        for hero in heroes:
            logger.info(f"{LogPrefix.SEED_JOB} DRY RUN - would insert {hero.nickname}")
        return 0

    if session is None:
        await create_tables()
        async with AsyncSession(async_engine, expire_on_commit=False) as new_session:
            return await _insert_heroes(new_session, heroes, reset)
    return await _insert_heroes(session, heroes, reset)


async def _insert_heroes(
    session: AsyncSession,
    heroes: list[HeroCreate],
    reset: bool,
) -> int:
    if reset:
        await session.exec(delete(Hero))  # type: ignore[call-overload]
        await session.commit()
        logger.info(f"{LogPrefix.SEED_JOB} existing heroes removed")

    repo = HeroRepository(session)
    inserted = 0
    for hero in heroes:
        try:
            await repo.create(hero)
        except ConflictError:
            logger.warning(
                f"{LogPrefix.SEED_JOB} {hero.nickname} already exists, skipping"
            )
            continue
        inserted += 1

    logger.info(f"{LogPrefix.SEED_JOB} Completed: inserted={inserted}")
    return inserted


if __name__ == "__main__":
    app()
