"""ヒーローAPIのルーター定義."""

import math
import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, status

from hero_api.common.ratelimit import api_limit
from hero_api.hero.formatter import to_hero_response
from hero_api.hero.schema import (
    HeroCreate,
    HeroListResponse,
    HeroResponse,
    HeroUpdate,
)
from hero_api.hero.service import HeroService, get_hero_service

router = APIRouter(prefix="/heroes", tags=["heroes"])

Service = Annotated[HeroService, Depends(get_hero_service)]


@router.get("", response_model=HeroListResponse)
@api_limit
async def list_heroes(
    request: Request,
    service: Service,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 10,
    search: Annotated[str | None, Query()] = None,
) -> HeroListResponse:
    """ヒーロー一覧をページ単位で返す(name / nickname で検索可)."""
    heroes, total = await service.find_all(page, limit, search)
    return HeroListResponse(
        heroes=[to_hero_response(h) for h in heroes],
        total=total,
        page=page,
        limit=limit,
        total_pages=math.ceil(total / limit),
    )


@router.get("/{hero_id}", response_model=HeroResponse)
@api_limit
async def get_hero(
    request: Request,
    hero_id: uuid.UUID,
    service: Service,
) -> HeroResponse:
    """有効なヒーローを1件返す."""
    return to_hero_response(await service.find_by_id(hero_id))


@router.post("", response_model=HeroResponse, status_code=status.HTTP_201_CREATED)
@api_limit
async def create_hero(
    request: Request,
    body: HeroCreate,
    service: Service,
) -> HeroResponse:
    """ヒーローを登録する."""
    return to_hero_response(await service.create(body))


@router.put("/{hero_id}", response_model=HeroResponse)
@api_limit
async def update_hero(
    request: Request,
    hero_id: uuid.UUID,
    body: HeroUpdate,
    service: Service,
) -> HeroResponse:
    """指定された項目のみヒーローを更新する."""
    return to_hero_response(await service.update(hero_id, body))


@router.delete("/{hero_id}", response_model=HeroResponse)
@api_limit
async def delete_hero(
    request: Request,
    hero_id: uuid.UUID,
    service: Service,
) -> HeroResponse:
    """ヒーローを論理削除する."""
    return to_hero_response(await service.delete(hero_id))


@router.patch("/{hero_id}/activate", response_model=HeroResponse)
@api_limit
async def activate_hero(
    request: Request,
    hero_id: uuid.UUID,
    service: Service,
) -> HeroResponse:
    """論理削除されたヒーローを再有効化する."""
    return to_hero_response(await service.activate(hero_id))
