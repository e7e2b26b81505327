"""ヒーロースキーマモジュール."""

from .hero import HeroCreate, HeroListResponse, HeroResponse, HeroUpdate

__all__ = [
    "HeroCreate",
    "HeroListResponse",
    "HeroResponse",
    "HeroUpdate",
]
