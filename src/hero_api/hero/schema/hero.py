"""ヒーローのリクエスト/レスポンススキーマ."""

from datetime import date, datetime
from typing import Annotated

from pydantic import (
    AfterValidator,
    AnyUrl,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
)
from pydantic.alias_generators import to_camel

from hero_api.database.model.hero import TEXT_MAX_LENGTH, URL_MAX_LENGTH

_url_adapter = TypeAdapter(AnyUrl)
_datetime_adapter = TypeAdapter(datetime)


def _check_avatar_url(value: str) -> str:
    """URL形式であることを検証する(空文字は許可、値はそのまま保持)."""
    if value == "":
        return value
    try:
        _url_adapter.validate_python(value)
    except ValidationError:
        raise ValueError("must be a valid URL or an empty string") from None
    return value


def _truncate_datetime(value: object) -> object:
    """ISO 8601 の日時文字列は日付部分のみを採用する(時刻は切り捨て)."""
    if not isinstance(value, str) or "T" not in value:
        return value
    try:
        return _datetime_adapter.validate_python(value).date()
    except ValidationError:
        # date としての検証エラーをそのまま報告させる
        return value


Name = Annotated[str, Field(min_length=3, max_length=TEXT_MAX_LENGTH)]
Nickname = Annotated[str, Field(min_length=3, max_length=TEXT_MAX_LENGTH)]
NonEmpty = Annotated[str, Field(min_length=1, max_length=TEXT_MAX_LENGTH)]
AvatarUrl = Annotated[
    str,
    Field(max_length=URL_MAX_LENGTH),
    AfterValidator(_check_avatar_url),
]
BirthDate = Annotated[date, BeforeValidator(_truncate_datetime)]


class _HeroInput(BaseModel):
    """リクエストボディ共通設定(ワイヤ上はcamelCase)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class HeroCreate(_HeroInput):
    """ヒーロー登録リクエスト(全項目必須)."""

    name: Name
    nickname: Nickname
    date_of_birth: BirthDate
    universe: NonEmpty
    main_power: NonEmpty
    avatar_url: AvatarUrl


class HeroUpdate(_HeroInput):
    """ヒーロー更新リクエスト(全項目任意、指定された項目のみ更新)."""

    name: Name | None = None
    nickname: Nickname | None = None
    date_of_birth: BirthDate | None = None
    universe: NonEmpty | None = None
    main_power: NonEmpty | None = None
    avatar_url: AvatarUrl | None = None

    def changes(self) -> dict[str, object]:
        """明示的に指定された(null以外の)項目のみを辞書で返す."""
        return self.model_dump(exclude_unset=True, exclude_none=True)


class HeroResponse(BaseModel):
    """ヒーローレスポンススキーマ(ワイヤ形式、snake_case)."""

    id: str
    name: str
    nickname: str
    date_of_birth: str
    universe: str
    main_power: str
    avatar_url: str
    is_active: bool
    created_at: str
    updated_at: str


class HeroListResponse(BaseModel):
    """ヒーロー一覧レスポンススキーマ."""

    model_config = ConfigDict(populate_by_name=True)

    heroes: list[HeroResponse]
    total: int
    page: int
    limit: int
    total_pages: int = Field(alias="totalPages")
