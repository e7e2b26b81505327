"""ヒーローのデータモデルを定義するモジュール."""

import uuid
from datetime import UTC, date, datetime

from sqlalchemy import Column, DateTime
from sqlmodel import Field, SQLModel

# VARCHAR の長さ(リクエストスキーマでも同じ上限を検証する)
TEXT_MAX_LENGTH = 255
URL_MAX_LENGTH = 2048


def utcnow() -> datetime:
    """タイムゾーン付きの現在時刻(UTC)を返す."""
    return datetime.now(UTC)


class Hero(SQLModel, table=True):
    """ヒーローを表すデータベースモデル.

    Attributes
    ----------
        id: ヒーローの一意識別子(UUID、主キー)
        name: ヒーローの本名 (例: Clark Kent)
        nickname: ヒーロー名(全ヒーローで一意) (例: Superman)
        date_of_birth: 生年月日
        universe: 所属ユニバース (例: DC, Marvel)
        main_power: 主な能力
        avatar_url: アバター画像URL(空文字可)
        is_active: 有効フラグ(False=論理削除)
        created_at: 登録日時
        updated_at: 更新日時

    """

    __tablename__ = "heroes"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
    )
    name: str = Field(max_length=TEXT_MAX_LENGTH)
    nickname: str = Field(
        max_length=TEXT_MAX_LENGTH,
        unique=True,
        index=True,
    )
    date_of_birth: date
    universe: str = Field(max_length=TEXT_MAX_LENGTH)
    main_power: str = Field(max_length=TEXT_MAX_LENGTH)
    avatar_url: str = Field(default="", max_length=URL_MAX_LENGTH)
    is_active: bool = Field(
        default=True,
        index=True,
    )
    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True),
    )
    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
