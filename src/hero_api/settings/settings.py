"""アプリケーション設定を管理するモジュール."""

from functools import lru_cache

from pydantic import computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """アプリケーション全体の設定を管理するクラス.

    環境変数(または .env)から設定値を読み込み、データベース接続情報などを提供する。

    Attributes
    ----------
        environment: 実行環境(development, production等)
        postgres_host: PostgreSQLホスト名
        postgres_port: PostgreSQLポート番号
        postgres_user: PostgreSQLユーザー名
        postgres_password: PostgreSQLパスワード
        postgres_database: PostgreSQLデータベース名
        database_url: 接続URLの上書き(例: sqlite+aiosqlite:///./heroes.db)
        sql_log: SQLログの出力有無(デフォルト: False)
        log_level: ログレベル(デフォルト: INFO)
        auto_create_tables: 起動時にテーブルを作成するか
        cors_allow_origins: CORSで許可するオリジン
        rate_limit_enabled: /api のレート制限を有効にするか
        rate_limit: /api に適用するレート制限(slowapi形式)

    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    environment: str = "development"

    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_user: str = "postgres"
    postgres_password: str = "postgres"
    postgres_database: str = "heroes"

    database_url: str | None = None

    sql_log: bool = False
    log_level: str = "INFO"
    auto_create_tables: bool = True

    cors_allow_origins: list[str] = ["*"]

    rate_limit_enabled: bool = True
    rate_limit: str = "100/15minutes"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def postgres_driver_url(self) -> str:
        """PostgreSQLの非同期接続URLを生成する.

        Returns
        -------
            str: asyncpg用のPostgreSQL接続URL

        """
        return (
            f"postgresql+asyncpg://{self.postgres_user}:{self.postgres_password}@"
            f"{self.postgres_host}:{self.postgres_port}/{self.postgres_database}"
        )

    @property
    def db_url(self) -> str:
        """実際に使用する接続URL(上書き指定があればそれを優先)."""
        return self.database_url or self.postgres_driver_url


@lru_cache
def get_settings() -> Settings:
    """アプリケーション設定のシングルトンインスタンスを取得する.

    LRUキャッシュにより同一インスタンスを再利用し、
    環境変数の読み込みコストを削減する。

    Returns
    -------
        Settings: アプリケーション設定オブジェクト

    """
    return Settings()
