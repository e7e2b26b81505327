"""ログプレフィックス定数."""


class LogPrefix:
    """ロギング用プレフィックス定数."""

    HTTP_ACCESS = "[HTTP_ACCESS]"
    HERO_CREATE = "[HERO_CREATE]"
    HERO_UPDATE = "[HERO_UPDATE]"
    HERO_DELETE = "[HERO_DELETE]"
    HERO_ACTIVATE = "[HERO_ACTIVATE]"
    SEED_JOB = "[SEED_JOB]"
