"""アプリケーション共通の例外クラス."""


class AppError(Exception):
    """HTTPステータスに対応付けられた業務エラーの基底クラス.

    Attributes
    ----------
        message: クライアントへ返すメッセージ
        status_code: 対応するHTTPステータスコード

    """

    status_code: int = 400

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class NotFoundError(AppError):
    """対象リソースが存在しない(または論理削除済み)."""

    status_code = 404

    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message)


class BadRequestError(AppError):
    """入力は正しいが業務ルールに違反している."""

    status_code = 400

    def __init__(self, message: str = "Bad request") -> None:
        super().__init__(message)


class ConflictError(AppError):
    """一意制約違反."""

    status_code = 409

    def __init__(self, message: str = "Conflict") -> None:
        super().__init__(message)
