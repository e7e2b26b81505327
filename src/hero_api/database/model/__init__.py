"""データベースモデルを一括エクスポートするモジュール.

新しいモデルを追加する際は、ここにインポート文を1行追加するだけで
``SQLModel.metadata`` に登録され、起動時のテーブル作成対象になります。

Example:
-------
    新しいモデル `Team` を追加した場合:
    ```python
    from .team import Team
    ```

"""

from .hero import Hero

__all__ = ["Hero"]
