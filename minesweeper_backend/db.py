from __future__ import annotations

from dotenv import load_dotenv

from .dynamo.tables import ensure_tables


def init_db() -> None:
    """
    Initialize DynamoDB tables (no-op if they already exist).

    Run this against DynamoDB Local before the first put_test_user run.
    """
    ensure_tables()


def main() -> None:
    load_dotenv()
    init_db()


if __name__ == "__main__":
    main()
