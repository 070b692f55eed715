"""Write a single test user to the Users table.

Usage:
    DYNAMODB_ENDPOINT=http://localhost:8000 python -m minesweeper_backend.put_test_user
    python -m minesweeper_backend.put_test_user      # ambient AWS configuration

Running it again overwrites the same item; the key is fixed.
"""

from __future__ import annotations

import argparse
import datetime as dt
import json
import sys
from typing import Any, Dict, List, Optional

from botocore.exceptions import BotoCoreError, ClientError
from boto3.dynamodb.types import TypeSerializer
from dotenv import load_dotenv

from .dynamo.client import new_dynamo_client
from .dynamo.tables import users_table_name
from .errors import DynamoSetupError, WriteError
from .logging_setup import get_logger, with_extras

log = get_logger(__name__)

TEST_USER_ID = "test-user-001"
TEST_DISPLAY_NAME = "Tester"

_serializer = TypeSerializer()


def rfc3339_utc(now: Optional[dt.datetime] = None) -> str:
    now = now or dt.datetime.now(dt.timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=dt.timezone.utc)
    return now.astimezone(dt.timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def build_test_user(now: Optional[dt.datetime] = None) -> Dict[str, str]:
    return {
        "UserId": TEST_USER_ID,
        "DisplayName": TEST_DISPLAY_NAME,
        "CreatedAt": rfc3339_utc(now),
    }


def to_attribute_values(record: Dict[str, Any]) -> Dict[str, Dict[str, Any]]:
    """Serialize a plain record to DynamoDB's typed wire form ({"S": ...})."""
    return {k: _serializer.serialize(v) for k, v in record.items()}


def put_test_user(client, *, table_name: Optional[str] = None, now: Optional[dt.datetime] = None) -> Dict[str, Dict[str, Any]]:
    """
    Upsert the test user and return the item that was sent.
    Raises WriteError if DynamoDB rejects the request or cannot be reached.
    """
    table_name = table_name or users_table_name()
    item = to_attribute_values(build_test_user(now))
    try:
        client.put_item(TableName=table_name, Item=item)
    except ClientError as e:
        code = e.response.get("Error", {}).get("Code")
        raise WriteError(f"PutItem on {table_name} failed: {e}", table_name=table_name, code=code) from e
    except BotoCoreError as e:
        raise WriteError(f"PutItem on {table_name} failed: {e}", table_name=table_name) from e
    with_extras(log, table=table_name, user_id=TEST_USER_ID).info("PutItem succeeded")
    return item


def _pretty(x) -> str:
    return json.dumps(x, ensure_ascii=False, indent=2, default=str)


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Write one test user to the DynamoDB Users table")
    ap.parse_args(argv)
    load_dotenv()

    try:
        client = new_dynamo_client()
    except DynamoSetupError:
        log.exception("DynamoDB client error")
        return 1

    try:
        item = put_test_user(client)
    except DynamoSetupError:
        log.exception("PutItem error")
        return 1

    print("PutItem Successful:", _pretty(item))
    return 0


if __name__ == "__main__":
    sys.exit(main())
