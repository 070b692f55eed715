from __future__ import annotations

import os
from typing import Dict, List

from botocore.exceptions import ClientError

from .client import new_dynamo_client
from ..logging_setup import get_logger

log = get_logger(__name__)

USERS_TABLE_ENV = "DDB_TABLE_USERS"

USERS_TABLE_SPEC = {
  "KeySchema":[{"AttributeName":"UserId","KeyType":"HASH"}],
  "AttributeDefinitions":[{"AttributeName":"UserId","AttributeType":"S"}],
  "ProvisionedThroughput":{"ReadCapacityUnits":5,"WriteCapacityUnits":5}
}


def users_table_name() -> str:
    return os.getenv(USERS_TABLE_ENV, "Users")


def table_specs() -> Dict[str, dict]:
    return {users_table_name(): USERS_TABLE_SPEC}


def list_table_names(client) -> List[str]:
    names: List[str] = []
    for page in client.get_paginator("list_tables").paginate():
        names.extend(page.get("TableNames", []))
    return names


def ensure_tables(client=None) -> List[str]:
    """
    Create any table from table_specs() that does not exist yet and wait until it is ACTIVE.
    Returns the names of the tables this call created.
    """
    client = client or new_dynamo_client()
    existing = set(list_table_names(client))
    created: List[str] = []
    for name, spec in table_specs().items():
        if name in existing:
            continue
        try:
            client.create_table(TableName=name, **spec)
        except ClientError as e:
            if e.response["Error"]["Code"] != "ResourceInUseException":
                raise
            log.info("Table %s is already being created", name)
        else:
            created.append(name)
        client.get_waiter("table_exists").wait(TableName=name)
    if created:
        log.info("Created DynamoDB tables: %s", ", ".join(created))
    return created

