from __future__ import annotations

from typing import Optional


class DynamoSetupError(Exception):
    """Base class for failures that end the process."""


class ConfigurationError(DynamoSetupError):
    """The DynamoDB client could not be configured (bad endpoint, no region or credentials)."""


class WriteError(DynamoSetupError):
    """A write was rejected by DynamoDB or never reached it."""

    def __init__(self, message: str, *, table_name: str, code: Optional[str] = None) -> None:
        super().__init__(message)
        self.table_name = table_name
        self.code = code
