from __future__ import annotations

import os
from typing import Optional
from urllib.parse import urlsplit

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError

from ..errors import ConfigurationError
from ..logging_setup import get_logger, with_extras

log = get_logger(__name__)

ENDPOINT_ENV = "DYNAMODB_ENDPOINT"

# Only meaningful against DynamoDB Local, which does not check signatures.
LOCAL_REGION = "ap-northeast-1"
LOCAL_ACCESS_KEY_ID = "dummy"
LOCAL_SECRET_ACCESS_KEY = "dummy"

_LOOPBACK_HOSTS = {"localhost", "127.0.0.1", "::1"}


def _client_config() -> Config:
    return Config(retries={"mode": "standard"})


def _parse_endpoint(endpoint: str) -> str:
    """Return *endpoint* unchanged if it is an absolute http(s) URI, else raise."""
    # urlsplit strips surrounding whitespace, so check the raw string first
    if any(ch.isspace() or not ch.isprintable() for ch in endpoint):
        raise ConfigurationError(f"{ENDPOINT_ENV} is not a valid URI: {endpoint!r}")
    try:
        parts = urlsplit(endpoint)
        # .port raises ValueError on garbage like "http://host:abc"
        parts.port
    except ValueError as exc:
        raise ConfigurationError(f"{ENDPOINT_ENV} is not a valid URI: {endpoint!r}") from exc
    if parts.scheme not in ("http", "https") or not parts.hostname:
        raise ConfigurationError(f"{ENDPOINT_ENV} is not a valid URI: {endpoint!r}")
    return endpoint


def _is_loopback(endpoint: str) -> bool:
    host = (urlsplit(endpoint).hostname or "").lower()
    return host in _LOOPBACK_HOSTS or host.endswith(".localhost")


def _local_client(endpoint: str):
    endpoint_url = _parse_endpoint(endpoint)
    logger = with_extras(log, endpoint=endpoint_url, region=LOCAL_REGION)
    try:
        session = boto3.session.Session(
            aws_access_key_id=LOCAL_ACCESS_KEY_ID,
            aws_secret_access_key=LOCAL_SECRET_ACCESS_KEY,
            region_name=LOCAL_REGION,
        )
        client = session.client("dynamodb", endpoint_url=endpoint_url, config=_client_config())
    except (BotoCoreError, ValueError) as exc:
        raise ConfigurationError(f"could not build DynamoDB client for {endpoint_url}: {exc}") from exc
    if not _is_loopback(endpoint_url):
        logger.warning("Placeholder credentials used with a non-local DynamoDB endpoint")
    logger.info("DynamoDB client bound to local endpoint")
    return client


def _ambient_client():
    try:
        session = boto3.session.Session()
        region = session.region_name
        if not region:
            raise ConfigurationError("no AWS region configured (set AWS_REGION or a profile region)")
        if session.get_credentials() is None:
            raise ConfigurationError("no AWS credentials found in the default provider chain")
        client = session.client("dynamodb", config=_client_config())
    except BotoCoreError as exc:
        raise ConfigurationError(f"could not load AWS configuration: {exc}") from exc
    with_extras(log, region=region, endpoint=client.meta.endpoint_url).info("DynamoDB client bound to AWS")
    return client


def new_dynamo_client(endpoint: Optional[str] = None):
    """
    Switches between DynamoDB Local and AWS.
    - For local: set DYNAMODB_ENDPOINT (e.g. http://localhost:8000)
    - For AWS:   leave it unset and configure region/credentials as usual

    No network call is made here; the first request opens the connection.
    """
    if endpoint is None:
        endpoint = os.getenv(ENDPOINT_ENV)
    if endpoint:
        return _local_client(endpoint)
    return _ambient_client()
