"""Lazy-initialized boto3 clients: reused across warm Lambda invocations."""

from functools import lru_cache
from typing import Any

import boto3

from core.config import get_config


@lru_cache(maxsize=1)
def get_dynamo_client() -> Any:
    config = get_config()
    return boto3.client("dynamodb", endpoint_url=config.dynamodb_endpoint, region_name=config.aws_region)


@lru_cache(maxsize=1)
def get_s3_client() -> Any:
    config = get_config()
    return boto3.client("s3", region_name=config.aws_region)
