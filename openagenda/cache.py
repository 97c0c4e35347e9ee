"""Access token caches."""
import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, Tuple

import boto3
from botocore.exceptions import ClientError

logger = logging.getLogger(__name__)


class AccessTokenCache(ABC):
    """Key/value store with a time to live per entry."""

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        ...

    @abstractmethod
    def set(self, key: str, value: Any, ttl: int) -> None:
        ...


class MemoryCache(AccessTokenCache):
    """In-process cache, entries expire after their ttl."""

    def __init__(self):
        self._items: Dict[str, Tuple[Any, float]] = {}

    def get(self, key, default=None):
        item = self._items.get(key)
        if item is None:
            return default
        value, expires_at = item
        if expires_at <= time.time():
            del self._items[key]
            return default
        return value

    def set(self, key, value, ttl):
        self._items[key] = (value, time.time() + ttl)


class DynamoDBCache(AccessTokenCache):
    """
    Cache stored in a DynamoDB table.

    The table is keyed by ``cache_key`` and carries a ``ttl`` epoch attribute
    that can be used as the table TTL attribute. Expired items not yet
    removed by DynamoDB are ignored on read.
    """

    def __init__(self, table_name: str):
        """
        Initialize DynamoDB resource and table reference.

        Args:
            table_name: Name of the DynamoDB table
        """
        self.table_name = table_name
        self.dynamodb = boto3.resource('dynamodb')
        self.table = self.dynamodb.Table(table_name)
        logger.info(f"Initialized DynamoDBCache for table: {table_name}")

    def get(self, key, default=None):
        """
        Read a cached value.

        Raises:
            ClientError: If the DynamoDB read fails
        """
        try:
            response = self.table.get_item(Key={'cache_key': key})
        except ClientError as e:
            logger.error(f"Error reading cache key {key}: {e}")
            raise

        item = response.get('Item')
        if not item or int(item.get('ttl', 0)) <= int(time.time()):
            return default
        return item.get('value', default)

    def set(self, key, value, ttl):
        """
        Store a value for ttl seconds.

        Raises:
            ClientError: If the DynamoDB write fails
        """
        try:
            self.table.put_item(Item={
                'cache_key': key,
                'value': value,
                'ttl': int(time.time()) + int(ttl),
            })
            logger.info(f"Cached {key} for {ttl} seconds")
        except ClientError as e:
            logger.error(f"Error writing cache key {key}: {e}")
            raise
