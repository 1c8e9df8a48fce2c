"""Data Access Object (DAO) implementation for managing keyword short links in Redis

This module provides a Redis-based implementation of ShortLinkBaseDAO.

Redis layout:
    <prefix>:links:<keyword>    HASH  {url: <target url>, created_at: <ISO-8601 UTC>}
    <prefix>:schema:version     STRING  layout version, written once

Responsibilities:
    - Insert, retrieve and delete short links;
    - Guarantee keyword uniqueness with an atomic create-if-absent write;
    - Raise appropriate DAO exceptions.

Classes:
    ShortLinkRedisDAO:
        DAO for storing and retrieving ShortLinkModel in a Redis datastore.

Example:
    >>> from linkword.models import ShortLinkModel
    >>> from linkword.dao.redis import ShortLinkRedisDAO

    >>> dao = ShortLinkRedisDAO(prefix="linkword:dev").initialize()
    >>> dao.insert(ShortLinkModel(keyword='sample', target='https://example.com'))
    <ShortLinkRedisDAO>

    >>> retrieved = dao.get('sample')
    >>> retrieved.target
    'https://example.com'
    >>> retrieved.created_at
    <datetime>
"""

import logging
from datetime import datetime, UTC

from beartype import beartype

from linkword.models import ShortLinkModel
from linkword.dao.base import ShortLinkBaseDAO
from linkword.dao.redis.mixins import RedisClientMixin
from linkword.dao.redis.helpers import handle_redis_connection_error
from linkword.dao.exceptions import ShortLinkAlreadyExistsError, ShortLinkNotFoundError
from linkword.utils.constants import STORE_SCHEMA_VERSION


logger = logging.getLogger(__name__)


def _as_str(value: str | bytes) -> str:
    return value.decode('utf-8') if isinstance(value, bytes) else value


class ShortLinkRedisDAO(RedisClientMixin, ShortLinkBaseDAO):
    """Redis-based Data Access Object (DAO) for managing keyword short links

    This class implements the ShortLinkBaseDAO interface using Redis as a data store.

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.

    Methods:
        initialize(**kwargs) -> ShortLinkRedisDAO:
            Ping Redis and record the layout version (create-if-absent).

        insert(short_link: ShortLinkModel, **kwargs) -> ShortLinkRedisDAO:
            Insert a keyword mapping stamped with the current time.
            Raises ShortLinkAlreadyExistsError when the keyword exists.

        get(keyword: str, **kwargs) -> ShortLinkModel:
            Retrieve a keyword mapping.
            Raises ShortLinkNotFoundError when the keyword doesn't exist.

        delete(keyword: str, **kwargs) -> ShortLinkRedisDAO:
            Delete a keyword mapping.
            Raises ShortLinkNotFoundError when the keyword doesn't exist.

    All methods raise DataStoreError on connectivity issues with Redis.
    """

    @handle_redis_connection_error
    def initialize(self, **kwargs) -> 'ShortLinkRedisDAO':
        """Prepare Redis for storing short links

        Redis needs no table definitions, so initialization amounts to a
        connectivity check and a SET NX of the layout version. Calling it
        repeatedly leaves an existing version untouched.

        Returns:
            ShortLinkRedisDAO: self (for method chaining)

        Raises:
            DataStoreError:
                If Redis is unreachable.
        """
        self._healthcheck()
        created = self.redis.set(self.keys.schema_version_key(), STORE_SCHEMA_VERSION, nx=True)
        if created:
            logger.info('Initialized keyword store.', extra={'schemaVersion': STORE_SCHEMA_VERSION})
        return self

    @handle_redis_connection_error
    @beartype
    def insert(self, short_link: ShortLinkModel, **kwargs) -> 'ShortLinkRedisDAO':
        """Insert a keyword mapping into Redis

        The EXISTS check only exits early for known keywords. The write itself
        is an HSETNX executed in a MULTI/EXEC transaction, so of two concurrent
        inserts for the same keyword exactly one sets the URL field and the
        other is reported as a duplicate.

        Args:
            short_link (ShortLinkModel):
                ShortLinkModel instance representing the keyword mapping.
                Its created_at is ignored; Redis records the insertion time.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            ShortLinkRedisDAO: self (for method chaining)

        Raises:
            ShortLinkAlreadyExistsError:
                If a short link with the same keyword already exists.
            DataStoreError:
                If a Redis connection issue occurs during the transaction.

        Example:
            >>> dao.insert(ShortLinkModel(keyword='sample', target='https://example.com'))
            <ShortLinkRedisDAO>
        """
        link_key = self.keys.link_key(short_link.keyword)
        if self.redis.exists(link_key):
            raise ShortLinkAlreadyExistsError(f"Short link with keyword '{short_link.keyword}' already exists.")

        # NOTE: both fields use HSETNX, so a losing concurrent insert can't
        #       overwrite the winner's created_at either.
        created_at = datetime.now(UTC).isoformat()
        with self.redis.pipeline(transaction=True) as pipe:
            pipe.hsetnx(link_key, 'url', short_link.target)
            pipe.hsetnx(link_key, 'created_at', created_at)
            url_created, _ = pipe.execute()

        if not url_created:
            raise ShortLinkAlreadyExistsError(f"Short link with keyword '{short_link.keyword}' already exists.")
        return self

    @handle_redis_connection_error
    @beartype
    def get(self, keyword: str, **kwargs) -> ShortLinkModel:
        """Retrieve a stored keyword mapping

        Args:
            keyword (str):
                The keyword identifying the short link.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            ShortLinkModel:
                The retrieved ShortLinkModel instance.

        Raises:
            ShortLinkNotFoundError:
                If the keyword does not exist in Redis.
            DataStoreError:
                If Redis connectivity issues occur.

        Example:
            >>> dao.get('sample')
            ShortLinkModel(keyword='sample', target='https://example.com', created_at=...)
        """
        # Clients built with decode_responses=False return bytes
        fields = {_as_str(k): _as_str(v) for k, v in self.redis.hgetall(self.keys.link_key(keyword)).items()}
        if not fields or 'url' not in fields:
            raise ShortLinkNotFoundError(f"Short link with keyword '{keyword}' not found.")

        created_at = fields.get('created_at')
        return ShortLinkModel(
            keyword=keyword,
            target=fields['url'],
            created_at=datetime.fromisoformat(created_at) if created_at else None,
        )

    @handle_redis_connection_error
    @beartype
    def delete(self, keyword: str, **kwargs) -> 'ShortLinkRedisDAO':
        """Delete a keyword mapping

        Raises:
            ShortLinkNotFoundError:
                If no record was removed.
            DataStoreError:
                If Redis connectivity issues occur.
        """
        removed = self.redis.delete(self.keys.link_key(keyword))
        if removed == 0:
            raise ShortLinkNotFoundError(f"Short link with keyword '{keyword}' not found.")
        logger.info('Deleted short link.', extra={'keyword': keyword})
        return self
