"""Shared Redis connection handling for the keyword store

RedisClientMixin builds (or adopts) a client, namespaces keys under the
app prefix and PINGs Redis before the DAO is handed out. Every socket
operation is bounded by redis_socket_timeout, so a stalled Redis surfaces
as a DataStoreError instead of hanging the Lambda.

Example:
    >>> class ShortLinkRedisDAO(RedisClientMixin, ShortLinkBaseDAO):
    ...     pass
    >>> store = ShortLinkRedisDAO(redis_host='localhost', prefix='linkword:local')
    >>> store.keys.link_key('sample')
    'linkword:local:links:sample'
"""

from typing import Optional

import redis

from linkword.dao.redis.redis_key_schema import RedisKeySchema
from linkword.dao.exceptions import DataStoreError


class RedisClientMixin:
    """Connection setup for Redis-backed DAOs

    Attributes:
        redis (redis.Redis): client shared by all DAO calls
        keys (RedisKeySchema): prefixed key names
    """

    def __init__(
        self,
        redis_host: Optional[str] = 'localhost',
        redis_port: Optional[int] = 6379,
        redis_db: Optional[int] = 0,
        redis_decode_responses: Optional[bool] = True,
        redis_username: Optional[str] = None,
        redis_password: Optional[str] = None,
        redis_socket_timeout: Optional[float] = 5.0,
        redis_client: Optional[redis.Redis] = None,
        prefix: Optional[str] = None,
    ):
        """Connect to Redis

        The redis_* arguments mirror the `redis` section of the Lambda's
        AppConfig document and are ignored when redis_client is given.
        redis_socket_timeout bounds both connecting and each reply.

        Raises:
            DataStoreError: if Redis doesn't answer the PING
        """
        if redis_client is None:
            redis_client = redis.Redis(
                host=redis_host,
                port=int(redis_port),
                db=int(redis_db),
                decode_responses=redis_decode_responses,
                username=redis_username,
                password=redis_password,
                socket_timeout=redis_socket_timeout,
                socket_connect_timeout=redis_socket_timeout,
            )

        self.redis = redis_client
        self.keys = RedisKeySchema(prefix=prefix)

        self._healthcheck()

    def _healthcheck(self, raise_error: bool = True) -> bool:
        """PING Redis

        Returns False on a missed pong when raise_error is False, otherwise
        raises DataStoreError naming the configured host:port/db.
        """
        try:
            self.redis.ping()
        except (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError) as e:
            if not raise_error:
                return False
            info = self.redis.connection_pool.connection_kwargs
            location = f"{info.get('host')}:{info.get('port')}/{info.get('db')}"
            raise DataStoreError(f"Can't connect to Redis at {location}. Check the redis section of AppConfig.") from e
        return True
