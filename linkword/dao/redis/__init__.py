from linkword.dao.redis.redis_key_schema import RedisKeySchema
from linkword.dao.redis.mixins import RedisClientMixin
from linkword.dao.redis.short_link_redis_dao import ShortLinkRedisDAO


__all__ = [
    'RedisKeySchema',
    'RedisClientMixin',
    'ShortLinkRedisDAO',
]
