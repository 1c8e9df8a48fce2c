"""Check that a Redis 8.2 is running on your local machine and ready for short links

Connection details:
- redis: 127.0.0.1:6379
- redisinsight: 127.0.0.1:5540

Expect to see the store's schema version printed in your local console.

You can also access the Redis Insight UI at localhost:5540 and confirm the
key 'linkword:local:schema:version' is set.
"""

from linkword.dao.redis import ShortLinkRedisDAO


def main():
    store = ShortLinkRedisDAO(redis_host='localhost', redis_port=6379, redis_db=0, prefix='linkword:local').initialize()
    print(store.redis.get(store.keys.schema_version_key()))


if __name__ == '__main__':
    main()
