from redis.asyncio import Redis
from .settings import settings

# Create the Redis client, no connection is made until first use
redis = Redis.from_url(settings.REDIS_CONNECTION_URL)
