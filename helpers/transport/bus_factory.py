from typing import Optional
from core.settings import settings
from .broadcast_bus import BroadcastBus, InMemoryBus
from .redis_bus import RedisBus

def create_bus(backend: Optional[str] = None) -> BroadcastBus:
  backend = backend or settings.SIGNAL_BUS_BACKEND

  if backend == "memory":
    return InMemoryBus()
  elif backend == "redis":
    from core.redis import redis
    return RedisBus(redis, prefix=settings.REDIS_CHANNEL_PREFIX)
  else:
    raise ValueError(f"Unknown signal bus backend: {backend}")
