from pydantic_settings import BaseSettings
from typing import List

class Settings(BaseSettings):
  # Every peer must use the exact same channel name to interoperate
  SIGNAL_CHANNEL_NAME: str = "p2p-message-channel"
  SIGNAL_BUS_BACKEND: str = "memory"  # 'memory' or 'redis'
  REDIS_CONNECTION_URL: str = "redis://localhost:6379/0"
  REDIS_CHANNEL_PREFIX: str = "signal"
  ALLOWED_ORIGINS: List[str] = ["http://localhost:5173"]
  HOST: str = "127.0.0.1"
  PORT: int = 8000
  LOG_LEVEL: str = "INFO"

  class Config:
    env_file = ".env"

settings = Settings()
