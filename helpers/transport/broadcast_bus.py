from abc import ABC, abstractmethod
from typing import Callable, Dict, Optional

# Receives the raw message text published on a channel
MessageCallback = Callable[[str], None]

class BroadcastBus(ABC):
  """
  Many-to-many transport keyed by channel name.

  A published message reaches every subscriber of the same channel name
  except the one that sent it. There is no acknowledgment, buffering or
  retry: subscribers that are not registered when a message goes out
  never see it.
  """

  @abstractmethod
  async def publish(self, channel_name: str, message: str, sender_id: Optional[str]) -> None:
    ...

  @abstractmethod
  def subscribe(self, channel_name: str, subscriber_id: str, callback: MessageCallback) -> None:
    ...

  @abstractmethod
  def unsubscribe(self, channel_name: str, subscriber_id: str) -> None:
    ...

  async def start(self) -> None:
    pass

  async def stop(self) -> None:
    pass


class InMemoryBus(BroadcastBus):
  def __init__(self):
    # Dictionary to store active subscribers: {channel_name: {subscriber_id: callback}}
    self.active_subscribers: Dict[str, Dict[str, MessageCallback]] = {}

  def subscribe(self, channel_name: str, subscriber_id: str, callback: MessageCallback) -> None:
    if channel_name not in self.active_subscribers:
      self.active_subscribers[channel_name] = {}
    self.active_subscribers[channel_name][subscriber_id] = callback

  def unsubscribe(self, channel_name: str, subscriber_id: str) -> None:
    subscribers = self.active_subscribers.get(channel_name)
    if subscribers is None:
      return

    subscribers.pop(subscriber_id, None)
    if not subscribers:
      del self.active_subscribers[channel_name]

  async def publish(self, channel_name: str, message: str, sender_id: Optional[str]) -> None:
    # Copy so callbacks may unsubscribe while we fan out
    subscribers = list(self.active_subscribers.get(channel_name, {}).items())
    for subscriber_id, callback in subscribers:
      if subscriber_id != sender_id:
        callback(message)

  def subscriber_count(self, channel_name: str) -> int:
    return len(self.active_subscribers.get(channel_name, {}))
