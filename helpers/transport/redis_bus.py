import asyncio
import json
import logging
from typing import Optional
from .broadcast_bus import BroadcastBus, InMemoryBus, MessageCallback

logger = logging.getLogger(__name__)

class RedisBus(BroadcastBus):
  """
  Broadcast bus shared by every process talking to the same Redis server.

  Messages are published on '<prefix>:<channel_name>' wrapped in a frame
  carrying the sender id. One listener per process pattern-subscribes to
  the prefix and fans frames out to the local subscribers, skipping the
  sender. Local peers only hear each other once start() has run.
  """

  def __init__(self, redis, prefix: str = "signal"):
    self.redis = redis
    self.prefix = prefix
    self.local_bus = InMemoryBus()
    self._listener: Optional[asyncio.Task] = None

  def subscribe(self, channel_name: str, subscriber_id: str, callback: MessageCallback) -> None:
    self.local_bus.subscribe(channel_name, subscriber_id, callback)

  def unsubscribe(self, channel_name: str, subscriber_id: str) -> None:
    self.local_bus.unsubscribe(channel_name, subscriber_id)

  async def publish(self, channel_name: str, message: str, sender_id: Optional[str]) -> None:
    frame = {"sender_id": sender_id, "message": message}
    await self.redis.publish(f'{self.prefix}:{channel_name}', json.dumps(frame))

  async def start(self) -> None:
    if self._listener is None:
      self._listener = asyncio.create_task(self.listen())
      self._listener.add_done_callback(self._listener_done)
      logger.info(f"Listening for signals on {self.prefix}:*")

  async def stop(self) -> None:
    listener, self._listener = self._listener, None
    if listener is None or listener.done():
      return
    listener.cancel()
    try:
      await listener
    except asyncio.CancelledError:
      pass

  def _listener_done(self, task: asyncio.Task) -> None:
    if task.cancelled():
      return

    # A dead listener means no more signals from other processes
    exc = task.exception()
    if exc is not None:
      task.get_loop().call_exception_handler({
        "message": f"Signal listener on {self.prefix}:* stopped",
        "exception": exc,
        "task": task,
      })

  async def listen(self) -> None:
    pubsub = self.redis.pubsub()
    await pubsub.psubscribe(f'{self.prefix}:*')  # Subscribe to every signaling channel
    try:
      async for message in pubsub.listen():
        if message['type'] == 'pmessage':
          await self.handle_message(message)
    finally:
      await pubsub.aclose()

  async def handle_message(self, message: dict) -> None:
    channel = message['channel']
    if isinstance(channel, bytes):
      channel = channel.decode('utf-8')
    channel_name = channel[len(self.prefix) + 1:]  # Strip "<prefix>:", the prefix may itself contain colons

    data = message['data']
    if isinstance(data, bytes):
      data = data.decode('utf-8')

    try:
      frame = json.loads(data)
    except ValueError:
      frame = None

    if isinstance(frame, dict) and isinstance(frame.get("message"), str):
      await self.local_bus.publish(channel_name, frame["message"], frame.get("sender_id"))
    else:
      # Not one of our frames, hand it to every subscriber so the decoder reports it
      await self.local_bus.publish(channel_name, data, None)
