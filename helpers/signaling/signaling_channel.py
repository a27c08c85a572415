import asyncio
import inspect
import logging
from typing import Awaitable, Callable, Optional, Set, Union
from uuid import uuid4
from core.exceptions import ChannelClosedError, ProtocolError
from core.settings import settings
from schemas.signals.signal_schema import Signal, SignalType
from helpers.transport.broadcast_bus import BroadcastBus
from .signal_codec import encode_signal, decode_signal

logger = logging.getLogger(__name__)

MessageHandler = Callable[[Signal], Union[None, Awaitable[None]]]
ErrorHandler = Callable[[ProtocolError], Union[None, Awaitable[None]]]

async def _invoke(callback, argument) -> None:
  result = callback(argument)
  if inspect.isawaitable(result):
    await result

class SignalingChannel:
  """
  Named broadcast channel carrying negotiation signals between peers.

  The channel is open as soon as it is constructed and stays open until
  close() is called; a closed channel cannot be reopened. Signals sent on
  one instance reach every other instance subscribed to the same name on
  the same bus, never the sending instance itself.

  Each signal is encoded to plain JSON text before it is published, so the
  receiving side always gets an independent copy built only from
  representable data. Values that cannot be represented raise
  SerializationError from send() rather than being dropped.

  Every arrival is handled in its own task, so handlers can overlap when
  they await. Arrivals while no handler is registered are lost. Errors
  raised by a handler are not caught here; they go to the event loop's
  exception handler.
  """

  def __init__(self, bus: BroadcastBus, name: Optional[str] = None):
    self.name = name or settings.SIGNAL_CHANNEL_NAME
    self.channel_id = str(uuid4())
    self._bus = bus
    self._handler: Optional[MessageHandler] = None
    self._error_handler: Optional[ErrorHandler] = None
    self._closed = False
    self._pending: Set[asyncio.Task] = set()

    bus.subscribe(self.name, self.channel_id, self._on_raw_message)
    logger.info(f"Opened signaling channel {self.name} ({self.channel_id})")

  @property
  def closed(self) -> bool:
    return self._closed

  async def send(self, signal: Signal) -> None:
    """Publish a signal to every other peer on the channel without waiting for delivery."""
    if self._closed:
      raise ChannelClosedError(self.name)

    message = encode_signal(signal)
    await self._bus.publish(self.name, message, self.channel_id)
    logger.debug(f"Sent {SignalType(signal.type).value} from user {signal.user_id} on {self.name}")

  def on_message(self, handler: MessageHandler) -> None:
    """Register the handler for inbound signals, replacing any previous one."""
    if self._closed:
      raise ChannelClosedError(self.name)
    self._handler = handler

  def on_error(self, handler: ErrorHandler) -> None:
    """Register the handler for inbound messages that are not valid signals."""
    if self._closed:
      raise ChannelClosedError(self.name)
    self._error_handler = handler

  def close(self) -> None:
    if self._closed:
      return

    self._closed = True
    self._bus.unsubscribe(self.name, self.channel_id)
    self._handler = None
    self._error_handler = None
    logger.info(f"Closed signaling channel {self.name} ({self.channel_id})")

  async def join(self) -> None:
    """Wait until every delivery started so far has finished."""
    while self._pending:
      await asyncio.wait(set(self._pending))

  async def __aenter__(self):
    return self

  async def __aexit__(self, exc_type, exc, tb):
    self.close()

  def _on_raw_message(self, message: str) -> None:
    if self._closed:
      return

    # Messages that arrive before a handler is registered are lost
    if self._handler is None:
      logger.debug(f"No handler registered on {self.name}, dropping message")
      return

    task = asyncio.get_running_loop().create_task(self._deliver(message))
    self._pending.add(task)
    task.add_done_callback(self._delivery_done)

  def _delivery_done(self, task: asyncio.Task) -> None:
    self._pending.discard(task)
    if task.cancelled():
      return

    exc = task.exception()
    if exc is not None:
      task.get_loop().call_exception_handler({
        "message": f"Unhandled error while delivering a signal on {self.name}",
        "exception": exc,
        "task": task,
      })

  async def _deliver(self, message: str) -> None:
    # Closing stops delivery for anything that has not reached the handler yet
    if self._closed:
      return

    # The handler registered now, which may have replaced the one present on arrival
    handler = self._handler

    try:
      signal = decode_signal(message)
    except ProtocolError as e:
      if self._error_handler is None:
        raise
      await _invoke(self._error_handler, e)
      return

    await _invoke(handler, signal)
