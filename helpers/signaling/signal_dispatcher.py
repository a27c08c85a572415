import inspect
from typing import Awaitable, Callable, Optional, Union
from core.exceptions import ProtocolError
from schemas.signals.signal_schema import Signal, SignalType

SignalCallback = Callable[[Signal], Union[None, Awaitable[None]]]

class SignalDispatcher:
  """
  Route a signal to the callback registered for its type.

  Every signal type needs a callback, so a dispatcher can never silently
  ignore a known type, and an unknown type raises ProtocolError.
  """

  def __init__(self, on_offer: SignalCallback, on_answer: SignalCallback, on_candidate: SignalCallback):
    self.routes = {
      SignalType.offer: on_offer,
      SignalType.answer: on_answer,
      SignalType.candidate: on_candidate,
    }

    missing = [signal_type.value for signal_type in SignalType if self.routes.get(signal_type) is None]
    if missing:
      raise ValueError(f"No callback for signal types: {', '.join(missing)}")

  def route_for(self, signal: Signal) -> SignalCallback:
    try:
      signal_type = SignalType(signal.type)
    except ValueError:
      raise ProtocolError(f"Unknown signal type: {signal.type!r}") from None
    return self.routes[signal_type]

  async def __call__(self, signal: Signal) -> Optional[object]:
    result = self.route_for(signal)(signal)
    if inspect.isawaitable(result):
      result = await result
    return result
