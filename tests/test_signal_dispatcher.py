import pytest
from core.exceptions import ProtocolError
from helpers.signaling.signal_dispatcher import SignalDispatcher
from schemas.signals.signal_schema import Signal, SignalType


def make_dispatcher(calls):
  async def on_offer(signal):
    calls.append(("offer", signal.user_id))

  def on_answer(signal):
    calls.append(("answer", signal.user_id))

  async def on_candidate(signal):
    calls.append(("candidate", signal.user_id))

  return SignalDispatcher(on_offer=on_offer, on_answer=on_answer, on_candidate=on_candidate)


@pytest.mark.asyncio
async def test_every_type_has_a_branch():
  calls = []
  dispatcher = make_dispatcher(calls)

  for user_id, signal_type in enumerate(SignalType):
    await dispatcher(Signal(type=signal_type, userId=user_id))

  assert calls == [("offer", 0), ("answer", 1), ("candidate", 2)]


@pytest.mark.asyncio
async def test_unknown_type_raises_protocol_error():
  calls = []
  dispatcher = make_dispatcher(calls)

  with pytest.raises(ProtocolError):
    await dispatcher(Signal.model_construct(type="renegotiate", userId=1))
  assert calls == []


def test_missing_branch_is_rejected():
  with pytest.raises(ValueError):
    SignalDispatcher(on_offer=lambda signal: None, on_answer=lambda signal: None, on_candidate=None)
