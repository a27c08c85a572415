import pytest
from pydantic import ValidationError
from schemas.signals.signal_schema import Signal, SignalType, MessagePayload, SessionDescription


def test_signal_type_is_closed_set():
  assert [signal_type.value for signal_type in SignalType] == ["offer", "answer", "candidate"]
  assert SignalType.offer == "offer"


def test_signal_accepts_wire_and_python_names():
  from_wire = Signal(type="offer", payload={"description": {"type": "offer", "sdp": "v=0"}}, userId=1)
  from_python = Signal(type=SignalType.offer, payload=MessagePayload(description={"type": "offer", "sdp": "v=0"}), user_id=1)

  assert from_wire == from_python
  assert from_wire.user_id == 1
  assert from_wire.type is SignalType.offer


def test_signal_rejects_unknown_type():
  with pytest.raises(ValidationError):
    Signal(type="renegotiate", userId=1)


def test_signal_is_immutable():
  signal = Signal(type="answer", userId=2)

  with pytest.raises(ValidationError):
    signal.user_id = 3
  with pytest.raises(ValidationError):
    signal.payload.description = {"sdp": "v=0"}


def test_payload_tracks_which_fields_were_given():
  assert MessagePayload().model_fields_set == set()
  assert MessagePayload(candidate=None).model_fields_set == {"candidate"}


def test_session_description_keeps_unknown_fields():
  description = SessionDescription.model_validate({"type": "offer", "sdp": "v=0", "origin": "tab-1"})

  assert description.sdp == "v=0"
  assert description.model_extra == {"origin": "tab-1"}
