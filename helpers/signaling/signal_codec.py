import json
from typing import Union
from pydantic import ValidationError
from core.exceptions import ProtocolError
from schemas.signals.signal_schema import Signal, SignalType, MessagePayload, SessionDescription, IceCandidate
from helpers.utils.convert_to_json_serializeble_object import convert_to_json_serializeble_object

PAYLOAD_FIELDS = {
  "description": SessionDescription,
  "candidate": IceCandidate,
}

def _signal_type(value) -> SignalType:
  try:
    return SignalType(value)
  except ValueError:
    raise ProtocolError(f"Unknown signal type: {value!r}") from None

def _is_user_id(value) -> bool:
  return isinstance(value, int) and not isinstance(value, bool)

def signal_to_wire(signal: Signal) -> dict:
  """Build the plain wire shape {type, payload, userId} of a signal."""
  signal_type = _signal_type(signal.type)

  if not _is_user_id(signal.user_id):
    raise ProtocolError(f"userId must be an integer, got {signal.user_id!r}")

  # Absent and null are different on the wire, so only copy fields that were set
  payload = {}
  for field in PAYLOAD_FIELDS:
    if field in signal.payload.model_fields_set:
      payload[field] = convert_to_json_serializeble_object(getattr(signal.payload, field), f"$.payload.{field}")

  return {
    "type": signal_type.value,
    "payload": payload,
    "userId": signal.user_id,
  }

def encode_signal(signal: Signal) -> str:
  return json.dumps(signal_to_wire(signal), allow_nan=False)

def signal_from_wire(data) -> Signal:
  """Validate a decoded wire object and build the signal it describes."""
  if not isinstance(data, dict):
    raise ProtocolError(f"Signal must be a JSON object, got {type(data).__name__}")

  signal_type = _signal_type(data.get("type"))

  user_id = data.get("userId")
  if not _is_user_id(user_id):
    raise ProtocolError(f"userId must be an integer, got {user_id!r}")

  raw_payload = data.get("payload")
  if raw_payload is None:
    raw_payload = {}
  elif not isinstance(raw_payload, dict):
    raise ProtocolError(f"payload must be a JSON object, got {type(raw_payload).__name__}")

  payload = {}
  for field, model in PAYLOAD_FIELDS.items():
    if field not in raw_payload:
      continue
    value = raw_payload[field]
    if value is None:
      payload[field] = None
      continue
    if not isinstance(value, dict):
      raise ProtocolError(f"payload.{field} must be a JSON object or null")
    try:
      payload[field] = model.model_validate(value)
    except ValidationError as e:
      raise ProtocolError(f"Invalid payload.{field}: {e}") from e

  return Signal(type=signal_type, payload=MessagePayload(**payload), user_id=user_id)

def decode_signal(raw: Union[str, bytes]) -> Signal:
  try:
    data = json.loads(raw)
  except (TypeError, ValueError) as e:
    raise ProtocolError(f"Signal is not valid JSON: {e}") from e
  return signal_from_wire(data)
