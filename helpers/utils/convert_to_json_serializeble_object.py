import dataclasses
import math
from collections.abc import Mapping
from datetime import date, datetime
from enum import Enum
from typing import Optional, Set
from pydantic import BaseModel
from core.exceptions import SerializationError

def convert_to_json_serializeble_object(value, path: str = "$", _active: Optional[Set[int]] = None):
  """
  Convert a value into plain JSON data.

  Only representable fields survive: pydantic models and dataclasses become
  objects, tuples become lists, dates become ISO strings. Anything without a
  plain representation raises SerializationError instead of being dropped.
  """
  if value is None:
    return None
  elif isinstance(value, Enum):
    return convert_to_json_serializeble_object(value.value, path, _active)
  elif isinstance(value, (str, bool, int)):
    return value
  elif isinstance(value, float):
    if not math.isfinite(value):
      raise SerializationError(path, f"non-finite number {value!r}")
    return value
  elif isinstance(value, (datetime, date)):
    return value.isoformat()
  elif isinstance(value, BaseModel):
    return convert_to_json_serializeble_object(value.model_dump(exclude_unset=True), path, _active)

  is_dataclass = dataclasses.is_dataclass(value) and not isinstance(value, type)
  if not (is_dataclass or isinstance(value, (Mapping, list, tuple))):
    raise SerializationError(path, f"{type(value).__name__} has no plain representation")

  # Containers currently being walked, a repeat means the value contains itself
  active = set() if _active is None else _active
  if id(value) in active:
    raise SerializationError(path, "circular reference")
  active.add(id(value))

  try:
    if is_dataclass:
      return {
        field.name: convert_to_json_serializeble_object(getattr(value, field.name), f"{path}.{field.name}", active)
        for field in dataclasses.fields(value)
      }
    elif isinstance(value, Mapping):
      converted = {}
      for key, item in value.items():
        if not isinstance(key, str):
          raise SerializationError(path, f"object key {key!r} is not a string")
        converted[key] = convert_to_json_serializeble_object(item, f"{path}.{key}", active)
      return converted
    else:
      return [convert_to_json_serializeble_object(item, f"{path}[{index}]", active) for index, item in enumerate(value)]
  finally:
    active.discard(id(value))
