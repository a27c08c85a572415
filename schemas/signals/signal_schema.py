from pydantic import BaseModel, Field
from typing import Any, Optional
from enum import Enum

class SignalType(str, Enum):
  offer = 'offer'
  answer = 'answer'
  candidate = 'candidate'

class SessionDescription(BaseModel):
  type: Optional[str] = None  # 'offer', 'answer', 'pranswer' or 'rollback'
  sdp: Optional[str] = None

  class Config:
    extra = "allow"
    frozen = True

class IceCandidate(BaseModel):
  candidate: Optional[str] = None
  sdpMid: Optional[str] = None
  sdpMLineIndex: Optional[int] = None
  usernameFragment: Optional[str] = None

  class Config:
    extra = "allow"
    frozen = True

class MessagePayload(BaseModel):
  # Both are optional and nullable, only the fields that were set go on the wire
  description: Optional[Any] = None  # Session description for offers and answers
  candidate: Optional[Any] = None  # Connectivity candidate for candidate messages

  class Config:
    frozen = True

class Signal(BaseModel):
  type: SignalType
  payload: MessagePayload = Field(default_factory=MessagePayload)
  user_id: int = Field(alias="userId")  # Sender of the signal, opaque to the transport

  class Config:
    populate_by_name = True
    frozen = True
