class SignalingError(Exception):
  """Base class for every error raised by the signaling core."""


class SerializationError(SignalingError):
  """A signal holds a value that has no plain JSON representation."""

  def __init__(self, path: str, reason: str):
    self.path = path
    self.reason = reason
    super().__init__(f"Cannot serialize {path}: {reason}")


class ProtocolError(SignalingError):
  """A message does not match the signal wire shape."""


class ChannelClosedError(SignalingError):
  def __init__(self, channel_name: str):
    self.channel_name = channel_name
    super().__init__(f"Signaling channel '{channel_name}' is closed")
