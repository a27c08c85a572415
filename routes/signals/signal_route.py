import logging
from fastapi import APIRouter, Request, WebSocket, WebSocketDisconnect
from core.exceptions import ProtocolError, SerializationError
from core.settings import settings
from schemas.signals.signal_schema import Signal
from helpers.signaling.signal_codec import encode_signal, decode_signal
from helpers.signaling.signaling_channel import SignalingChannel

logger = logging.getLogger(__name__)

router = APIRouter()

# Close frames carry at most 125 bytes, two of them are the code
MAX_CLOSE_REASON_BYTES = 123

def close_reason(text: str) -> str:
  encoded = text.encode('utf-8')
  if len(encoded) <= MAX_CLOSE_REASON_BYTES:
    return text
  return encoded[:MAX_CLOSE_REASON_BYTES - 3].decode('utf-8', 'ignore') + '...'

@router.get("/info")
async def get_signal_channel_info(request: Request):
  return {
    "channel_name": settings.SIGNAL_CHANNEL_NAME,
    "bus_backend": type(request.app.state.signal_bus).__name__,
  }

@router.websocket("/ws")
async def signaling_websocket_endpoint(websocket: WebSocket):
  await websocket.accept()

  # Every page gets its own channel instance, so it never hears its own signals
  channel = SignalingChannel(websocket.app.state.signal_bus)

  async def forward_to_websocket(signal: Signal):
    await websocket.send_text(encode_signal(signal))

  channel.on_message(forward_to_websocket)

  try:
    while True:
      message = await websocket.receive()
      if message["type"] == "websocket.disconnect":
        raise WebSocketDisconnect(message.get("code", 1000))

      if message.get("text") is None:
        await websocket.close(code=1003, reason="Signals must be sent as text frames")
        return

      await channel.send(decode_signal(message["text"]))
  except WebSocketDisconnect:
    logger.info(f"Signaling websocket for channel {channel.channel_id} disconnected")
  except (ProtocolError, SerializationError) as e:
    await websocket.close(code=1007, reason=close_reason(str(e)))
  finally:
    channel.close()
