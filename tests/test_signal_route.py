import json

import pytest
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect
from core.settings import settings
from routes.main import app
from routes.signals.signal_route import MAX_CLOSE_REASON_BYTES, close_reason

OFFER = {"type": "offer", "payload": {"description": {"type": "offer", "sdp": "v=0"}}, "userId": 1}
ANSWER = {"type": "answer", "payload": {"description": {"type": "answer", "sdp": "v=0"}}, "userId": 2}


def test_channel_info():
  with TestClient(app) as client:
    response = client.get("/api/signal/info")

  assert response.status_code == 200
  assert response.json() == {"channel_name": settings.SIGNAL_CHANNEL_NAME, "bus_backend": "InMemoryBus"}


def test_websockets_relay_offer_and_answer():
  with TestClient(app) as client:
    with client.websocket_connect("/api/signal/ws") as peer_a, client.websocket_connect("/api/signal/ws") as peer_b:
      peer_a.send_text(json.dumps(OFFER))
      assert json.loads(peer_b.receive_text()) == OFFER

      peer_b.send_text(json.dumps(ANSWER))
      assert json.loads(peer_a.receive_text()) == ANSWER


def test_malformed_frame_closes_websocket():
  with TestClient(app) as client:
    with client.websocket_connect("/api/signal/ws") as peer:
      peer.send_text(json.dumps({"type": "renegotiate", "payload": {}, "userId": 1}))

      with pytest.raises(WebSocketDisconnect) as exc_info:
        peer.receive_text()

  assert exc_info.value.code == 1007


def test_long_error_reason_fits_in_close_frame():
  with TestClient(app) as client:
    with client.websocket_connect("/api/signal/ws") as peer:
      peer.send_text(json.dumps({"type": "offer", "payload": {}, "userId": "x" * 200}))

      with pytest.raises(WebSocketDisconnect) as exc_info:
        peer.receive_text()

  assert exc_info.value.code == 1007
  assert len(exc_info.value.reason.encode("utf-8")) <= MAX_CLOSE_REASON_BYTES


def test_binary_frame_closes_websocket():
  with TestClient(app) as client:
    with client.websocket_connect("/api/signal/ws") as peer:
      peer.send_bytes(json.dumps(OFFER).encode())

      with pytest.raises(WebSocketDisconnect) as exc_info:
        peer.receive_text()

  assert exc_info.value.code == 1003


def test_close_reason_truncates_on_character_boundary():
  assert close_reason("short") == "short"

  reason = close_reason("é" * 100)
  assert len(reason.encode("utf-8")) <= MAX_CLOSE_REASON_BYTES
  assert reason.endswith("...")
