"""Tests for the inference gateway: request shape, timeouts, and error mapping."""

from unittest.mock import MagicMock

import pytest
import requests

from alttext.ai.gateway import GatewayError, InferenceGateway
from alttext.ai.schema import Capability
from alttext.core.config import Settings

pytestmark = [pytest.mark.fast]


def _response(
    status: int = 200, json_body=None, content: bytes = b"", text: str = "", content_type: str = "application/json"
) -> MagicMock:
    resp = MagicMock(spec=requests.Response)
    resp.status_code = status
    resp.headers = {"Content-Type": content_type}
    resp.content = content
    resp.text = text
    if json_body is None:
        resp.json.side_effect = ValueError("not json")
    else:
        resp.json.return_value = json_body
    if status >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(f"{status} error", response=resp)
    else:
        resp.raise_for_status.return_value = None
    return resp


def _gateway(session: MagicMock, token: str | None = "tok") -> InferenceGateway:
    return InferenceGateway(
        "https://example.test/models/",
        token,
        analysis_timeout=30.0,
        generation_timeout=120.0,
        session=session,
    )


def test_vision_call_posts_bytes_with_bearer_token_and_short_timeout():
    session = MagicMock()
    session.post.return_value = _response(json_body=[{"generated_text": "a cat"}])
    gateway = _gateway(session)

    raw = gateway.call("org/captioner", b"imagebytes", Capability.caption)

    assert raw == [{"generated_text": "a cat"}]
    args, kwargs = session.post.call_args
    assert args[0] == "https://example.test/models/org/captioner"
    assert kwargs["data"] == b"imagebytes"
    assert kwargs["timeout"] == 30.0
    assert kwargs["headers"]["Authorization"] == "Bearer tok"
    assert kwargs["headers"]["Content-Type"] == "application/octet-stream"


def test_generation_call_posts_json_with_long_timeout_and_returns_bytes():
    session = MagicMock()
    session.post.return_value = _response(content=b"\x89PNGdata")
    gateway = _gateway(session)

    raw = gateway.call("org/sdxl", {"inputs": "a tiger"}, Capability.text_to_image)

    assert raw == b"\x89PNGdata"
    _, kwargs = session.post.call_args
    assert kwargs["json"] == {"inputs": "a tiger"}
    assert kwargs["timeout"] == 120.0
    assert kwargs["headers"]["Accept"] == "image/png"


def test_text_plain_vision_body_returns_text():
    session = MagicMock()
    session.post.return_value = _response(text="a plain caption", content_type="text/plain; charset=utf-8")
    assert _gateway(session).call("m", b"x", Capability.analysis) == "a plain caption"


def test_html_vision_body_is_not_returned_as_text():
    session = MagicMock()
    session.post.return_value = _response(
        text="<html><body>Service Unavailable</body></html>", content_type="text/html"
    )
    assert _gateway(session).call("m", b"x", Capability.caption) is None


def test_non_json_body_without_content_type_is_not_returned_as_text():
    session = MagicMock()
    resp = _response(text="a caption")
    resp.headers = {}
    session.post.return_value = resp
    assert _gateway(session).call("m", b"x", Capability.caption) is None


def test_no_token_sends_no_authorization_header():
    session = MagicMock()
    session.post.return_value = _response(json_body={})
    _gateway(session, token=None).call("m", b"x", Capability.caption)
    _, kwargs = session.post.call_args
    assert "Authorization" not in kwargs["headers"]


def test_http_error_raises_gateway_error_with_status():
    session = MagicMock()
    session.post.return_value = _response(status=503, text='{"error":"Model is loading"}')

    with pytest.raises(GatewayError) as excinfo:
        _gateway(session).call("m", b"x", Capability.caption)

    assert excinfo.value.status_code == 503
    assert excinfo.value.provider_id == "m"
    assert excinfo.value.capability is Capability.caption
    assert "HTTP 503" in str(excinfo.value)


def test_timeout_raises_gateway_error():
    session = MagicMock()
    session.post.side_effect = requests.Timeout("slow")

    with pytest.raises(GatewayError, match=r"timed out after 30s"):
        _gateway(session).call("m", b"x", Capability.classification)


def test_connection_error_raises_gateway_error():
    session = MagicMock()
    session.post.side_effect = requests.ConnectionError("refused")

    with pytest.raises(GatewayError, match="unreachable") as excinfo:
        _gateway(session).call("m", b"x", Capability.caption)
    assert excinfo.value.status_code is None


def test_unexpected_shape_is_not_a_gateway_error():
    session = MagicMock()
    session.post.return_value = _response(json_body={"something": "else"})
    assert _gateway(session).call("m", b"x", Capability.caption) == {"something": "else"}


def test_from_settings_uses_configured_timeouts():
    gateway = InferenceGateway.from_settings(
        Settings(api_token="t", analysis_timeout_seconds=5, generation_timeout_seconds=60)
    )
    assert gateway.timeout_for(Capability.caption) == 5
    assert gateway.timeout_for(Capability.text_to_image) == 60


def test_check_status_reports_ok_flag():
    session = MagicMock()
    session.get.return_value = MagicMock(ok=False)
    assert _gateway(session).check_status("https://example.test") is False
    session.get.assert_called_once_with("https://example.test", timeout=5.0)
