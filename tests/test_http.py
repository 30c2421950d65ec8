import httpx
import keyring
import keyring.backends.fail
import pytest

from acrolinx_bridge.core.errors import ConfigurationError, ParseError, TransportError
from acrolinx_bridge.services.decode import decode_response
from acrolinx_bridge.services.http import AcrolinxHttp


def _recording_http(token=None, status=200, body=b"{}"):
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(status, content=body)

    http = AcrolinxHttp("https://acro.example.com/", "sig-123", api_token=token,
                        transport=httpx.MockTransport(handler))
    return http, seen


@pytest.mark.asyncio
async def test_every_request_carries_signature_and_token():
    http, seen = _recording_http(token="tok")
    await http.get(http.api_url("/api/v1/checking/capabilities"))
    req = seen[0]
    assert str(req.url) == "https://acro.example.com/api/v1/checking/capabilities"
    assert req.headers["X-Acrolinx-Client"] == "sig-123"
    assert req.headers["X-Acrolinx-Auth"] == "tok"


@pytest.mark.asyncio
async def test_post_sends_json_body_and_extra_headers():
    http, seen = _recording_http(token="tok")
    await http.post("https://acro.example.com/x", {"a": 1}, headers={"X-Extra": "1"})
    req = seen[0]
    assert req.method == "POST"
    assert req.headers["content-type"].startswith("application/json")
    assert req.headers["X-Extra"] == "1"
    assert req.content == b'{"a": 1}'


@pytest.mark.asyncio
async def test_token_falls_back_to_keyring_by_host(monkeypatch):
    lookups = []

    def fake_get_password(service, user):
        lookups.append((service, user))
        return "from-keyring"

    monkeypatch.setattr("acrolinx_bridge.services.http.keyring.get_password", fake_get_password)
    http, seen = _recording_http(token=None)
    await http.get("https://acro.example.com/api/v1/checking/capabilities")
    assert lookups == [("acro.example.com", "sig-123")]
    assert seen[0].headers["X-Acrolinx-Auth"] == "from-keyring"


@pytest.mark.asyncio
async def test_missing_keyring_entry_yields_empty_token(monkeypatch):
    monkeypatch.setattr("acrolinx_bridge.services.http.keyring.get_password", lambda s, u: None)
    http = AcrolinxHttp("https://acro.example.com", "sig")
    assert await http.resolve_token("https://acro.example.com/api") == ""


@pytest.mark.asyncio
async def test_unusable_keyring_still_sends_the_request():
    previous = keyring.get_keyring()
    keyring.set_keyring(keyring.backends.fail.Keyring())
    try:
        http, seen = _recording_http(token=None)
        resp = await http.get("https://acro.example.com/api/v1/checking/capabilities")
    finally:
        keyring.set_keyring(previous)
    assert resp.status_code == 200
    assert len(seen) == 1
    assert seen[0].headers["X-Acrolinx-Auth"] == ""


def test_missing_server_url_is_a_configuration_error():
    with pytest.raises(ConfigurationError):
        AcrolinxHttp("").api_url("/api/v1/checking/capabilities")


@pytest.mark.asyncio
async def test_network_failure_is_transport_error():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    http = AcrolinxHttp("https://acro.example.com", "sig", api_token="t",
                        transport=httpx.MockTransport(handler))
    with pytest.raises(TransportError):
        await http.get("https://acro.example.com/x")


def test_decode_parses_utf8_json():
    resp = httpx.Response(200, content='{"name": "Hëllo", "items": [1, 2]}'.encode("utf-8"))
    assert decode_response(resp) == {"name": "Hëllo", "items": [1, 2]}


@pytest.mark.parametrize("status", [199, 300, 401, 500])
def test_decode_rejects_status_outside_2xx(status):
    resp = httpx.Response(status, content=b'{"error": "nope"}')
    with pytest.raises(TransportError) as exc:
        decode_response(resp)
    assert exc.value.status == status
    assert "nope" in exc.value.body


def test_decode_invalid_json_is_parse_error():
    resp = httpx.Response(200, content=b"<html>gateway</html>")
    with pytest.raises(ParseError) as exc:
        decode_response(resp)
    assert exc.value.body == "<html>gateway</html>"
    assert isinstance(exc.value, ValueError)
