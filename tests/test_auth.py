from __future__ import annotations

from urllib.parse import parse_qs

import httpx
import pytest

from saxotrader.auth import exchange_code
from saxotrader.config import ApiSettings
from saxotrader.errors import MissingKey, UpstreamRejected

SETTINGS = ApiSettings(client_id="app", client_secret="s3cret")


def _http(status: int, body: bytes, seen: list) -> httpx.Client:
    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(status, content=body)

    return httpx.Client(transport=httpx.MockTransport(handler))


def test_exchange_code_created():
    seen: list = []
    http = _http(201, b'{"access_token":"AT","token_type":"Bearer","expires_in":1200,"refresh_token":"RT"}', seen)

    grant = exchange_code("CODE", SETTINGS, http=http)

    assert grant.access_token == "AT"
    assert grant.expires_in == 1200
    req = seen[0]
    assert req.method == "POST"
    assert str(req.url) == SETTINGS.token_url
    form = parse_qs(req.content.decode())
    assert form["grant_type"] == ["authorization_code"]
    assert form["code"] == ["CODE"]
    assert form["client_id"] == ["app"]


def test_exchange_code_requires_201():
    # 200 to też "nie to" – serwer logowania zwraca 201 Created
    http = _http(200, b'{"access_token":"AT"}', [])
    with pytest.raises(UpstreamRejected) as exc:
        exchange_code("CODE", SETTINGS, http=http)
    assert exc.value.status_code == 200


def test_exchange_code_missing_secret():
    with pytest.raises(MissingKey) as exc:
        exchange_code("CODE", ApiSettings(client_id="app"))
    assert exc.value.key == "client_secret"
