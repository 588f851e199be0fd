from __future__ import annotations

from typing import Optional

import httpx
from pydantic import ValidationError

from saxotrader.api.models import TokenGrant
from saxotrader.config import ApiSettings
from saxotrader.errors import MissingKey, SerializationFailure, TransportFailure, UpstreamRejected
from saxotrader.utils.log import get_logger

log = get_logger(__name__)


def exchange_code(
    code: str,
    settings: ApiSettings,
    http: Optional[httpx.Client] = None,
) -> TokenGrant:
    """
    OAuth2 authorization-code -> access token.

    Serwer logowania zwraca 201 Created przy sukcesie; każdy inny status
    traktujemy jako odrzucenie.
    """
    for key, value in (("code", code), ("client_id", settings.client_id), ("client_secret", settings.client_secret)):
        if not value:
            raise MissingKey(key)

    form = {
        "grant_type": "authorization_code",
        "code": code,
        "client_id": settings.client_id,
        "client_secret": settings.client_secret,
        "redirect_uri": settings.redirect_uri,
    }
    try:
        if http is None:
            with httpx.Client() as own:
                response = own.post(settings.token_url, data=form)
        else:
            response = http.post(settings.token_url, data=form)
    except httpx.RequestError as exc:
        raise TransportFailure(f"POST {settings.token_url}: {exc}") from exc

    if response.status_code != 201:
        log.warning("oauth.rejected", status=response.status_code)
        raise UpstreamRejected(response.status_code, response.reason_phrase, response.content)

    try:
        return TokenGrant.model_validate_json(response.content)
    except ValidationError as exc:
        raise SerializationFailure(f"Cannot decode token response: {exc}") from exc
