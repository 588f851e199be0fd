"""
Rejestr endpointów OpenAPI: nazwa symboliczna -> (metoda HTTP, szablon ścieżki).

Szablon może zawierać `{Identyfikator}`, podstawiany z parametrów wywołania.
Ścieżki są względne wobec base_url; końcowe "/" zostają tak, jak są w API.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Final, Mapping, Tuple

from saxotrader.errors import EndpointNotFound

PLACEHOLDER_RX: Final = re.compile(r"\{([a-zA-Z0-9]+)\}")


@dataclass(frozen=True)
class Endpoint:
    verb: str
    path: str

    @property
    def placeholders(self) -> Tuple[str, ...]:
        return tuple(PLACEHOLDER_RX.findall(self.path))

    @property
    def sends_query(self) -> bool:
        """GET i DELETE niosą parametry w query string."""
        return self.verb in ("GET", "DELETE")


ENDPOINTS: Final[Mapping[str, Endpoint]] = MappingProxyType(
    {
        "user": Endpoint("GET", "port/v1/users/me"),
        "balance": Endpoint("GET", "port/v1/balances"),
        "client": Endpoint("GET", "port/v1/clients/me"),
        "account": Endpoint("GET", "port/v1/accounts/me"),
        "instruments": Endpoint("GET", "ref/v1/instruments"),
        "instrument_details": Endpoint("GET", "ref/v1/instruments/details"),
        "prices": Endpoint("GET", "trade/v1/infoprices/list"),
        "quotes": Endpoint("GET", "trade/v1/infoprices/snapshot"),
        "make_order": Endpoint("POST", "trade/v2/orders"),
        "order_list": Endpoint("GET", "port/v1/orders/me"),
        "order_details": Endpoint("GET", "port/v1/orders/{ClientKey}/{OrderId}/"),
        "positions": Endpoint("GET", "port/v1/positions/me"),
        "net_positions": Endpoint("GET", "port/v1/netpositions/me"),
        "order": Endpoint("GET", "trade/v2/orders/"),
        "cancel_order": Endpoint("DELETE", "trade/v2/orders/"),
        "replace_order": Endpoint("PUT", "trade/v2/orders/"),
        "chart": Endpoint("GET", "chart/v1/charts"),
        "chart_data": Endpoint("GET", "chart/v1/charts/"),
        "chart_list": Endpoint("GET", "chart/v1/charts/me"),
        "chart_config": Endpoint("GET", "chart/v1/configurations"),
    }
)


def resolve(name: str) -> Endpoint:
    try:
        return ENDPOINTS[name]
    except KeyError:
        raise EndpointNotFound(name) from None
