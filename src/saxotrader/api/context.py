from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from saxotrader.config import SIM_GATEWAY


@dataclass
class RequestContext:
    """
    Stan pojedynczego wywołania REST.

    Jeden kontekst = jedno wywołanie; nie współdzielimy go między wątkami.
    Jeżeli `body_object` jest ustawione, dispatcher serializuje je do JSON
    i nadpisuje nim `body`.
    """

    token: str
    base_url: str = SIM_GATEWAY
    client_key: str = ""
    account_key: str = ""
    params: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    body_object: Optional[Any] = None
