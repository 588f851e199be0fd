from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Mapping, Optional

import yaml
from pydantic import BaseModel, field_validator

SIM_GATEWAY = "https://gateway.saxobank.com/sim/openapi/"
SIM_TOKEN_URL = "https://sim.logonvalidation.net/token"

_ENV_PREFIX = "SAXO_"


class ApiSettings(BaseModel):
    base_url: str = SIM_GATEWAY
    token: str = ""
    client_key: str = ""
    account_key: str = ""
    timeout: Optional[float] = None  # None => domyślny timeout httpx

    # OAuth2 (code flow)
    token_url: str = SIM_TOKEN_URL
    client_id: str = ""
    client_secret: str = ""
    redirect_uri: str = "http://fanjango.com.hk/auth.html"

    @field_validator("base_url")
    @classmethod
    def _trailing_slash(cls, v: str) -> str:
        # ścieżki endpointów są względne, doklejamy je do base_url
        return v if v.endswith("/") else v + "/"

    @classmethod
    def from_file(cls, path: str | Path) -> "ApiSettings":
        path = str(path)
        with open(path, "r", encoding="utf-8") as f:
            if path.endswith(".json"):
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
        return cls(**(data or {}))

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ApiSettings":
        """SAXO_TOKEN, SAXO_BASE_URL, SAXO_CLIENT_ID, ... -> pola modelu."""
        env = os.environ if environ is None else environ
        data = {}
        for name in cls.model_fields:
            key = _ENV_PREFIX + name.upper()
            if key in env:
                data[name] = env[key]
        return cls(**data)
