"""Gateway settings — CLI flags and env vars in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``POEDITOR_*`` prefix (``PORT`` is also honoured)
  3. Code defaults
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import AliasChoices, Field, SecretStr
from pydantic_settings import BaseSettings

DEFAULT_API_URL = "https://api.poeditor.com/v2"
DEFAULT_PORT = 9142

TransportName = Literal["sse", "stdio"]


class GatewaySettings(BaseSettings):
    """Unified settings for the gateway process.

    Constructed once per CLI invocation and stored on the Click context.
    ``api_token`` has no default: building settings without it raises a
    ``ValidationError``, which the CLI reports as a fatal startup error.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "POEDITOR_",
        "populate_by_name": True,
    }

    api_token: SecretStr
    api_url: str = DEFAULT_API_URL
    host: str = "0.0.0.0"  # noqa: S104
    port: int = Field(
        default=DEFAULT_PORT,
        validation_alias=AliasChoices("port", "POEDITOR_PORT", "PORT"),
    )
    transport: TransportName = "sse"
    resources: bool = True
    request_timeout: float = Field(default=30.0, gt=0)

    # --- CLI flags ---
    verbose: bool = False
    log_json: bool = False

    @classmethod
    def from_cli(cls, **cli_flags: Any) -> GatewaySettings:
        """Construct settings with CLI flags as highest-priority overrides.

        Flags left unset (``None``) are dropped so env values still apply.
        """
        return cls(**{k: v for k, v in cli_flags.items() if v is not None})
