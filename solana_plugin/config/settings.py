"""Runtime settings for the Solana plugin.

Settings are loaded from environment variables (optionally via a local `.env` file) and are
injected into actions explicitly. Handlers never read process state on their own; they go through
`RuntimeSettings.get_setting()` using the same keys the agent host exposes.
"""

from __future__ import annotations

import json
import re

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from solders.keypair import Keypair

# A 64-byte secret key in base58. `Keypair.from_base58_string` panics on anything else.
_BASE58_SECRET_KEY = re.compile(r"[1-9A-HJ-NP-Za-km-z]{86,88}")

DEFAULT_NFT_METADATA_URI = (
    "https://raw.githubusercontent.com/solana-developers/opos-asset/main/assets/CompressedCoil/metadata.json"
)


class RuntimeSettings(BaseSettings):
    """Plugin settings keyed by the host's setting names (field aliases)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    solana_public_key: str | None = Field(default=None, alias="SOLANA_PUBLIC_KEY")
    solana_private_key: str | None = Field(default=None, alias="SOLANA_PRIVATE_KEY")
    solana_rpc_url: str | None = Field(default=None, alias="SOLANA_RPC_URL")
    openai_api_key: str | None = Field(default=None, alias="OPENAI_API_KEY")
    default_nft_metadata_uri: str = Field(
        default=DEFAULT_NFT_METADATA_URI, alias="DEFAULT_NFT_METADATA_URI"
    )

    llm_model: str = Field(default="gpt-4o-mini", alias="LLM_MODEL")
    llm_api_base: str = Field(default="https://api.openai.com/v1", alias="LLM_API_BASE")
    llm_timeout_s: float = Field(default=30.0, alias="LLM_TIMEOUT_S")
    metadata_timeout_s: float = Field(default=10.0, alias="METADATA_TIMEOUT_S")

    telegram_bot_token: str | None = Field(default=None, alias="TELEGRAM_BOT_TOKEN")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        level = value.strip().upper() or "INFO"
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"LOG_LEVEL must be a logging level name, got {value!r}")
        return level

    @field_validator("solana_private_key")
    @classmethod
    def normalize_private_key(cls, value: str | None) -> str | None:
        """Accept either a base58 secret key or a JSON byte array (Solana CLI keypair format).

        A byte array is converted to the base58 form the SDK expects.
        """

        if value is None:
            return None
        value = value.strip()
        if not value:
            return None
        if value.startswith("["):
            try:
                raw = bytes(json.loads(value))
                return str(Keypair.from_bytes(raw))
            except (ValueError, TypeError) as exc:
                raise ValueError("SOLANA_PRIVATE_KEY is not a valid keypair byte array") from exc
        return value

    @field_validator("default_nft_metadata_uri")
    @classmethod
    def default_uri_not_blank(cls, value: str) -> str:
        """An empty `DEFAULT_NFT_METADATA_URI` falls back to the built-in metadata document."""

        return value.strip() or DEFAULT_NFT_METADATA_URI

    def get_setting(self, key: str) -> str | None:
        """Look up a setting by its host key (e.g. `SOLANA_RPC_URL`).

        Unknown keys return `None`. Non-string values are returned in their string form.
        """

        for name, field in type(self).model_fields.items():
            if field.alias == key:
                value = getattr(self, name)
                return None if value is None else str(value)
        return None

    @property
    def wallet_address(self) -> str | None:
        """The agent's wallet: `SOLANA_PUBLIC_KEY`, else the public key of `SOLANA_PRIVATE_KEY`.

        Returns `None` when neither yields an address.
        """

        if self.solana_public_key and self.solana_public_key.strip():
            return self.solana_public_key.strip()
        if not self.solana_private_key or not _BASE58_SECRET_KEY.fullmatch(self.solana_private_key):
            return None
        return str(Keypair.from_base58_string(self.solana_private_key).pubkey())


def load_settings() -> RuntimeSettings:
    """Load and validate settings from environment variables.

    Raises:
        RuntimeError: If the environment configuration is invalid.
    """

    try:
        return RuntimeSettings()
    except ValidationError as exc:
        raise RuntimeError(f"Invalid environment configuration: {exc}") from exc
