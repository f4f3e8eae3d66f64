"""Tests for environment-backed runtime settings."""

from __future__ import annotations

import json
import logging

import pytest
from pydantic import ValidationError
from solders.keypair import Keypair

from fakes import make_settings
from solana_plugin.config.logging import configure_logging
from solana_plugin.config.settings import DEFAULT_NFT_METADATA_URI, RuntimeSettings, load_settings


def test_settings_are_read_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SOLANA_PUBLIC_KEY", "ENVWALLET")
    monkeypatch.setenv("SOLANA_RPC_URL", "https://rpc.example")
    monkeypatch.setenv("METADATA_TIMEOUT_S", "2.5")

    settings = RuntimeSettings(_env_file=None)

    assert settings.solana_public_key == "ENVWALLET"
    assert settings.get_setting("SOLANA_RPC_URL") == "https://rpc.example"
    assert settings.metadata_timeout_s == 2.5


def test_blank_default_metadata_uri_uses_builtin() -> None:
    assert make_settings(DEFAULT_NFT_METADATA_URI="  ").default_nft_metadata_uri == DEFAULT_NFT_METADATA_URI


def test_blank_private_key_is_treated_as_missing() -> None:
    assert make_settings(SOLANA_PRIVATE_KEY=" ").solana_private_key is None


def test_base58_private_key_is_kept() -> None:
    keypair = Keypair()

    assert make_settings(SOLANA_PRIVATE_KEY=str(keypair)).solana_private_key == str(keypair)


def test_byte_array_private_key_is_converted_to_base58() -> None:
    keypair = Keypair()
    raw = json.dumps(list(bytes(keypair)))

    assert make_settings(SOLANA_PRIVATE_KEY=raw).solana_private_key == str(keypair)


def test_invalid_byte_array_private_key_fails_settings_load(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SOLANA_PRIVATE_KEY", "[1, 2, 3]")
    monkeypatch.chdir("/")

    with pytest.raises(RuntimeError, match="Invalid environment configuration"):
        load_settings()


def test_get_setting_stringifies_numbers() -> None:
    assert make_settings(LLM_TIMEOUT_S=12).get_setting("LLM_TIMEOUT_S") == "12.0"


def test_wallet_address_prefers_public_key() -> None:
    settings = make_settings(SOLANA_PUBLIC_KEY="WALLET1", SOLANA_PRIVATE_KEY=str(Keypair()))

    assert settings.wallet_address == "WALLET1"


def test_wallet_address_is_derived_from_private_key() -> None:
    keypair = Keypair()

    assert make_settings(SOLANA_PUBLIC_KEY="", SOLANA_PRIVATE_KEY=str(keypair)).wallet_address == str(keypair.pubkey())


def test_wallet_address_from_byte_array_key() -> None:
    keypair = Keypair()
    raw = json.dumps(list(bytes(keypair)))

    assert make_settings(SOLANA_PUBLIC_KEY="", SOLANA_PRIVATE_KEY=raw).wallet_address == str(keypair.pubkey())


@pytest.mark.parametrize("private_key", ["", "secret", "0OIl" * 22])
def test_wallet_address_is_none_without_usable_key(private_key: str) -> None:
    assert make_settings(SOLANA_PUBLIC_KEY="", SOLANA_PRIVATE_KEY=private_key).wallet_address is None


def test_log_level_is_normalised() -> None:
    assert make_settings(LOG_LEVEL=" debug ").log_level == "DEBUG"
    assert make_settings(LOG_LEVEL="").log_level == "INFO"


def test_unknown_log_level_is_rejected() -> None:
    with pytest.raises(ValidationError):
        make_settings(LOG_LEVEL="chatty")


def test_configure_logging_applies_level_and_quiets_aiogram() -> None:
    root = logging.getLogger()
    previous = root.level
    try:
        configure_logging(make_settings(LOG_LEVEL="DEBUG"))

        assert root.level == logging.DEBUG
        assert logging.getLogger("aiogram.event").level == logging.WARNING
    finally:
        root.setLevel(previous)
