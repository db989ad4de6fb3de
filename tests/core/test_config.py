"""Tests for Settings: fail-fast validation and network-derived defaults."""
import pytest
from pydantic import ValidationError

from x402gate.core.config import DEV_USDCE_TESTNET, USDCE_MAINNET, Settings
from x402gate.paywall.config import PaywallConfig

MERCHANT = "0x" + "ab" * 20


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ("MERCHANT_ADDRESS", "NETWORK", "ASSET", "ENTITLEMENT_BACKEND", "REDIS_URL", "DATABASE_URL"):
        monkeypatch.delenv(name, raising=False)


def test_merchant_address_required():
    with pytest.raises(ValidationError):
        Settings(_env_file=None)


@pytest.mark.parametrize("address", ["", "   ", "0x123", "ab" * 20, "0x" + "zz" * 20])
def test_merchant_address_format(address):
    with pytest.raises(ValidationError):
        Settings(merchant_address=address, _env_file=None)


def test_merchant_address_from_env(monkeypatch):
    monkeypatch.setenv("MERCHANT_ADDRESS", MERCHANT)
    assert Settings(_env_file=None).merchant_address == MERCHANT


def test_asset_follows_network():
    assert Settings(merchant_address=MERCHANT, _env_file=None).resolved_asset == DEV_USDCE_TESTNET
    mainnet = Settings(merchant_address=MERCHANT, network="cronos-mainnet", _env_file=None)
    assert mainnet.resolved_asset == USDCE_MAINNET


def test_explicit_asset_wins():
    settings = Settings(merchant_address=MERCHANT, asset="0x" + "cd" * 20, _env_file=None)
    assert settings.resolved_asset == "0x" + "cd" * 20


@pytest.mark.parametrize("price", ["0", "-5", "1.5", "abc"])
def test_price_must_be_positive_integer(price):
    with pytest.raises(ValidationError):
        Settings(merchant_address=MERCHANT, price_base_units=price, _env_file=None)


@pytest.mark.parametrize("backend", ["redis", "sql"])
def test_backend_needs_url(backend):
    with pytest.raises(ValidationError):
        Settings(merchant_address=MERCHANT, entitlement_backend=backend, _env_file=None)


def test_unknown_backend_rejected():
    with pytest.raises(ValidationError):
        Settings(merchant_address=MERCHANT, entitlement_backend="mongo", _env_file=None)


def test_paywall_config_from_settings():
    settings = Settings(merchant_address=MERCHANT, price_base_units="2500", _env_file=None)
    config = PaywallConfig.from_settings(settings, description="Unlock report")

    assert config.pay_to == MERCHANT
    assert config.max_amount_required == "2500"
    assert config.description == "Unlock report"
    assert config.max_timeout_seconds == 300
    assert config.mime_type == "application/json"
    assert config.output_schema is not None
