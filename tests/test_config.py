import pytest
from pydantic import ValidationError

from b2b_pricing.core.config import Settings, settings
from b2b_pricing.enums.commercial import SettlementMode


def test_default_settlement_mode_is_auto_ledger():
    assert settings.DEFAULT_SETTLEMENT_MODE == SettlementMode.AUTO_LEDGER


def test_settlement_mode_is_read_as_enum():
    loaded = Settings(_env_file=None, SECRET_KEY="k", DEFAULT_SETTLEMENT_MODE="MANUAL_AUDIT")

    assert loaded.DEFAULT_SETTLEMENT_MODE is SettlementMode.MANUAL_AUDIT


def test_unknown_settlement_mode_fails_at_load():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, SECRET_KEY="k", DEFAULT_SETTLEMENT_MODE="auto")
