"""
Shared test fixtures and pytest configuration.
"""

from datetime import date, datetime
from decimal import Decimal

import pytest

from volshift.data_feed import StaticParamsProvider
from volshift.instruments import InstrumentParams, OptionType
from volshift.model import SampleModel

EXPIRY = date(2024, 3, 21)
CUTOFF = datetime(2024, 3, 21, 18, 45)
BASE_ASSET = "RTS-3.24"


@pytest.fixture
def call_option():
    """RTS-style call: strike 100000, base vol 25%."""
    return InstrumentParams(
        instrument="RI100000BC4",
        base_asset=BASE_ASSET,
        option_type=OptionType.CALL,
        strike=Decimal("100000"),
        expiration_date=EXPIRY,
        volatility=Decimal("0.25"),
    )


@pytest.fixture
def put_option():
    return InstrumentParams(
        instrument="RI100000BO4",
        base_asset=BASE_ASSET,
        option_type=OptionType.PUT,
        strike=Decimal("100000"),
        expiration_date=EXPIRY,
        volatility=Decimal("0.25"),
    )


@pytest.fixture
def provider():
    p = StaticParamsProvider()
    p.set_quote(BASE_ASSET, last_price=105000.0, settlement_price=104000.0)
    return p


@pytest.fixture
def model(provider):
    return SampleModel(instrument_params_provider=provider)
