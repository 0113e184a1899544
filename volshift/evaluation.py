"""
Evaluation requests and results.

OptionEvaluationParams is what a caller hands the model: every field is
optional, and the resolver fills the gaps in place before any formula
runs. InstrumentCalculatedParams is the price+greeks bundle handed back.

PriceOutcome and GreeksOutcome say explicitly whether a value was
computed, so "could not price" is never confused with a genuine zero
price or zero risk.
"""

from dataclasses import dataclass, field, fields
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from .instruments import InstrumentParams, OptionType


@dataclass
class OptionEvaluationParams:
    """
    An evaluation request. None means "let the model infer it".

    Attributes
    ----------
    base_asset_price : spot (base asset) price to evaluate at
    time : evaluation instant
    vola : volatility to evaluate with
    vola_shift : call-specific shift added on top of vola
    """
    base_asset_price: Optional[float] = None
    time: Optional[datetime] = None
    vola: Optional[float] = None
    vola_shift: Optional[float] = None

    def missing_fields(self) -> List[str]:
        return [f.name for f in fields(self) if getattr(self, f.name) is None]

    def is_complete(self) -> bool:
        return not self.missing_fields()


@dataclass
class InstrumentCalculatedParams:
    """
    Theoretical parameters of one instrument for one evaluation.

    Numeric outputs stay None when the evaluation could not be carried out.
    """
    instrument: InstrumentParams
    base_asset_price: Optional[float] = None
    theor_iv: Optional[float] = None
    theor_price: Optional[float] = None
    delta: Optional[float] = None
    gamma: Optional[float] = None
    vega: Optional[float] = None
    theta: Optional[float] = None

    @property
    def strike(self) -> Decimal:
        return self.instrument.strike

    @property
    def option_type(self) -> OptionType:
        return self.instrument.option_type

    @property
    def expiration_date(self) -> date:
        return self.instrument.expiration_date

    @property
    def is_calculated(self) -> bool:
        return self.theor_price is not None


class FailureReason(str, Enum):
    BASE_ASSET_PRICE_UNAVAILABLE = "base_asset_price_unavailable"


@dataclass(frozen=True)
class PriceOutcome:
    """
    Result of a price-only evaluation.

    Attributes
    ----------
    price : theoretical price; None unless the evaluation succeeded
    failure : why the price could not be computed, None on success
    """
    price: Optional[float] = None
    failure: Optional[FailureReason] = None

    @property
    def success(self) -> bool:
        return self.failure is None


@dataclass(frozen=True)
class GreeksOutcome:
    """Result of a price+greeks evaluation; params is identity-only on failure."""
    params: InstrumentCalculatedParams
    failure: Optional[FailureReason] = field(default=None)

    @property
    def success(self) -> bool:
        return self.failure is None
