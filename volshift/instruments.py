"""
Instrument-side types and the collaborator contracts the model consumes.

Everything here belongs to the host: instrument definitions, option
series, base-asset quotes, and the provider interfaces through which the
model asks for market data it was not given. The model only reads these.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Iterator, List, Optional, Protocol


class OptionType(str, Enum):
    CALL = "call"
    PUT = "put"


@dataclass(frozen=True)
class InstrumentParams:
    """
    An option instrument as the host describes it.

    Attributes
    ----------
    instrument : option contract code
    base_asset : code of the underlying (futures) contract
    option_type : call or put
    strike : exact strike price
    expiration_date : calendar expiration date, no time component
    volatility : the instrument's own base volatility (annualized)
    """
    instrument: str
    base_asset: str
    option_type: OptionType
    strike: Decimal
    expiration_date: date
    volatility: Decimal = Decimal("0")


@dataclass
class OptionsSeries:
    """Options on one base asset sharing an expiration date."""
    base_asset: str
    expiration_date: date
    instruments: List[InstrumentParams] = field(default_factory=list)

    def __iter__(self) -> Iterator[InstrumentParams]:
        return iter(self.instruments)

    def __len__(self) -> int:
        return len(self.instruments)

    def add(self, instrument: InstrumentParams) -> None:
        if instrument.base_asset != self.base_asset:
            raise ValueError(
                f"{instrument.instrument} is on {instrument.base_asset}, "
                f"series is on {self.base_asset}"
            )
        if instrument.expiration_date != self.expiration_date:
            raise ValueError(
                f"{instrument.instrument} expires {instrument.expiration_date}, "
                f"series expires {self.expiration_date}"
            )
        self.instruments.append(instrument)

    def find(self, strike: Decimal, option_type: OptionType) -> Optional[InstrumentParams]:
        for ip in self.instruments:
            if ip.strike == strike and ip.option_type == option_type:
                return ip
        return None

    def strikes(self) -> List[Decimal]:
        return sorted({ip.strike for ip in self.instruments})


@dataclass(frozen=True)
class BaseAssetParams:
    """Market state of a base asset: last trade and settlement prices."""
    base_asset: str
    last_price: Optional[float] = None
    settlement_price: Optional[float] = None

    @property
    def has_price(self) -> bool:
        return self.last_price is not None or self.settlement_price is not None

    def get_last_price_or_settlement(self) -> float:
        """Last trade price, or the settlement price if nothing has traded."""
        if self.last_price is not None:
            return self.last_price
        if self.settlement_price is not None:
            return self.settlement_price
        raise ValueError(f"No last or settlement price for {self.base_asset}")


class InstrumentParamsProvider(Protocol):
    """Source of base-asset parameters for option instruments."""

    def get_option_futures_params(self, base_asset: str) -> Optional[BaseAssetParams]:
        """Params for the base asset, or None (never raise) when unknown."""
        ...


class PositionsProvider(Protocol):
    """Source of current positions. Part of the host contract; unused in pricing."""

    def get_position(self, instrument: str) -> int:
        ...
