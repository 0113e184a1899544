"""
Black-Scholes pricing model with a user-adjustable constant volatility shift.

The shift lives in two places:

    applied shift : what every pricing call sees; written only by
                    apply_changes()
    pending shift : what the settings surface edits; refreshed from the
                    applied shift each time the settings are opened

so a pricing call in flight never sees a half-edited value. The applied
shift is the only state shared between the pricing thread and the
settings thread, and it is guarded by a lock.

Evaluation flow for both calc_price and calc_price_and_greeks:

    1. Complete the request via EvaluationParamsResolver
    2. Convert the evaluation time to years before the expiration cutoff
    3. Call the formula library with vola + request-level vola_shift
"""

import logging
import threading
from datetime import datetime, time
from decimal import Decimal
from typing import Callable, Optional

from . import black_scholes, config
from .evaluation import (
    FailureReason,
    GreeksOutcome,
    InstrumentCalculatedParams,
    OptionEvaluationParams,
    PriceOutcome,
)
from .instruments import (
    InstrumentParams,
    InstrumentParamsProvider,
    OptionsSeries,
    PositionsProvider,
)
from .params_control import ModelParamsControl, ShiftValue, to_decimal
from .resolver import EvaluationParamsResolver

logger = logging.getLogger(__name__)


class SampleModel:
    """
    Option pricing model: Black-Scholes over the instrument's volatility
    shifted up or down by a constant.

    Parameters
    ----------
    options_series : the option series the model is attached to
    instrument_params_provider : source of base-asset prices for requests
                                 that do not carry one
    positions : positions provider (host contract; not used for pricing)
    expiration_cutoff : time of day at which options expire
                        (default: config.EXPIRATION_CUTOFF)
    clock : current time source for requests without a time
    """

    def __init__(
        self,
        options_series: Optional[OptionsSeries] = None,
        instrument_params_provider: Optional[InstrumentParamsProvider] = None,
        positions: Optional[PositionsProvider] = None,
        expiration_cutoff: Optional[time] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.options_series = options_series
        self.positions = positions
        if expiration_cutoff is None:
            expiration_cutoff = config.EXPIRATION_CUTOFF
        self.expiration_cutoff = expiration_cutoff

        self._lock = threading.Lock()
        self._vola_shift = config.DEFAULT_VOLA_SHIFT
        self._vola_shift_temp = config.DEFAULT_VOLA_SHIFT

        self._resolver = EvaluationParamsResolver(
            provider=instrument_params_provider,
            vola_source=self.get_vola,
            clock=clock,
        )

    # ── host-facing properties ───────────────────────────────────────────

    @property
    def name(self) -> str:
        return config.MODEL_NAME

    @property
    def instrument_params_provider(self) -> Optional[InstrumentParamsProvider]:
        return self._resolver.provider

    @instrument_params_provider.setter
    def instrument_params_provider(self, provider: Optional[InstrumentParamsProvider]) -> None:
        self._resolver.provider = provider

    @property
    def vola_shift(self) -> Decimal:
        """Shift currently in effect for pricing."""
        with self._lock:
            return self._vola_shift

    @property
    def vola_shift_temp(self) -> Decimal:
        """Pending shift, not yet in effect."""
        return self._vola_shift_temp

    @vola_shift_temp.setter
    def vola_shift_temp(self, value: ShiftValue) -> None:
        self._vola_shift_temp = to_decimal(value)

    @property
    def model_params_control(self) -> ModelParamsControl:
        """
        Open the settings. Any unconfirmed edit is discarded: the pending
        shift restarts from the last applied value.
        """
        self._vola_shift_temp = self.vola_shift
        return ModelParamsControl(self)

    def apply_changes(self) -> None:
        """Put the pending shift into effect."""
        with self._lock:
            self._vola_shift = self._vola_shift_temp
            applied = self._vola_shift
        logger.info("%s model: volatility shift set to %s", self.name, applied)

    # ── volatility ───────────────────────────────────────────────────────

    def get_vola(self, instrument: InstrumentParams) -> Decimal:
        """Instrument base volatility plus the applied model shift."""
        return instrument.volatility + self.vola_shift

    # ── evaluation ───────────────────────────────────────────────────────

    def evaluate_price(
        self, instrument: InstrumentParams, request: OptionEvaluationParams
    ) -> PriceOutcome:
        """
        Theoretical price of instrument, or the reason it cannot be computed.

        request is completed in place.
        """
        if not self._resolver.resolve(instrument, request):
            return PriceOutcome(failure=FailureReason.BASE_ASSET_PRICE_UNAVAILABLE)
        self._check_resolved(request)

        T = self.years_to_expiration(instrument, request.time)
        value = black_scholes.price(
            instrument.option_type,
            request.base_asset_price,
            float(instrument.strike),
            T,
            config.RISK_FREE_RATE,
            request.vola + request.vola_shift,
        )
        return PriceOutcome(price=value)

    def evaluate_price_and_greeks(
        self, instrument: InstrumentParams, request: OptionEvaluationParams
    ) -> GreeksOutcome:
        """
        Price and greeks of instrument. On failure the returned params carry
        only the instrument identity.
        """
        result = InstrumentCalculatedParams(instrument)

        if not self._resolver.resolve(instrument, request):
            return GreeksOutcome(result, failure=FailureReason.BASE_ASSET_PRICE_UNAVAILABLE)
        self._check_resolved(request)

        T = self.years_to_expiration(instrument, request.time)
        sigma = request.vola + request.vola_shift

        result.base_asset_price = request.base_asset_price
        result.theor_iv = sigma

        all_outputs = black_scholes.price_and_greeks(
            instrument.option_type,
            request.base_asset_price,
            float(instrument.strike),
            T,
            config.RISK_FREE_RATE,
            sigma,
        )
        (result.theor_price,
         result.delta,
         result.gamma,
         result.vega,
         result.theta) = all_outputs

        return GreeksOutcome(result)

    def calc_price(self, instrument: InstrumentParams, request: OptionEvaluationParams) -> float:
        """
        Theoretical price of instrument; 0.0 when it cannot be computed.

        Use evaluate_price to tell "cannot price" apart from a zero price.
        """
        outcome = self.evaluate_price(instrument, request)
        if not outcome.success:
            return 0.0
        return outcome.price

    def calc_price_and_greeks(
        self, instrument: InstrumentParams, request: OptionEvaluationParams
    ) -> InstrumentCalculatedParams:
        """Price and greeks of instrument; numeric fields stay unset when it cannot be computed."""
        return self.evaluate_price_and_greeks(instrument, request).params

    # ── time ─────────────────────────────────────────────────────────────

    def expiration_instant(self, instrument: InstrumentParams) -> datetime:
        return datetime.combine(instrument.expiration_date, self.expiration_cutoff)

    def years_to_expiration(self, instrument: InstrumentParams, as_of: datetime) -> float:
        """Years from as_of to the instrument's expiration cutoff; negative once expired."""
        return black_scholes.year_fraction(as_of, self.expiration_instant(instrument))

    @staticmethod
    def _check_resolved(request: OptionEvaluationParams) -> None:
        assert request.is_complete(), f"unresolved request fields: {request.missing_fields()}"
