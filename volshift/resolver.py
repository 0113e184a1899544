"""
Completion of partially specified evaluation requests.

Each field of an OptionEvaluationParams left as None is filled by a fixed
fallback:

    base_asset_price : provider's last trade (or settlement) price of the
                       underlying; the only step that can fail
    time             : current wall-clock time
    vola             : the model's own volatility for the instrument
    vola_shift       : zero

Fields the caller supplied are never touched, so resolving an already
complete request is a no-op.
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Callable, Optional

from . import config
from .evaluation import OptionEvaluationParams
from .instruments import InstrumentParams, InstrumentParamsProvider

logger = logging.getLogger(__name__)


class EvaluationParamsResolver:
    """
    Fills unset request fields in place.

    Parameters
    ----------
    provider : instrument-data provider consulted for missing spot prices;
               None behaves like a provider that knows nothing
    vola_source : volatility for an instrument when the request has none
                  (the pricing model's get_vola)
    clock : current time source
    """

    def __init__(
        self,
        provider: Optional[InstrumentParamsProvider],
        vola_source: Callable[[InstrumentParams], Decimal],
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.provider = provider
        self._vola_source = vola_source
        self._clock = clock

    def resolve(self, instrument: InstrumentParams, request: OptionEvaluationParams) -> bool:
        """
        Complete request for instrument.

        Returns
        -------
        bool : False if no base-asset price could be obtained, in which
               case pricing is impossible and the request is left as is
        """
        if request.base_asset_price is None:
            spot = self._lookup_base_asset_price(instrument)
            if spot is None:
                return False
            request.base_asset_price = spot

        if request.time is None:
            request.time = self._clock()

        if request.vola is None:
            request.vola = float(self._vola_source(instrument))

        if request.vola_shift is None:
            request.vola_shift = config.DEFAULT_REQUEST_VOLA_SHIFT

        return True

    def _lookup_base_asset_price(self, instrument: InstrumentParams) -> Optional[float]:
        if self.provider is None:
            logger.debug("No data provider; cannot price %s without a spot", instrument.instrument)
            return None

        params = self.provider.get_option_futures_params(instrument.base_asset)
        if params is None or not params.has_price:
            logger.debug(
                "No base-asset price for %s (underlying %s)",
                instrument.instrument, instrument.base_asset,
            )
            return None

        return params.get_last_price_or_settlement()
