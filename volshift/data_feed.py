"""
In-process instrument-data providers.

The host application normally supplies the providers the model consults.
These implementations cover standalone use (the CLI, notebooks, tests):

    1. Static: quotes held in a dict and updated by hand
    2. Table: quotes loaded from a pandas DataFrame or a CSV file

Either way, lookups for an unknown base asset return None rather than
raising, which the resolver reads as "no reference price available".
"""

import logging
from pathlib import Path
from typing import Dict, Optional, Union

import numpy as np
import pandas as pd

from .instruments import BaseAssetParams

logger = logging.getLogger(__name__)

QUOTE_COLUMNS = ("base_asset", "last_price", "settlement_price")


# ════════════════════════════════════════════════════════════════════════
#  STATIC PROVIDERS
# ════════════════════════════════════════════════════════════════════════

class StaticParamsProvider:
    """Dict-backed base-asset quotes."""

    def __init__(self, quotes: Optional[Dict[str, BaseAssetParams]] = None):
        self._quotes: Dict[str, BaseAssetParams] = dict(quotes or {})

    def set_quote(
        self,
        base_asset: str,
        last_price: Optional[float] = None,
        settlement_price: Optional[float] = None,
    ) -> None:
        self._quotes[base_asset] = BaseAssetParams(
            base_asset=base_asset,
            last_price=last_price,
            settlement_price=settlement_price,
        )

    def remove_quote(self, base_asset: str) -> None:
        self._quotes.pop(base_asset, None)

    def get_option_futures_params(self, base_asset: str) -> Optional[BaseAssetParams]:
        params = self._quotes.get(base_asset)
        if params is None or not params.has_price:
            return None
        return params


class StaticPositionsProvider:
    """Dict-backed positions, keyed by instrument code."""

    def __init__(self, positions: Optional[Dict[str, int]] = None):
        self._positions = dict(positions or {})

    def get_position(self, instrument: str) -> int:
        return self._positions.get(instrument, 0)


# ════════════════════════════════════════════════════════════════════════
#  TABLE-BACKED PROVIDER (pandas)
# ════════════════════════════════════════════════════════════════════════

def _optional_price(value) -> Optional[float]:
    if value is None or pd.isna(value):
        return None
    return float(value)


class DataFrameParamsProvider:
    """
    Base-asset quotes from a DataFrame.

    Parameters
    ----------
    df : DataFrame with columns [base_asset, last_price, settlement_price].
         NaN in a price column means that price is absent. When a base
         asset appears more than once, the last row wins.
    """

    def __init__(self, df: pd.DataFrame):
        missing = [c for c in QUOTE_COLUMNS if c not in df.columns]
        if missing:
            raise ValueError(f"Quote table is missing columns: {', '.join(missing)}")

        latest = df.drop_duplicates(subset="base_asset", keep="last")
        self._quotes: Dict[str, BaseAssetParams] = {}
        for row in latest.itertuples(index=False):
            key = str(row.base_asset)
            self._quotes[key] = BaseAssetParams(
                base_asset=key,
                last_price=_optional_price(row.last_price),
                settlement_price=_optional_price(row.settlement_price),
            )

    def __len__(self) -> int:
        return len(self._quotes)

    def get_option_futures_params(self, base_asset: str) -> Optional[BaseAssetParams]:
        params = self._quotes.get(base_asset)
        # a row with neither price cannot serve as a reference
        if params is None or not params.has_price:
            return None
        return params


def load_quotes_csv(path: Union[str, Path]) -> DataFrameParamsProvider:
    """
    Load base-asset quotes from a CSV file.

    The file needs a header row with at least base_asset, last_price and
    settlement_price; empty price cells are treated as absent.

    Raises
    ------
    ValueError : if a required column is missing
    """
    df = pd.read_csv(path, dtype={"base_asset": str})
    for col in ("last_price", "settlement_price"):
        if col in df.columns:
            df[col] = pd.to_numeric(df[col], errors="coerce").astype(np.float64)
    provider = DataFrameParamsProvider(df)
    logger.debug("Loaded %d base-asset quotes from %s", len(provider), path)
    return provider
