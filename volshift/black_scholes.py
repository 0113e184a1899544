"""
Black-Scholes closed-form pricing, greeks and the year-fraction convention.

This is the formula library the pricing model delegates to. Everything
here is a pure function of its numeric inputs: no market state, no
configuration beyond the day-count constant.

The model-facing entry points are ``price``, ``price_and_greeks`` and
``year_fraction``; the per-greek functions are exposed for callers that
need a single sensitivity.

References:
    Black, F. & Scholes, M. (1973). The Pricing of Options and Corporate Liabilities.
    Hull, J.C. (2018). Options, Futures, and Other Derivatives. 10th ed.
"""

from datetime import datetime
from typing import Tuple

import numpy as np
from scipy.stats import norm

from . import config


def _is_call(option_type: str) -> bool:
    kind = option_type.lower()
    if kind in ("c", "call"):
        return True
    if kind in ("p", "put"):
        return False
    raise ValueError(f"Unknown option_type: {option_type}. Use 'call' or 'put'.")


# ════════════════════════════════════════════════════════════════════════
#  PRICING
# ════════════════════════════════════════════════════════════════════════

def d1(S: float, K: float, T: float, r: float, sigma: float) -> float:
    """
    Compute d1 in the Black-Scholes formula.

    Parameters
    ----------
    S : spot (base asset) price
    K : strike price
    T : time to expiry in years
    r : risk-free rate (annualized, continuous compounding)
    sigma : volatility (annualized)

    Returns
    -------
    float
    """
    if T <= 0 or sigma <= 0:
        return 0.0
    return (np.log(S / K) + (r + 0.5 * sigma**2) * T) / (sigma * np.sqrt(T))


def d2(S: float, K: float, T: float, r: float, sigma: float) -> float:
    """Compute d2 = d1 - sigma * sqrt(T)."""
    return d1(S, K, T, r, sigma) - sigma * np.sqrt(max(T, 0.0))


def call_price(S: float, K: float, T: float, r: float, sigma: float) -> float:
    """
    European call price under Black-Scholes.

    Expired options (T <= 0) are worth their intrinsic value; with zero
    volatility the call is worth its discounted intrinsic value.
    """
    if T <= 0:
        return max(S - K, 0.0)
    if sigma <= 0:
        return max(S - K * np.exp(-r * T), 0.0)

    _d1 = d1(S, K, T, r, sigma)
    _d2 = _d1 - sigma * np.sqrt(T)
    return float(S * norm.cdf(_d1) - K * np.exp(-r * T) * norm.cdf(_d2))


def put_price(S: float, K: float, T: float, r: float, sigma: float) -> float:
    """
    European put price under Black-Scholes.

        P = K * e^{-rT} * N(-d2) - S * N(-d1)
    """
    if T <= 0:
        return max(K - S, 0.0)
    if sigma <= 0:
        return max(K * np.exp(-r * T) - S, 0.0)

    _d1 = d1(S, K, T, r, sigma)
    _d2 = _d1 - sigma * np.sqrt(T)
    return float(K * np.exp(-r * T) * norm.cdf(-_d2) - S * norm.cdf(-_d1))


def bs_price(S: float, K: float, T: float, r: float, sigma: float,
             option_type: str = "call") -> float:
    """Dispatch to call_price or put_price based on option_type."""
    if _is_call(option_type):
        return call_price(S, K, T, r, sigma)
    return put_price(S, K, T, r, sigma)


# ════════════════════════════════════════════════════════════════════════
#  GREEKS
# ════════════════════════════════════════════════════════════════════════

def delta(S: float, K: float, T: float, r: float, sigma: float,
          option_type: str = "call") -> float:
    """
    Option delta: dV/dS.

    Call delta is in [0, 1]; put delta is in [-1, 0]. At or past expiry
    delta is a step function at the strike.
    """
    call = _is_call(option_type)
    if T <= 0 or sigma <= 0:
        if call:
            return 1.0 if S > K else 0.0
        return -1.0 if S < K else 0.0

    _d1 = d1(S, K, T, r, sigma)
    if call:
        return float(norm.cdf(_d1))
    return float(norm.cdf(_d1) - 1.0)


def gamma(S: float, K: float, T: float, r: float, sigma: float) -> float:
    """Option gamma: d²V/dS². Same for calls and puts."""
    if T <= 0 or sigma <= 0 or S <= 0:
        return 0.0
    _d1 = d1(S, K, T, r, sigma)
    return float(norm.pdf(_d1) / (S * sigma * np.sqrt(T)))


def vega(S: float, K: float, T: float, r: float, sigma: float) -> float:
    """
    Option vega: dV/dσ.

    Sensitivity per 1 unit (100%) change in vol; divide by 100 for
    sensitivity per vol point. Same for calls and puts.
    """
    if T <= 0 or sigma <= 0 or S <= 0:
        return 0.0
    _d1 = d1(S, K, T, r, sigma)
    return float(S * norm.pdf(_d1) * np.sqrt(T))


def theta(S: float, K: float, T: float, r: float, sigma: float,
          option_type: str = "call") -> float:
    """
    Option theta: -dV/dT (time decay per year).

    Divide by 365 for daily theta.
    """
    call = _is_call(option_type)
    if T <= 0 or sigma <= 0:
        return 0.0

    _d1 = d1(S, K, T, r, sigma)
    _d2 = _d1 - sigma * np.sqrt(T)

    time_decay = -(S * norm.pdf(_d1) * sigma) / (2 * np.sqrt(T))

    if call:
        return float(time_decay - r * K * np.exp(-r * T) * norm.cdf(_d2))
    return float(time_decay + r * K * np.exp(-r * T) * norm.cdf(-_d2))


# ════════════════════════════════════════════════════════════════════════
#  MODEL-FACING ENTRY POINTS
# ════════════════════════════════════════════════════════════════════════

def price(option_type: str, spot: float, strike: float, years: float,
          rate: float, volatility: float) -> float:
    """Theoretical price, argument order as the pricing model calls it."""
    return bs_price(spot, strike, years, rate, volatility, option_type)


def price_and_greeks(
    option_type: str,
    spot: float,
    strike: float,
    years: float,
    rate: float,
    volatility: float,
) -> Tuple[float, float, float, float, float]:
    """
    Price and first/second-order sensitivities in one call.

    Returns
    -------
    tuple : (price, delta, gamma, vega, theta), always in this order
    """
    S, K, T, r, sigma = spot, strike, years, rate, volatility
    return (
        bs_price(S, K, T, r, sigma, option_type),
        delta(S, K, T, r, sigma, option_type),
        gamma(S, K, T, r, sigma),
        vega(S, K, T, r, sigma),
        theta(S, K, T, r, sigma, option_type),
    )


def year_fraction(start: datetime, end: datetime) -> float:
    """
    Elapsed time from start to end in years (ACT/365.25).

    Negative when start is after end; callers decide what an expired
    option means for them.
    """
    seconds_per_year = config.DAYS_PER_YEAR * 24 * 3600
    return (end - start).total_seconds() / seconds_per_year
