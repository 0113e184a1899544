#!/usr/bin/env python3
"""
main.py — Price one option with the volatility-shift model.

Usage:
    python main.py --strike 100000 --expiry 2024-03-21 --spot 105000 --base-vol 0.25
    python main.py --strike 100000 --expiry 2024-03-21 --base-vol 0.25 \\
        --quotes quotes.csv --base-asset RTS-3.24 --model-shift 0.02 --greeks
"""

import argparse
import logging
import sys
from datetime import date, datetime
from decimal import Decimal

from volshift import config
from volshift.data_feed import StaticParamsProvider, load_quotes_csv
from volshift.evaluation import OptionEvaluationParams
from volshift.instruments import InstrumentParams, OptionType
from volshift.model import SampleModel


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Price an option under Black-Scholes with a volatility shift.")
    p.add_argument("--strike", type=Decimal, required=True)
    p.add_argument("--expiry", type=date.fromisoformat, required=True, help="YYYY-MM-DD")
    p.add_argument("--type", choices=[t.value for t in OptionType], default="call")
    p.add_argument("--base-asset", type=str, default="BASE")
    p.add_argument("--base-vol", type=Decimal, required=True, help="instrument base volatility")
    p.add_argument("--model-shift", type=Decimal, default=config.DEFAULT_VOLA_SHIFT)
    p.add_argument("--spot", type=float, default=None, help="base asset price override")
    p.add_argument("--vol", type=float, default=None, help="volatility override")
    p.add_argument("--shift", type=float, default=None, help="per-request volatility shift")
    p.add_argument("--as-of", type=datetime.fromisoformat, default=None)
    p.add_argument("--quotes", type=str, default=None, help="CSV of base-asset quotes")
    p.add_argument("--greeks", action="store_true")
    p.add_argument("-v", "--verbose", action="store_true")
    return p.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    # expiration instants are naive exchange-local times
    if args.as_of is not None and args.as_of.tzinfo is not None:
        print(f"\n  ERROR: --as-of must be exchange-local time without a UTC offset, got {args.as_of.isoformat()}")
        sys.exit(1)

    instrument = InstrumentParams(
        instrument=f"{args.base_asset}-{args.type.upper()}-{args.strike}",
        base_asset=args.base_asset,
        option_type=OptionType(args.type),
        strike=args.strike,
        expiration_date=args.expiry,
        volatility=args.base_vol,
    )

    try:
        provider = load_quotes_csv(args.quotes) if args.quotes else StaticParamsProvider()
    except Exception as e:
        print(f"\n  ERROR: {e}")
        sys.exit(1)

    model = SampleModel(instrument_params_provider=provider)
    control = model.model_params_control
    control.vola_shift = args.model_shift
    control.apply()

    request = OptionEvaluationParams(
        base_asset_price=args.spot,
        time=args.as_of,
        vola=args.vol,
        vola_shift=args.shift,
    )

    print(f"\n{'='*60}")
    print(f"  {model.name} model  |  {instrument.instrument}")
    print(f"  Expiry: {model.expiration_instant(instrument):%Y-%m-%d %H:%M}  |  Shift: {model.vola_shift}")
    print(f"{'='*60}\n")

    try:
        if args.greeks:
            outcome = model.evaluate_price_and_greeks(instrument, request)
        else:
            outcome = model.evaluate_price(instrument, request)
    except Exception as e:
        print(f"  ERROR: {e}")
        sys.exit(1)

    if not outcome.success:
        print(f"  ERROR: cannot price {instrument.instrument} ({outcome.failure.value})")
        sys.exit(1)

    T = model.years_to_expiration(instrument, request.time)
    print(f"       Spot: {request.base_asset_price:.2f}")
    print(f"       Time: {request.time:%Y-%m-%d %H:%M:%S}  ({T:.6f} yrs)")
    print(f"       Vol:  {request.vola + request.vola_shift:.2%}")

    if args.greeks:
        res = outcome.params
        print(f"\n       Price: {res.theor_price:.4f}")
        print(f"       Delta: {res.delta:.6f}")
        print(f"       Gamma: {res.gamma:.8f}")
        print(f"       Vega:  {res.vega:.4f}")
        print(f"       Theta: {res.theta:.4f}")
    else:
        print(f"\n       Price: {outcome.price:.4f}")
    print()


if __name__ == "__main__":
    main()
