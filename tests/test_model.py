"""
Tests for the pricing model: evaluation, staged shift settings, expiry time.
"""

import threading
from datetime import datetime, time, timedelta
from decimal import Decimal

import pytest

from volshift import black_scholes
from volshift.data_feed import StaticParamsProvider, StaticPositionsProvider
from volshift.evaluation import FailureReason, OptionEvaluationParams
from volshift.instruments import OptionsSeries
from volshift.model import SampleModel
from volshift.params_control import ModelParamsControl

CUTOFF = datetime(2024, 3, 21, 18, 45)


def commit_shift(model, value):
    control = model.model_params_control
    control.vola_shift = value
    control.apply()


class TestWorkedExample:
    """Strike 100000, futures at 105000, base vol 25%, model shift +2 vol points."""

    @pytest.fixture
    def shifted_model(self, model):
        commit_shift(model, Decimal("0.02"))
        return model

    def test_resolved_inputs(self, shifted_model, call_option):
        request = OptionEvaluationParams(time=CUTOFF - timedelta(days=30))
        shifted_model.calc_price(call_option, request)
        assert request.base_asset_price == 105000.0
        assert request.vola == pytest.approx(0.27)
        assert request.vola_shift == 0.0
        T = shifted_model.years_to_expiration(call_option, request.time)
        assert T == pytest.approx(30 / 365.25)

    def test_price_reference_value(self, shifted_model, call_option):
        request = OptionEvaluationParams(time=CUTOFF - timedelta(days=30))
        p = shifted_model.calc_price(call_option, request)
        # S*N(d1) - K*N(d2) with d1 = 0.66921605, d2 = 0.59183595
        assert p == pytest.approx(6271.7447, rel=1e-6)

    def test_delta_reference_value(self, shifted_model, call_option):
        request = OptionEvaluationParams(time=CUTOFF - timedelta(days=30))
        res = shifted_model.calc_price_and_greeks(call_option, request)
        assert res.delta == pytest.approx(0.74832117, rel=1e-6)

    def test_greeks_match_formula(self, shifted_model, call_option):
        request = OptionEvaluationParams(time=CUTOFF - timedelta(days=30))
        res = shifted_model.calc_price_and_greeks(call_option, request)
        expected = black_scholes.price_and_greeks("call", 105000.0, 100000.0, 30 / 365.25, 0.0, 0.27)
        got = (res.theor_price, res.delta, res.gamma, res.vega, res.theta)
        assert got == pytest.approx(expected, rel=1e-12)
        assert res.base_asset_price == 105000.0
        assert res.theor_iv == pytest.approx(0.27)


class TestCalcPrice:

    def test_request_shift_added_to_vola(self, model, call_option):
        t = CUTOFF - timedelta(days=60)
        request = OptionEvaluationParams(base_asset_price=100000.0, time=t, vola=0.2, vola_shift=0.05)
        p = model.calc_price(call_option, request)
        T = model.years_to_expiration(call_option, t)
        assert p == pytest.approx(black_scholes.price("call", 100000.0, 100000.0, T, 0.0, 0.25), rel=1e-12)

    def test_put(self, model, put_option):
        t = CUTOFF - timedelta(days=10)
        request = OptionEvaluationParams(time=t)
        p = model.calc_price(put_option, request)
        T = model.years_to_expiration(put_option, t)
        assert p == black_scholes.price("put", 105000.0, 100000.0, T, 0.0, 0.25)

    def test_unresolvable_returns_zero(self, call_option):
        model = SampleModel(instrument_params_provider=StaticParamsProvider())
        assert model.calc_price(call_option, OptionEvaluationParams()) == 0

    def test_quote_without_price_returns_sentinels(self, call_option):
        p = StaticParamsProvider()
        p.set_quote(call_option.base_asset)
        model = SampleModel(instrument_params_provider=p)
        assert model.calc_price(call_option, OptionEvaluationParams()) == 0
        res = model.calc_price_and_greeks(call_option, OptionEvaluationParams())
        assert res.instrument is call_option
        assert not res.is_calculated
        outcome = model.evaluate_price(call_option, OptionEvaluationParams())
        assert outcome.failure is FailureReason.BASE_ASSET_PRICE_UNAVAILABLE

    def test_unresolvable_without_provider(self, call_option):
        assert SampleModel().calc_price(call_option, OptionEvaluationParams()) == 0

    def test_explicit_spot_needs_no_provider(self, call_option):
        request = OptionEvaluationParams(base_asset_price=110000.0, time=CUTOFF - timedelta(days=5))
        assert SampleModel().calc_price(call_option, request) > 10000.0

    def test_evaluate_price_reports_failure(self, call_option):
        model = SampleModel(instrument_params_provider=StaticParamsProvider())
        outcome = model.evaluate_price(call_option, OptionEvaluationParams())
        assert not outcome.success
        assert outcome.price is None
        assert outcome.failure is FailureReason.BASE_ASSET_PRICE_UNAVAILABLE

    def test_evaluate_price_distinguishes_true_zero(self, model, call_option):
        """A deep OTM expired call is worth exactly 0 and still succeeds."""
        request = OptionEvaluationParams(base_asset_price=90000.0, time=CUTOFF)
        outcome = model.evaluate_price(call_option, request)
        assert outcome.success
        assert outcome.price == 0.0

    def test_default_time_from_clock(self, provider, call_option):
        now = CUTOFF - timedelta(days=7)
        model = SampleModel(instrument_params_provider=provider, clock=lambda: now)
        request = OptionEvaluationParams()
        model.calc_price(call_option, request)
        assert request.time == now


class TestCalcPriceAndGreeks:

    def test_identity_always_set(self, model, call_option):
        res = model.calc_price_and_greeks(call_option, OptionEvaluationParams(time=CUTOFF - timedelta(days=3)))
        assert res.instrument is call_option
        assert res.strike == Decimal("100000")
        assert res.option_type == call_option.option_type
        assert res.expiration_date == call_option.expiration_date
        assert res.is_calculated

    def test_unresolvable_leaves_outputs_unset(self, call_option):
        model = SampleModel(instrument_params_provider=StaticParamsProvider())
        res = model.calc_price_and_greeks(call_option, OptionEvaluationParams())
        assert res.instrument is call_option
        assert not res.is_calculated
        for value in (res.base_asset_price, res.theor_iv, res.theor_price,
                      res.delta, res.gamma, res.vega, res.theta):
            assert value is None

    def test_evaluate_reports_failure(self, call_option):
        outcome = SampleModel().evaluate_price_and_greeks(call_option, OptionEvaluationParams())
        assert not outcome.success
        assert outcome.failure is FailureReason.BASE_ASSET_PRICE_UNAVAILABLE
        assert outcome.params.instrument is call_option

    def test_fresh_result_per_call(self, model, call_option):
        t = CUTOFF - timedelta(days=3)
        a = model.calc_price_and_greeks(call_option, OptionEvaluationParams(time=t))
        b = model.calc_price_and_greeks(call_option, OptionEvaluationParams(time=t))
        assert a is not b
        assert a == b

    def test_theor_iv_includes_request_shift(self, model, put_option):
        request = OptionEvaluationParams(time=CUTOFF - timedelta(days=20), vola_shift=-0.03)
        res = model.calc_price_and_greeks(put_option, request)
        assert res.theor_iv == pytest.approx(0.22)
        assert -1.0 <= res.delta <= 0.0


class TestVolaShiftSettings:

    def test_starts_at_zero(self, model, call_option):
        assert model.vola_shift == Decimal("0")
        assert model.get_vola(call_option) == Decimal("0.25")

    def test_pending_shift_not_in_effect(self, model, call_option):
        control = model.model_params_control
        control.vola_shift = Decimal("0.05")
        assert model.vola_shift_temp == Decimal("0.05")
        assert model.get_vola(call_option) == Decimal("0.25")

    def test_apply_changes_commits(self, model, call_option):
        model.model_params_control.vola_shift = Decimal("0.05")
        model.apply_changes()
        assert model.get_vola(call_option) == Decimal("0.30")

    def test_negative_shift(self, model, call_option):
        commit_shift(model, "-0.04")
        assert model.get_vola(call_option) == Decimal("0.21")

    def test_float_input_kept_exact(self, model):
        commit_shift(model, 0.02)
        assert model.vola_shift == Decimal("0.02")

    def test_reopening_discards_unconfirmed_edit(self, model):
        commit_shift(model, Decimal("0.01"))
        model.model_params_control.vola_shift = Decimal("0.09")
        control = model.model_params_control
        assert control.vola_shift == Decimal("0.01")
        assert model.vola_shift_temp == Decimal("0.01")

    def test_control_is_fresh_binding(self, model):
        a = model.model_params_control
        b = model.model_params_control
        assert isinstance(a, ModelParamsControl)
        assert a is not b

    def test_applied_shift_feeds_default_vola(self, model, call_option):
        commit_shift(model, Decimal("0.1"))
        request = OptionEvaluationParams(time=CUTOFF - timedelta(days=1))
        model.calc_price(call_option, request)
        assert request.vola == pytest.approx(0.35)

    def test_explicit_vola_ignores_model_shift(self, model, call_option):
        commit_shift(model, Decimal("0.1"))
        request = OptionEvaluationParams(time=CUTOFF - timedelta(days=1), vola=0.2)
        res = model.calc_price_and_greeks(call_option, request)
        assert res.theor_iv == 0.2

    def test_concurrent_apply_and_read(self, model, call_option):
        """Readers only ever see committed values."""
        committed = {Decimal("0"), Decimal("0.01"), Decimal("0.02")}
        seen = set()

        def writer():
            for i in range(200):
                commit_shift(model, Decimal("0.01") if i % 2 else Decimal("0.02"))

        def reader():
            for _ in range(200):
                seen.add(model.get_vola(call_option) - call_option.volatility)

        threads = [threading.Thread(target=writer), threading.Thread(target=reader)]
        for th in threads:
            th.start()
        for th in threads:
            th.join()
        assert seen <= committed


class TestYearsToExpiration:

    def test_zero_at_cutoff(self, model, call_option):
        assert model.years_to_expiration(call_option, CUTOFF) == 0

    def test_deterministic(self, model, call_option):
        t = datetime(2024, 1, 15, 10, 0)
        assert model.years_to_expiration(call_option, t) == model.years_to_expiration(call_option, t)

    def test_negative_after_expiry(self, model, call_option):
        assert model.years_to_expiration(call_option, CUTOFF + timedelta(hours=1)) < 0

    def test_midnight_of_expiry_day(self, model, call_option):
        t = datetime(2024, 3, 21)
        hours = 18.75
        assert model.years_to_expiration(call_option, t) == pytest.approx(hours / 24 / 365.25)

    def test_cutoff_override(self, provider, call_option):
        model = SampleModel(instrument_params_provider=provider, expiration_cutoff=time(23, 50))
        assert model.expiration_instant(call_option) == datetime(2024, 3, 21, 23, 50)
        assert model.years_to_expiration(call_option, datetime(2024, 3, 21, 23, 50)) == 0


class TestHostProperties:

    def test_name(self, model):
        assert model.name == "Sample"

    def test_provider_is_settable(self, call_option):
        model = SampleModel()
        assert model.calc_price(call_option, OptionEvaluationParams()) == 0
        p = StaticParamsProvider()
        p.set_quote(call_option.base_asset, last_price=100000.0)
        model.instrument_params_provider = p
        assert model.instrument_params_provider is p
        request = OptionEvaluationParams(time=CUTOFF - timedelta(days=30))
        assert model.calc_price(call_option, request) > 0

    def test_series_and_positions(self, call_option, put_option):
        series = OptionsSeries(call_option.base_asset, call_option.expiration_date)
        series.add(call_option)
        series.add(put_option)
        positions = StaticPositionsProvider({call_option.instrument: 5})
        model = SampleModel(options_series=series, positions=positions)
        assert len(model.options_series) == 2
        assert model.positions.get_position(call_option.instrument) == 5
        assert model.positions.get_position(put_option.instrument) == 0
