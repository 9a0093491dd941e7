"""
Tests for the linear trend, seasonal naive and Holt-Winters forecasters.
"""
import numpy as np
import pytest

from revenue_forecast.errors import InsufficientHistoryError, InvalidParameterError, UnknownMethodError
from revenue_forecast.models import (
    ForecastMethod,
    HoltWinters,
    HoltWintersState,
    LinearTrend,
    SeasonalNaive,
    effective_model,
    fit_holt_winters,
    fit_linear_trend,
    forecast_holt_winters,
    forecast_linear_trend,
    forecast_seasonal_naive,
    holt_winters_step,
    initialize_holt_winters,
    resolve_model,
)


# =============================================================================
# Linear trend
# =============================================================================

class TestLinearTrend:
    def test_exact_fit(self, linear_values):
        fit = fit_linear_trend(linear_values)
        assert fit.slope == pytest.approx(100.0, abs=1e-9)
        assert fit.intercept == pytest.approx(100.0, abs=1e-9)

    def test_extrapolation(self, linear_values):
        forecast = forecast_linear_trend(linear_values, 3)
        np.testing.assert_allclose(forecast, [700.0, 800.0, 900.0], atol=1e-9)

    def test_clamps_negative_values(self):
        forecast = forecast_linear_trend([500, 400, 300, 200, 100, 50], 12)
        assert (forecast >= 0).all()
        assert forecast[-1] == 0.0

    def test_constant_series(self):
        np.testing.assert_allclose(forecast_linear_trend([5, 5, 5], 2), [5.0, 5.0])

    @pytest.mark.parametrize("values", [[], [42.0]])
    def test_degenerate_history_raises(self, values):
        with pytest.raises(InsufficientHistoryError):
            fit_linear_trend(values)


# =============================================================================
# Seasonal naive
# =============================================================================

class TestSeasonalNaive:
    def test_repeats_last_season(self, seasonal_values):
        forecast = forecast_seasonal_naive(seasonal_values, 12)
        np.testing.assert_array_equal(forecast, seasonal_values)

    def test_uses_most_recent_season(self, seasonal_values):
        history = [1.0] * 6 + seasonal_values
        forecast = forecast_seasonal_naive(history, 14)
        np.testing.assert_array_equal(forecast[:12], seasonal_values)
        np.testing.assert_array_equal(forecast[12:], seasonal_values[:2])

    def test_short_history_repeats_last_value(self):
        forecast = forecast_seasonal_naive([10, 20, 30, 40, 50, 60, 77.5], 5)
        np.testing.assert_array_equal(forecast, [77.5] * 5)

    def test_negative_month_is_clamped(self, seasonal_values):
        history = seasonal_values[:-1] + [-250.0]
        forecast = forecast_seasonal_naive(history, 12)
        assert forecast[-1] == 0.0
        np.testing.assert_array_equal(forecast[:11], seasonal_values[:11])

    def test_short_history_negative_last_value_is_clamped(self):
        forecast = forecast_seasonal_naive([100, 120, 110, 130, 90, -50], 3)
        np.testing.assert_array_equal(forecast, [0.0, 0.0, 0.0])


# =============================================================================
# Holt-Winters
# =============================================================================

class TestHoltWinters:
    def test_initial_state(self):
        values = [1000 if i % 2 == 0 else 1500 for i in range(24)]
        state = initialize_holt_winters(values)

        assert state.level == 1000
        assert state.trend == 0
        assert state.seasonals == tuple([-250.0, 250.0] * 6)

    def test_initial_trend_spans_one_season(self):
        values = list(range(100, 124))
        state = initialize_holt_winters(values)
        assert state.trend == pytest.approx(1.0)

    def test_requires_two_seasons(self):
        with pytest.raises(InsufficientHistoryError):
            initialize_holt_winters(list(range(23)))

    def test_step_returns_new_state(self):
        state = HoltWintersState(level=100.0, trend=2.0, seasonals=(10.0, -10.0))
        updated = holt_winters_step(state, 120.0, 0, alpha=0.5, beta=0.5, gamma=0.5)

        assert state == HoltWintersState(level=100.0, trend=2.0, seasonals=(10.0, -10.0))
        assert updated.level == pytest.approx(0.5 * 110 + 0.5 * 102)
        assert updated.trend == pytest.approx(0.5 * (106 - 100) + 0.5 * 2)
        assert updated.seasonals == pytest.approx((0.5 * (120 - 106) + 0.5 * 10, -10.0))

    def test_fit_is_a_fold_over_steps(self):
        values = [float(v) for v in range(24)]
        state = initialize_holt_winters(values)
        for i in range(1, 24):
            state = holt_winters_step(state, values[i], i % 12, 0.2, 0.1, 0.1)
        assert fit_holt_winters(values, 0.2, 0.1, 0.1) == state

    def test_converges_on_alternating_series(self):
        values = [1000 if i % 2 == 0 else 1500 for i in range(24)]
        forecast = forecast_holt_winters(values, 2, 0.2, 0.1, 0.1)
        assert forecast[0] == pytest.approx(1000, abs=50)
        assert forecast[1] == pytest.approx(1500, abs=50)

    def test_non_negative(self):
        values = [1000 - 40 * i for i in range(24)]
        forecast = forecast_holt_winters(values, 12, 0.2, 0.1, 0.1)
        assert (forecast >= 0).all()

    @pytest.mark.parametrize("params", [{"alpha": 0.0}, {"beta": 1.0}, {"gamma": -0.2}])
    def test_rejects_parameters_outside_unit_interval(self, params):
        with pytest.raises(InvalidParameterError):
            HoltWinters(**params)


# =============================================================================
# Method dispatch
# =============================================================================

class TestResolveModel:
    def test_variants(self):
        assert resolve_model("linear") == LinearTrend()
        assert resolve_model("seasonal") == SeasonalNaive()
        assert resolve_model(ForecastMethod.HOLT_WINTERS, alpha=0.3) == HoltWinters(alpha=0.3)

    def test_legacy_spelling(self):
        assert isinstance(resolve_model("holtwinters"), HoltWinters)

    def test_unknown_method(self):
        with pytest.raises(UnknownMethodError, match="arima"):
            resolve_model("arima")

    def test_holt_winters_falls_back_when_short(self):
        model, reason = effective_model(HoltWinters(), 20)
        assert model == LinearTrend()
        assert "24" in reason

    def test_no_fallback_with_enough_history(self):
        model, reason = effective_model(HoltWinters(), 24)
        assert model == HoltWinters()
        assert reason is None
        assert effective_model(SeasonalNaive(), 6) == (SeasonalNaive(), None)
