from __future__ import annotations

import pytest

from focos.errors import InsufficientData
from focos.trend import (
    DECREASING,
    INCREASING,
    LOW_CONFIDENCE_WARNING,
    STABLE,
    fit_trend,
    forecast_next_year,
    forecast_range,
    project_counts,
    round_half_up,
)


def test_fit_perfect_line():
    fit = fit_trend({2003: 10, 2004: 20, 2005: 30})
    assert fit.slope == pytest.approx(10.0)
    assert fit.intercept == pytest.approx(10.0)
    assert fit.r_squared == pytest.approx(1.0)
    assert fit.base_year == 2003
    assert fit.last_year == 2005


def test_next_year_forecast_example():
    f = forecast_next_year({2003: 10, 2004: 20, 2005: 30})
    assert f.year == 2006
    assert f.predicted_value == 40
    assert f.trend_label == INCREASING
    assert f.as_dict()["accuracyPercent"] == "100.00%"


def test_key_order_does_not_matter():
    assert fit_trend({2005: 30, 2003: 10, 2004: 20}).slope == pytest.approx(10.0)


def test_decreasing_forecast_is_never_negative():
    f = forecast_next_year({2003: 30, 2004: 10})
    assert f.trend_label == DECREASING
    assert f.predicted_value == 0


def test_constant_counts_are_stable_with_zero_r_squared():
    fit = fit_trend({2003: 7, 2004: 7, 2005: 7})
    assert fit.slope == pytest.approx(0.0)
    assert fit.trend_label == STABLE
    assert fit.r_squared == 0.0


def test_insufficient_data():
    with pytest.raises(InsufficientData):
        fit_trend({2003: 10})
    with pytest.raises(InsufficientData):
        forecast_range({}, 3)


def test_imperfect_fit_r_squared():
    # y = 1, 3, 2 over x = 0, 1, 2 -> slope 0.5, intercept 1.5, r^2 = 0.25
    fit = fit_trend({2000: 1, 2001: 3, 2002: 2})
    assert fit.slope == pytest.approx(0.5)
    assert fit.intercept == pytest.approx(1.5)
    assert fit.r_squared == pytest.approx(0.25)


def test_range_forecast_confidence_decay():
    counts = {2000: 1, 2001: 3, 2002: 2}
    out = forecast_range(counts, 7)
    assert list(out) == list(range(2003, 2010))

    first = out[2003]
    assert first.predicted_value == 3  # 1.5 + 0.5 * 3 = 3.0
    assert first.margin_of_error == pytest.approx(7.5)
    assert first.accuracy_percent == pytest.approx(20.0)
    assert first.warning is None

    assert out[2006].accuracy_percent == pytest.approx(5.0)
    assert out[2007].accuracy_percent == 0.0
    assert out[2007].warning is None
    assert out[2008].warning == LOW_CONFIDENCE_WARNING
    assert out[2009].margin_of_error == pytest.approx(52.5)


def test_range_forecast_rejects_non_positive_k():
    with pytest.raises(ValueError):
        forecast_range({2003: 1, 2004: 2}, 0)


def test_project_counts():
    assert project_counts({2003: 10, 2004: 20, 2005: 30}, 2) == {2006: 40, 2007: 50}


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(3.5) == 4
    assert round_half_up(-0.4) == 0
