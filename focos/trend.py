"""
Trend estimation (linear regression)
====================================

We fit a straight line through the yearly counts with ordinary least
squares:

    count = a + b * (year - base_year)

`base_year` is the first year present, so `a` is the fitted count of that
year and `b` the change per year. The fit quality is r^2:

    r^2 = 1 - SS_res / SS_tot        (0 when all counts are equal)

Forecasts round the line to an integer and never go below 0. The range
forecast adds a simple heuristic, NOT a statistical interval:

    margin_of_error(i)  = (1 - r^2) * i * 10
    accuracy_percent(i) = max(0, r^2 * 100 - i * 5)

and flags forecasts more than 5 years ahead as low confidence.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Mapping, Optional
import math

import numpy as np

from .dsa import quick_sort
from .errors import InsufficientData

INCREASING = "INCREASING"
DECREASING = "DECREASING"
STABLE = "STABLE"

LOW_CONFIDENCE_AFTER = 5
LOW_CONFIDENCE_WARNING = "Low confidence: forecast more than 5 years ahead"


def round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


@dataclass(frozen=True)
class TrendFit:
    intercept: float
    slope: float
    r_squared: float
    base_year: int
    last_year: int
    n_years: int

    def predict(self, year: int) -> float:
        return self.intercept + self.slope * (year - self.base_year)

    def predicted_count(self, year: int) -> int:
        return max(0, round_half_up(self.predict(year)))

    @property
    def trend_label(self) -> str:
        if self.slope > 0:
            return INCREASING
        if self.slope < 0:
            return DECREASING
        return STABLE


@dataclass(frozen=True)
class Forecast:
    year: int
    predicted_value: int
    accuracy_percent: float
    trend_label: str

    def as_dict(self) -> dict:
        return {
            "year": self.year,
            "predictedValue": self.predicted_value,
            "accuracyPercent": f"{self.accuracy_percent:.2f}%",
            "trendLabel": self.trend_label,
        }


@dataclass(frozen=True)
class RangeForecast:
    year: int
    predicted_value: int
    accuracy_percent: float
    margin_of_error: float
    warning: Optional[str] = None

    def as_dict(self) -> dict:
        return {
            "predictedValue": self.predicted_value,
            "accuracyPercent": f"{self.accuracy_percent:.2f}%",
            "marginOfError": f"{self.margin_of_error:.2f}%",
            "warning": self.warning,
        }


def fit_trend(counts: Mapping[int, int]) -> TrendFit:
    """Fit the OLS line over a year -> count mapping.

    Raises:
        InsufficientData: fewer than 2 distinct years.
    """
    if len(counts) < 2:
        raise InsufficientData(f"At least 2 years of data are needed, got {len(counts)}")

    years = quick_sort(list(counts))
    base_year = years[0]
    x = np.array([y - base_year for y in years], dtype=float)
    y = np.array([counts[yr] for yr in years], dtype=float)
    n = float(len(years))

    sx, sy = x.sum(), y.sum()
    sxy, sx2 = (x * y).sum(), (x * x).sum()
    slope = (n * sxy - sx * sy) / (n * sx2 - sx ** 2)
    intercept = y.mean() - slope * x.mean()

    predicted = intercept + slope * x
    ss_res = float(((y - predicted) ** 2).sum())
    ss_tot = float(((y - y.mean()) ** 2).sum())
    r_squared = 0.0 if ss_tot == 0 else 1.0 - ss_res / ss_tot

    return TrendFit(
        intercept=float(intercept),
        slope=float(slope),
        r_squared=r_squared,
        base_year=base_year,
        last_year=years[-1],
        n_years=len(years),
    )


def forecast_next_year(counts: Mapping[int, int]) -> Forecast:
    """Forecast for the year after the last year present."""
    fit = fit_trend(counts)
    year = fit.last_year + 1
    return Forecast(
        year=year,
        predicted_value=fit.predicted_count(year),
        accuracy_percent=fit.r_squared * 100.0,
        trend_label=fit.trend_label,
    )


def forecast_range(counts: Mapping[int, int], k: int) -> Dict[int, RangeForecast]:
    """Forecasts for the next `k` years, with decaying confidence."""
    if k < 1:
        raise ValueError("number of years to forecast must be >= 1")
    fit = fit_trend(counts)
    out: Dict[int, RangeForecast] = {}
    for i in range(1, k + 1):
        year = fit.last_year + i
        out[year] = RangeForecast(
            year=year,
            predicted_value=fit.predicted_count(year),
            accuracy_percent=max(0.0, fit.r_squared * 100.0 - i * 5),
            margin_of_error=(1.0 - fit.r_squared) * i * 10,
            warning=LOW_CONFIDENCE_WARNING if i > LOW_CONFIDENCE_AFTER else None,
        )
    return out


def project_counts(counts: Mapping[int, int], k: int) -> Dict[int, int]:
    """Plain projection for the next `k` years (no confidence reporting)."""
    return {year: f.predicted_value for year, f in forecast_range(counts, k).items()}
