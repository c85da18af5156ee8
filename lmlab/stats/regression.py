"""Provide the closed-form simple linear regression used by every lab.

This module supports:
- ordinary least squares fits of one response on one predictor,
- coefficient standard errors, t statistics, and two-sided p-values, and
- the omnibus F test and (adjusted) coefficient of determination.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterable

import numpy as np
import pandas as pd
from scipy.stats import f as f_dist
from scipy.stats import t as student_t

from ..errors import DegenerateResponseError, InsufficientDataError
from ..schema import (
    INTERCEPT_LABEL,
    ResultColumns,
    SampleLike,
    finite_pairs,
    samples_to_arrays,
)

logger = logging.getLogger(__name__)

COLUMNS = ResultColumns()


def _ratio(numerator: float, denominator: float) -> float:
    """Divide with IEEE semantics (``x/0 -> inf``, ``0/0 -> nan``)."""
    with np.errstate(divide="ignore", invalid="ignore"):
        return float(np.divide(np.float64(numerator), np.float64(denominator)))


def _two_sided_p(t_stat: float, dof: int) -> float:
    if math.isnan(t_stat):
        return math.nan
    return float(2.0 * student_t.sf(abs(t_stat), dof))


@dataclass(frozen=True)
class FitResult:
    """Immutable record of one simple linear regression fit.

    Attributes:
        intercept: Estimated intercept (response at ``x = 0``).
        slope: Estimated change in response per unit predictor.
        se_intercept: Standard error of the intercept; NaN when ``df == 0``.
        se_slope: Standard error of the slope; NaN when ``df == 0``.
        t_intercept: ``intercept / se_intercept``.
        t_slope: ``slope / se_slope``.
        p_intercept: Two-sided p-value for ``t_intercept`` on ``df``.
        p_slope: Two-sided p-value for ``t_slope`` on ``df``.
        df: Residual degrees of freedom, ``n - 2``.
        r_squared: ``1 - rss / tss`` in ``[0, 1]``.
        adj_r_squared: R^2 penalized for the fitted slope.
        residual_standard_error: ``sqrt(rss / df)``.
        f_statistic: Omnibus F on 1 and ``df`` degrees of freedom.
        f_p_value: Upper-tail probability of ``f_statistic``.
        n: Number of finite samples used.
        x_mean: Mean predictor value.
        ssxx: Sum of squared predictor deviations.
        rss: Residual sum of squares.
        tss: Total sum of squares of the response.
        x_name: Predictor label for the formula line.
        y_name: Response label for the formula line.
    """

    intercept: float
    slope: float
    se_intercept: float
    se_slope: float
    t_intercept: float
    t_slope: float
    p_intercept: float
    p_slope: float
    df: int
    r_squared: float
    adj_r_squared: float
    residual_standard_error: float
    f_statistic: float
    f_p_value: float
    n: int
    x_mean: float
    ssxx: float
    rss: float
    tss: float
    x_name: str = "x"
    y_name: str = "y"

    @property
    def formula(self) -> str:
        return f"{self.y_name} ~ {self.x_name}"

    def predict(self, x):
        """Return fitted responses for a scalar or array of predictor values."""
        out = self.intercept + self.slope * np.asarray(x, dtype=float)
        return float(out) if out.ndim == 0 else out

    def coefficients_frame(self) -> pd.DataFrame:
        """Return the coefficient table as printed by the model summary."""
        return pd.DataFrame(
            {
                COLUMNS.estimate: [self.intercept, self.slope],
                COLUMNS.std_error: [self.se_intercept, self.se_slope],
                COLUMNS.t_value: [self.t_intercept, self.t_slope],
                COLUMNS.p_value: [self.p_intercept, self.p_slope],
            },
            index=[INTERCEPT_LABEL, self.x_name],
        )

    def confint(self, level: float = 0.95) -> pd.DataFrame:
        """Return t-based confidence bounds for intercept and slope.

        Args:
            level (float, optional): Two-sided confidence level in ``(0, 1)``.
                Defaults to ``0.95``.

        Returns:
            pandas.DataFrame: Lower and upper bounds, one row per coefficient,
            with columns labelled by tail percentage (``"2.5 %"``,
            ``"97.5 %"`` at the default level).

        Raises:
            ValueError: If ``level`` is outside ``(0, 1)``.

        Note:
            Bounds are NaN when the fit has no residual degrees of freedom.
        """
        if not 0.0 < float(level) < 1.0:
            raise ValueError(f"Confidence level must be in (0, 1), got {level!r}")
        alpha = 1.0 - float(level)
        lower_label = f"{100 * alpha / 2:g} %"
        upper_label = f"{100 * (1 - alpha / 2):g} %"

        if self.df > 0:
            t_crit = float(student_t.ppf(1.0 - alpha / 2.0, self.df))
        else:
            t_crit = math.nan
        estimates = np.array([self.intercept, self.slope])
        half_widths = t_crit * np.array([self.se_intercept, self.se_slope])
        return pd.DataFrame(
            {
                lower_label: estimates - half_widths,
                upper_label: estimates + half_widths,
            },
            index=[INTERCEPT_LABEL, self.x_name],
        )


def fit_arrays(
    x: np.ndarray, y: np.ndarray, x_name: str = "x", y_name: str = "y"
) -> FitResult:
    """Fit ``y = intercept + slope * x`` by ordinary least squares.

    Args:
        x (numpy.ndarray): Predictor values.
        y (numpy.ndarray): Response values, paired with ``x`` by position.
        x_name (str, optional): Predictor label. Defaults to ``"x"``.
        y_name (str, optional): Response label. Defaults to ``"y"``.

    Returns:
        FitResult: Estimates, standard errors, test statistics, and the sums
        of squares needed to derive residual diagnostics.

    Raises:
        InsufficientDataError: If fewer than two distinct finite ``x`` values
            are available.
        DegenerateResponseError: If all finite ``y`` values are identical.

    Note:
        Pairs with a non-finite coordinate are dropped before fitting. With
        exactly two samples the line interpolates both points, so every
        quantity that needs residual degrees of freedom is NaN.
    """
    x_arr, y_arr, dropped = finite_pairs(
        np.asarray(x, dtype=float), np.asarray(y, dtype=float)
    )
    if dropped:
        logger.warning(
            "Dropped %d non-finite sample(s) before fitting %s ~ %s",
            dropped,
            y_name,
            x_name,
        )

    n = int(len(x_arr))
    distinct_x = int(np.unique(x_arr).size)
    if distinct_x < 2:
        raise InsufficientDataError(
            f"At least two distinct values of '{x_name}' are required for a "
            f"fit, got {distinct_x} (n={n})."
        )

    xbar = float(np.mean(x_arr))
    ybar = float(np.mean(y_arr))
    dx = x_arr - xbar
    ssxx = float(np.sum(dx**2))
    if ssxx <= 0:
        raise InsufficientDataError(
            f"Predictor '{x_name}' has no variance in floating point."
        )

    slope = float(np.sum(dx * (y_arr - ybar))) / ssxx
    intercept = ybar - slope * xbar

    resid = y_arr - (intercept + slope * x_arr)
    rss = float(np.sum(resid**2))
    tss = float(np.sum((y_arr - ybar) ** 2))
    if tss <= 0:
        raise DegenerateResponseError(
            f"Response '{y_name}' is constant; R^2 is undefined."
        )
    r2 = min(max(1.0 - rss / tss, 0.0), 1.0)

    dof = n - 2
    se_slope = se_intercept = math.nan
    t_slope = t_intercept = math.nan
    p_slope = p_intercept = math.nan
    adj_r2 = rse = f_stat = f_p = math.nan

    if dof > 0:
        mse = rss / dof
        rse = math.sqrt(mse)
        se_slope = math.sqrt(mse / ssxx)
        se_intercept = math.sqrt(mse * (1.0 / n + xbar**2 / ssxx))
        t_slope = _ratio(slope, se_slope)
        t_intercept = _ratio(intercept, se_intercept)
        p_slope = _two_sided_p(t_slope, dof)
        p_intercept = _two_sided_p(t_intercept, dof)
        adj_r2 = 1.0 - (1.0 - r2) * (n - 1) / dof
        f_stat = _ratio(tss - rss, mse)
        f_p = float(f_dist.sf(f_stat, 1, dof)) if not math.isnan(f_stat) else math.nan

    result = FitResult(
        intercept=float(intercept),
        slope=float(slope),
        se_intercept=se_intercept,
        se_slope=se_slope,
        t_intercept=t_intercept,
        t_slope=t_slope,
        p_intercept=p_intercept,
        p_slope=p_slope,
        df=dof,
        r_squared=float(r2),
        adj_r_squared=adj_r2,
        residual_standard_error=rse,
        f_statistic=f_stat,
        f_p_value=f_p,
        n=n,
        x_mean=xbar,
        ssxx=ssxx,
        rss=rss,
        tss=tss,
        x_name=str(x_name),
        y_name=str(y_name),
    )
    logger.debug(
        "Fitted %s: intercept=%.6g slope=%.6g R2=%.4f (n=%d)",
        result.formula,
        result.intercept,
        result.slope,
        result.r_squared,
        n,
    )
    return result


def fit(
    samples: Iterable[SampleLike], x_name: str = "x", y_name: str = "y"
) -> FitResult:
    """Fit a sequence of paired samples.

    ``samples`` may hold ``Sample`` records or plain ``(x, y)`` pairs. See
    ``fit_arrays`` for the estimates computed and the errors raised.
    """
    x, y = samples_to_arrays(samples)
    return fit_arrays(x, y, x_name=x_name, y_name=y_name)


def fit_frame(frame: pd.DataFrame, x: str, y: str) -> FitResult:
    """Fit column ``y`` on column ``x`` of a data frame.

    Raises:
        KeyError: If either column is missing.
    """
    for col in (x, y):
        if col not in frame.columns:
            raise KeyError(f"Missing column '{col}' for regression.")
    x_vals = pd.to_numeric(frame[x], errors="coerce").to_numpy(dtype=float)
    y_vals = pd.to_numeric(frame[y], errors="coerce").to_numpy(dtype=float)
    return fit_arrays(x_vals, y_vals, x_name=str(x), y_name=str(y))
