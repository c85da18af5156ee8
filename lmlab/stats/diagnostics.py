"""Compute residual diagnostics for a fitted simple linear regression.

Everything here is a pure function of the samples and the ``FitResult``; the
returned ``Diagnostics`` record is rebuilt on every call and never cached.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Tuple

import numpy as np
import pandas as pd
from scipy.stats import norm, shapiro

from ..errors import InsufficientDataError, InvalidInputError
from ..schema import ResultColumns, SampleLike, finite_pairs, samples_to_arrays
from .regression import FitResult

logger = logging.getLogger(__name__)

COLUMNS = ResultColumns()


def _frozen(values: np.ndarray) -> np.ndarray:
    arr = np.array(values, dtype=float)
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True, eq=False)
class Diagnostics:
    """Per-sample fitted values, residuals, and influence measures.

    Attributes:
        x: Predictor values, in sample order.
        y: Observed responses, in sample order.
        fitted: ``intercept + slope * x``.
        residuals: ``y - fitted``.
        theoretical_quantiles: Standard normal quantiles at plotting
            positions ``(i - 0.5) / n``.
        sorted_residuals: Residuals in ascending order, paired element-wise
            with ``theoretical_quantiles``.
        leverage: Hat values ``1/n + (x - mean(x))^2 / Sxx``.
        standardized_residuals: ``residual / (s * sqrt(1 - leverage))``.
        cooks_distance: ``std_residual^2 * h / (2 * (1 - h))``.
    """

    x: np.ndarray
    y: np.ndarray
    fitted: np.ndarray
    residuals: np.ndarray
    theoretical_quantiles: np.ndarray
    sorted_residuals: np.ndarray
    leverage: np.ndarray
    standardized_residuals: np.ndarray
    cooks_distance: np.ndarray

    @property
    def n(self) -> int:
        return int(len(self.residuals))

    def qq_pairs(self) -> List[Tuple[float, float]]:
        """Return ``(theoretical quantile, sorted residual)`` pairs."""
        return [
            (float(q), float(r))
            for q, r in zip(self.theoretical_quantiles, self.sorted_residuals)
        ]

    def to_frame(self) -> pd.DataFrame:
        """Return one row per sample using the standard column labels."""
        return pd.DataFrame(
            {
                COLUMNS.x: self.x,
                COLUMNS.y: self.y,
                COLUMNS.fitted: self.fitted,
                COLUMNS.residual: self.residuals,
                COLUMNS.leverage: self.leverage,
                COLUMNS.std_residual: self.standardized_residuals,
                COLUMNS.cooks: self.cooks_distance,
            }
        )


@dataclass(frozen=True)
class NormalityTest:
    """Shapiro-Wilk statistic and p-value for a residual sample."""

    statistic: float
    p_value: float
    n: int


def normal_plotting_positions(n: int) -> np.ndarray:
    """Return standard normal quantiles at probabilities ``(i - 0.5) / n``."""
    probs = (np.arange(1, int(n) + 1, dtype=float) - 0.5) / float(n)
    return norm.ppf(probs)


def _check_same_dataset(
    x: np.ndarray, fitted: np.ndarray, residuals: np.ndarray, fit: FitResult
) -> None:
    # OLS residuals are orthogonal to the intercept and to x - x_mean; a
    # different dataset of the same size breaks at least one of these.
    n = len(x)
    centered = x - fit.x_mean
    x_scale = max(1.0, float(np.max(np.abs(x))))
    y_scale = max(1.0, float(np.max(np.abs(fitted))), float(np.max(np.abs(residuals))))
    same_x = np.isclose(float(np.mean(x)), fit.x_mean, rtol=1e-9, atol=1e-12 * x_scale)
    same_x = same_x and np.isclose(
        float(np.sum(centered**2)), fit.ssxx, rtol=1e-9, atol=1e-12 * x_scale**2
    )
    tol = 1e-8 * n * y_scale
    orthogonal = abs(float(np.sum(residuals))) <= tol
    orthogonal = orthogonal and abs(float(np.sum(residuals * centered))) <= tol * max(
        1.0, float(np.max(np.abs(centered)))
    )
    if not (same_x and orthogonal):
        raise InvalidInputError(
            "Samples do not match the fitted dataset: the fit's predictor "
            "statistics or residual normal equations disagree with them."
        )


def diagnose(samples: Iterable[SampleLike], fit: FitResult) -> Diagnostics:
    """Derive residual diagnostics from the original samples and their fit.

    Args:
        samples: The ``Sample`` records or ``(x, y)`` pairs that were fitted.
        fit (FitResult): Output of ``fit`` for the same samples.

    Returns:
        Diagnostics: Fitted values, residuals, the normal-quantile pairing,
        leverage, standardized residuals, and Cook's distance.

    Raises:
        InvalidInputError: If ``fit`` is not a ``FitResult`` or the number of
            finite samples differs from ``fit.n``, or the samples are not the
            ones ``fit`` was computed from.

    Note:
        The quantile pairing only provides the point set for a Q-Q
        comparison; judging normality is left to the caller. Standardized
        residuals and Cook's distance are NaN when the fit has no residual
        degrees of freedom or a sample has leverage 1.
    """
    if not isinstance(fit, FitResult):
        raise InvalidInputError(
            f"Expected a FitResult, got {type(fit).__name__}."
        )

    x_all, y_all = samples_to_arrays(samples)
    x, y, _ = finite_pairs(x_all, y_all)
    n = int(len(x))
    if n != fit.n:
        raise InvalidInputError(
            f"Fit was computed from {fit.n} samples but {n} finite samples "
            "were supplied for diagnostics."
        )

    fitted = fit.intercept + fit.slope * x
    residuals = y - fitted
    _check_same_dataset(x, fitted, residuals, fit)
    sorted_residuals = np.sort(residuals, kind="mergesort")
    quantiles = normal_plotting_positions(n)

    leverage = 1.0 / n + (x - fit.x_mean) ** 2 / fit.ssxx
    with np.errstate(divide="ignore", invalid="ignore"):
        one_minus_h = 1.0 - leverage
        std_resid = residuals / (fit.residual_standard_error * np.sqrt(one_minus_h))
        cooks = std_resid**2 * leverage / (2.0 * one_minus_h)
    interior = one_minus_h > 0
    std_resid = np.where(interior, std_resid, np.nan)
    cooks = np.where(interior, cooks, np.nan)

    return Diagnostics(
        x=_frozen(x),
        y=_frozen(y),
        fitted=_frozen(fitted),
        residuals=_frozen(residuals),
        theoretical_quantiles=_frozen(quantiles),
        sorted_residuals=_frozen(sorted_residuals),
        leverage=_frozen(leverage),
        standardized_residuals=_frozen(std_resid),
        cooks_distance=_frozen(cooks),
    )


def normality_test(diagnostics: Diagnostics) -> NormalityTest:
    """Run the Shapiro-Wilk test on the model residuals.

    Raises:
        InsufficientDataError: If fewer than three residuals are available.

    Note:
        Only the statistic and p-value are reported; no accept/reject
        decision is made here.
    """
    n = diagnostics.n
    if n < 3:
        raise InsufficientDataError(
            f"Shapiro-Wilk needs at least 3 residuals, got {n}."
        )
    statistic, p_value = shapiro(np.asarray(diagnostics.residuals, dtype=float))
    logger.debug("Shapiro-Wilk W=%.4f p=%.4g (n=%d)", statistic, p_value, n)
    return NormalityTest(statistic=float(statistic), p_value=float(p_value), n=n)
