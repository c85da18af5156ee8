"""Define the paired-sample record and standardized column names for tables."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple, Union

import numpy as np


@dataclass(frozen=True)
class Sample:
    """One paired observation of predictor ``x`` and response ``y``."""

    x: float
    y: float


SampleLike = Union[Sample, Tuple[float, float], Sequence[float]]


@dataclass(frozen=True)
class ResultColumns:
    """Container for standardized column labels.

    These labels are shared by the diagnostics table, the coefficient table,
    and the CSV exports so that downstream plotting and grading scripts can
    rely on one naming scheme.

    Attributes:
        x: Predictor value of each sample.
        y: Observed response of each sample.
        fitted: Model prediction ``intercept + slope * x``.
        residual: Observed minus fitted response.
        leverage: Hat value of each sample; the values sum to the number of
            estimated coefficients (2).
        std_residual: Internally studentized residual
            ``e / (s * sqrt(1 - h))``.
        cooks: Cook's distance, the influence of each sample on the fit.
        estimate, std_error, t_value, p_value: Coefficient table columns, in
            the order printed by the model summary.
    """

    x: str = "x"
    y: str = "y"
    fitted: str = "Fitted"
    residual: str = "Residual"
    leverage: str = "Leverage"
    std_residual: str = "Standardized Residual"
    cooks: str = "Cook's Distance"
    estimate: str = "Estimate"
    std_error: str = "Std. Error"
    t_value: str = "t value"
    p_value: str = "Pr(>|t|)"


INTERCEPT_LABEL = "(Intercept)"


def as_sample(item: SampleLike) -> Sample:
    """Coerce a ``Sample`` or an ``(x, y)`` pair into a ``Sample``."""
    if isinstance(item, Sample):
        return item
    x, y = item
    return Sample(float(x), float(y))


def samples_to_arrays(samples: Iterable[SampleLike]) -> Tuple[np.ndarray, np.ndarray]:
    """Split a sample sequence into float ``x`` and ``y`` arrays.

    Args:
        samples: ``Sample`` records or ``(x, y)`` pairs.

    Returns:
        tuple[numpy.ndarray, numpy.ndarray]: Predictor and response arrays of
        equal length, in input order. Non-finite values are kept; callers
        decide how to mask them.
    """
    pairs: List[Sample] = [as_sample(item) for item in samples]
    x = np.fromiter((p.x for p in pairs), dtype=float, count=len(pairs))
    y = np.fromiter((p.y for p in pairs), dtype=float, count=len(pairs))
    return x, y


def finite_pairs(x: np.ndarray, y: np.ndarray) -> Tuple[np.ndarray, np.ndarray, int]:
    """Drop pairs where either coordinate is non-finite.

    Returns:
        tuple[numpy.ndarray, numpy.ndarray, int]: Masked ``x``, masked ``y``,
        and the number of pairs dropped.
    """
    mask = np.isfinite(x) & np.isfinite(y)
    dropped = int(len(x) - np.count_nonzero(mask))
    return x[mask], y[mask], dropped
