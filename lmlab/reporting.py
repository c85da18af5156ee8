"""Format a fitted regression and its diagnostics as a model summary.

The layout follows the ``summary(lm(...))`` printout students compare
against in the handouts: call, residual five-number summary, coefficient
table with significance codes, and the goodness-of-fit footer.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Sequence

import numpy as np

from .errors import InvalidInputError
from .schema import INTERCEPT_LABEL, ResultColumns
from .stats.diagnostics import Diagnostics
from .stats.regression import FitResult

COLUMNS = ResultColumns()

PVALUE_FLOOR = float(np.finfo(float).eps)
SIGNIF_LEVELS = ((0.001, "***"), (0.01, "**"), (0.05, "*"), (0.1, "."))
SIGNIF_LEGEND = "Signif. codes:  0 '***' 0.001 '**' 0.01 '*' 0.05 '.' 0.1 ' ' 1"
RESIDUAL_LABELS = ("Min", "1Q", "Median", "3Q", "Max")
STATISTIC_FIELDS = (
    "se_intercept",
    "se_slope",
    "t_intercept",
    "t_slope",
    "p_intercept",
    "p_slope",
    "adj_r_squared",
    "residual_standard_error",
    "f_statistic",
    "f_p_value",
)


@dataclass(frozen=True)
class ReportConfig:
    """Presentation settings for ``format_summary``.

    Attributes:
        digits: Significant digits for estimates and fit statistics.
        signif_stars: Append significance codes to the coefficient table.
    """

    digits: int = 4
    signif_stars: bool = True

    def __post_init__(self):
        if isinstance(self.digits, bool) or not isinstance(self.digits, (int, np.integer)):
            raise InvalidInputError(
                f"ReportConfig digits must be an integer, got {self.digits!r}."
            )
        if self.digits < 1:
            raise InvalidInputError(
                f"ReportConfig digits must be at least 1, got {self.digits}."
            )


DEFAULT_CONFIG = ReportConfig()


def format_number(value: float, digits: int = 4) -> str:
    """Format a float to ``digits`` significant digits, spelling out Inf/NaN."""
    v = float(value)
    if math.isnan(v):
        return "NaN"
    if math.isinf(v):
        return "Inf" if v > 0 else "-Inf"
    return f"{v:.{int(digits)}g}"


def format_pvalue(p_value: float, digits: int = 3) -> str:
    """Format a p-value, collapsing values below machine epsilon to ``<2e-16``."""
    p = float(p_value)
    if math.isnan(p):
        return "NaN"
    if p < PVALUE_FLOOR:
        return "<2e-16"
    return f"{p:.{int(digits)}g}"


def significance_stars(p_value: float) -> str:
    p = float(p_value)
    if math.isnan(p):
        return ""
    for threshold, stars in SIGNIF_LEVELS:
        if p < threshold:
            return stars
    return " "


def _numeric_field(fit: FitResult, name: str) -> float:
    # NaN and Inf are legitimate here (df = 0, perfect fits).
    value = getattr(fit, name, None)
    if isinstance(value, (bool, str, bytes)):
        raise InvalidInputError(f"FitResult field '{name}' is not numeric: {value!r}.")
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(
            f"FitResult field '{name}' is missing or not numeric."
        ) from exc


def _finite_field(fit: FitResult, name: str) -> float:
    value = _numeric_field(fit, name)
    if not math.isfinite(value):
        raise InvalidInputError(f"FitResult field '{name}' is not finite.")
    return value


def validate_fit(fit: FitResult, diagnostics: Diagnostics) -> None:
    """Check that a fit and its diagnostics are complete and consistent.

    Raises:
        InvalidInputError: If either record has the wrong type, an estimate or
            sum of squares is missing or non-finite, a test statistic is not
            numeric, ``df`` is not an integer or disagrees with
            ``n``, R^2 falls outside ``[0, 1]``, or the diagnostics describe a
            different number of samples.
    """
    if not isinstance(fit, FitResult):
        raise InvalidInputError(f"Expected a FitResult, got {type(fit).__name__}.")
    if not isinstance(diagnostics, Diagnostics):
        raise InvalidInputError(
            f"Expected Diagnostics, got {type(diagnostics).__name__}."
        )

    for name in ("intercept", "slope", "r_squared", "x_mean", "ssxx", "rss", "tss"):
        _finite_field(fit, name)
    for name in STATISTIC_FIELDS:
        _numeric_field(fit, name)

    if isinstance(fit.n, bool) or not isinstance(fit.n, (int, np.integer)) or fit.n < 2:
        raise InvalidInputError(f"FitResult n must be an integer >= 2, got {fit.n!r}.")
    if isinstance(fit.df, bool) or not isinstance(fit.df, (int, np.integer)):
        raise InvalidInputError(f"FitResult df must be an integer, got {fit.df!r}.")
    if fit.df != fit.n - 2:
        raise InvalidInputError(
            f"FitResult df={fit.df!r} is inconsistent with n={fit.n} (expected n - 2)."
        )
    if not 0.0 <= fit.r_squared <= 1.0:
        raise InvalidInputError(f"R^2 must lie in [0, 1], got {fit.r_squared!r}.")
    if fit.ssxx <= 0 or fit.tss <= 0:
        raise InvalidInputError("FitResult sums of squares must be positive.")
    if diagnostics.n != fit.n:
        raise InvalidInputError(
            f"Diagnostics cover {diagnostics.n} samples but the fit used {fit.n}."
        )


def _align_rows(rows: Sequence[Sequence[str]]) -> List[str]:
    """Right-justify each column to its widest cell (first column left)."""
    widths = [max(len(row[i]) for row in rows) for i in range(len(rows[0]))]
    lines = []
    for row in rows:
        cells = []
        for i, cell in enumerate(row):
            if i == 0:
                cells.append(cell.ljust(widths[i]))
            else:
                cells.append(cell.rjust(widths[i]))
        lines.append(" ".join(cells).rstrip())
    return lines


def residual_summary(diagnostics: Diagnostics) -> np.ndarray:
    """Return min, first quartile, median, third quartile, and max residual."""
    return np.quantile(
        np.asarray(diagnostics.residuals, dtype=float), [0.0, 0.25, 0.5, 0.75, 1.0]
    )


def format_summary(
    fit: FitResult,
    diagnostics: Diagnostics,
    config: ReportConfig = DEFAULT_CONFIG,
) -> str:
    """Render a fixed-layout text summary of a simple linear regression.

    Args:
        fit (FitResult): Output of ``lmlab.stats.fit``.
        diagnostics (Diagnostics): Output of ``lmlab.stats.diagnose`` for the
            same samples.
        config (ReportConfig, optional): Digits and significance-code
            settings.

    Returns:
        str: Newline-terminated summary. Identical inputs always produce
        identical text.

    Raises:
        InvalidInputError: If ``fit`` or ``diagnostics`` is malformed or the
            two records disagree (see ``validate_fit``).
    """
    validate_fit(fit, diagnostics)
    digits = int(config.digits)

    lines = ["Call:", f"lm(formula = {fit.formula})", "", "Residuals:"]
    quartiles = residual_summary(diagnostics)
    lines.extend(
        _align_rows(
            [
                [""] + list(RESIDUAL_LABELS),
                [""] + [format_number(v, digits) for v in quartiles],
            ]
        )
    )

    header = [
        "",
        COLUMNS.estimate,
        COLUMNS.std_error,
        COLUMNS.t_value,
        COLUMNS.p_value,
    ]
    coef_rows = [header]
    for label, est, se, t_val, p_val in (
        (INTERCEPT_LABEL, fit.intercept, fit.se_intercept, fit.t_intercept, fit.p_intercept),
        (fit.x_name, fit.slope, fit.se_slope, fit.t_slope, fit.p_slope),
    ):
        coef_rows.append(
            [
                label,
                format_number(est, digits),
                format_number(se, digits),
                format_number(t_val, max(digits - 1, 1)),
                format_pvalue(p_val, max(digits - 1, 1)),
            ]
        )
    if config.signif_stars:
        coef_rows[0].append("")
        coef_rows[1].append(significance_stars(fit.p_intercept))
        coef_rows[2].append(significance_stars(fit.p_slope))

    lines.extend(["", "Coefficients:"])
    lines.extend(_align_rows(coef_rows))
    if config.signif_stars:
        lines.extend(["---", SIGNIF_LEGEND])

    lines.extend(
        [
            "",
            "Residual standard error: "
            f"{format_number(fit.residual_standard_error, digits)} "
            f"on {fit.df} degrees of freedom",
            f"Multiple R-squared:  {format_number(fit.r_squared, digits)},\t"
            f"Adjusted R-squared:  {format_number(fit.adj_r_squared, digits)}",
            f"F-statistic: {format_number(fit.f_statistic, digits)} "
            f"on 1 and {fit.df} DF,  p-value: "
            f"{format_pvalue(fit.f_p_value, max(digits - 1, 1))}",
        ]
    )
    return "\n".join(lines) + "\n"
