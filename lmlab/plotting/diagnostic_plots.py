"""Render the scatter, residual, and Q-Q figures requested in the handouts.

Each function receives precomputed ``FitResult`` and ``Diagnostics`` records
and only draws them; no regression quantity is recomputed here except the
Q-Q reference line, which is a plotting aid.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.axes import Axes
from scipy.stats import norm

from ..schema import SampleLike, finite_pairs, samples_to_arrays
from ..stats.diagnostics import Diagnostics
from ..stats.regression import FitResult
from .style import (
    FONT_SIZES,
    LABEL_FITTED,
    LABEL_LEVERAGE,
    LABEL_RESIDUAL,
    LABEL_SQRT_STD_RESIDUAL,
    LABEL_STD_RESIDUAL,
    LABEL_THEORETICAL,
    POINT_STYLE,
    REFERENCE_LINE,
    STYLE,
    clean_axis,
    fig_size,
    finalize_figure,
    new_figure,
    sanitize_filename,
    set_axis_labels,
    should_plot_qq,
    small_sample_note,
)

COOKS_CONTOURS = (0.5, 1.0)


def _save(fig: plt.Figure, output_dir: str, stem: str) -> str:
    saved = finalize_figure(fig, Path(output_dir) / sanitize_filename(stem))
    plt.close(fig)
    return saved


def qq_reference_line(diagnostics: Diagnostics) -> tuple[float, float]:
    """Return ``(intercept, slope)`` of the line through the quartile pairs.

    Note:
        Matches the usual ``qqline`` convention: the line passes through the
        first and third quartiles of the residuals plotted against the
        corresponding standard normal quartiles.
    """
    r1, r3 = np.quantile(np.asarray(diagnostics.residuals, dtype=float), [0.25, 0.75])
    z1, z3 = norm.ppf([0.25, 0.75])
    slope = float((r3 - r1) / (z3 - z1))
    return float(r1 - slope * z1), slope


def _draw_residuals_vs_fitted(ax: Axes, diagnostics: Diagnostics) -> None:
    ax.scatter(diagnostics.fitted, diagnostics.residuals, **POINT_STYLE)
    ax.axhline(0, **REFERENCE_LINE)
    set_axis_labels(ax, LABEL_FITTED, LABEL_RESIDUAL)
    ax.set_title("Residuals vs Fitted")
    clean_axis(ax)


def _draw_qq(ax: Axes, diagnostics: Diagnostics) -> None:
    ax.scatter(diagnostics.theoretical_quantiles, diagnostics.sorted_residuals, **POINT_STYLE)
    intercept, slope = qq_reference_line(diagnostics)
    q = np.asarray(diagnostics.theoretical_quantiles, dtype=float)
    ax.plot(q, intercept + slope * q, **REFERENCE_LINE)
    set_axis_labels(ax, LABEL_THEORETICAL, LABEL_RESIDUAL)
    ax.set_title("Normal Q-Q")
    clean_axis(ax)
    if not should_plot_qq(diagnostics.n):
        ax.text(
            0.02,
            0.98,
            small_sample_note("Q-Q", diagnostics.n),
            transform=ax.transAxes,
            ha="left",
            va="top",
            fontsize=FONT_SIZES["annotation"],
            color="0.25",
        )


def _draw_scale_location(ax: Axes, diagnostics: Diagnostics) -> None:
    root = np.sqrt(np.abs(np.asarray(diagnostics.standardized_residuals, dtype=float)))
    ax.scatter(diagnostics.fitted, root, **POINT_STYLE)
    set_axis_labels(ax, LABEL_FITTED, LABEL_SQRT_STD_RESIDUAL)
    ax.set_title("Scale-Location")
    clean_axis(ax)


def _draw_residuals_vs_leverage(ax: Axes, diagnostics: Diagnostics) -> None:
    h = np.asarray(diagnostics.leverage, dtype=float)
    ax.scatter(h, diagnostics.standardized_residuals, **POINT_STYLE)
    ax.axhline(0, **REFERENCE_LINE)

    upper = float(np.max(h))
    if upper > 0:
        grid = np.linspace(max(float(np.min(h)), 1e-3), min(upper * 1.05, 0.999), 100)
        for level in COOKS_CONTOURS:
            bound = np.sqrt(level * 2.0 * (1.0 - grid) / grid)
            ax.plot(grid, bound, color="0.45", linestyle=":", linewidth=STYLE.LINEWIDTH_THIN)
            ax.plot(grid, -bound, color="0.45", linestyle=":", linewidth=STYLE.LINEWIDTH_THIN)
    set_axis_labels(ax, LABEL_LEVERAGE, LABEL_STD_RESIDUAL)
    ax.set_title("Residuals vs Leverage")
    clean_axis(ax)


def plot_fit(
    samples: Iterable[SampleLike],
    fit: FitResult,
    output_dir: str = "output",
    stem: str = "regression_fit",
) -> str:
    """Plot the samples with the fitted least-squares line.

    Args:
        samples: The fitted ``Sample`` records or ``(x, y)`` pairs.
        fit (FitResult): Fit of ``samples``.
        output_dir (str, optional): Directory for the figure bundle.
        stem (str, optional): File name stem without extension.

    Returns:
        str: PNG path (PDF and SVG share the same basename).
    """
    x, y, _ = finite_pairs(*samples_to_arrays(samples))
    fig, ax = new_figure(figsize=fig_size("single"))
    ax.scatter(x, y, **POINT_STYLE)
    grid = np.linspace(float(np.min(x)), float(np.max(x)), 100)
    ax.plot(grid, fit.predict(grid), color="black", linewidth=STYLE.LINEWIDTH)
    set_axis_labels(ax, fit.x_name, fit.y_name)
    ax.set_title(
        f"{fit.formula}: slope = {fit.slope:.4g}, $R^2$ = {fit.r_squared:.3f}"
    )
    clean_axis(ax)
    return _save(fig, output_dir, stem)


def plot_residuals_vs_fitted(
    diagnostics: Diagnostics,
    output_dir: str = "output",
    stem: str = "residuals_vs_fitted",
) -> str:
    """Plot residuals against fitted values with a zero reference line."""
    fig, ax = new_figure(figsize=fig_size("single"))
    _draw_residuals_vs_fitted(ax, diagnostics)
    return _save(fig, output_dir, stem)


def plot_qq(
    diagnostics: Diagnostics,
    output_dir: str = "output",
    stem: str = "residuals_qq",
) -> str:
    """Plot sorted residuals against theoretical normal quantiles.

    Note:
        Points are drawn for any sample size; below ``QQ_MIN_N`` a caution
        note is added because tail shape is not interpretable on few points.
    """
    fig, ax = new_figure(figsize=fig_size("single"))
    _draw_qq(ax, diagnostics)
    return _save(fig, output_dir, stem)


def plot_diagnostics(
    fit: FitResult,
    diagnostics: Diagnostics,
    output_dir: str = "output",
    stem: str = "regression_diagnostics",
) -> str:
    """Render the four-panel residual diagnostic figure.

    Panels: (a) residuals vs fitted, (b) normal Q-Q, (c) scale-location,
    (d) standardized residuals vs leverage with Cook's distance contours at
    0.5 and 1.

    Returns:
        str: PNG path of the saved figure bundle.
    """
    fig, axes = new_figure(2, 2, figsize=fig_size("grid_2x2"))
    _draw_residuals_vs_fitted(axes[0, 0], diagnostics)
    _draw_qq(axes[0, 1], diagnostics)
    _draw_scale_location(axes[1, 0], diagnostics)
    _draw_residuals_vs_leverage(axes[1, 1], diagnostics)
    fig.suptitle(f"lm({fit.formula})", fontsize=FONT_SIZES["title"])
    return _save(fig, output_dir, stem)
