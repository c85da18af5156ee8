"""Centralized plotting style, labels, and save helpers."""

from __future__ import annotations

import re
import warnings
from dataclasses import dataclass
from pathlib import Path

import matplotlib.pyplot as plt
from matplotlib.axes import Axes
from matplotlib.figure import Figure
from matplotlib.ticker import MaxNLocator

OUTPUT_FORMATS: tuple[str, ...] = ("png", "pdf", "svg")
FIGURE_DPI = 300
_STYLE_STATE = {"initialized": False}

QQ_MIN_N = 20


@dataclass(frozen=True)
class StyleConfig:
    BASE_FONTSIZE: float = 12.0
    TITLE_FONTSIZE: float = 14.0
    LABEL_FONTSIZE: float = 12.0
    TICK_FONTSIZE: float = 11.0
    ANNOTATION_FONTSIZE: float = 10.0
    LINEWIDTH: float = 2.0
    LINEWIDTH_THIN: float = 1.2
    MARKERSIZE: float = 6.0
    GRID_ALPHA: float = 0.20
    FIGSIZE_SINGLE: tuple[float, float] = (7.0, 4.2)
    FIGSIZE_2x2: tuple[float, float] = (9.5, 7.2)


STYLE = StyleConfig()

FIG_SIZES: dict[str, tuple[float, float]] = {
    "single": STYLE.FIGSIZE_SINGLE,
    "grid_2x2": STYLE.FIGSIZE_2x2,
}

FONT_SIZES = {
    "title": STYLE.TITLE_FONTSIZE,
    "axis_label": STYLE.LABEL_FONTSIZE,
    "tick": STYLE.TICK_FONTSIZE,
    "annotation": STYLE.ANNOTATION_FONTSIZE,
}

POINT_STYLE = {
    "s": 26,
    "facecolor": "white",
    "edgecolor": "black",
    "linewidth": 0.8,
}
REFERENCE_LINE = {"color": "0.15", "linestyle": "--", "linewidth": 1.2}

LABEL_FITTED = "Fitted values"
LABEL_RESIDUAL = "Residuals"
LABEL_STD_RESIDUAL = "Standardized residuals"
LABEL_SQRT_STD_RESIDUAL = r"$\sqrt{|\mathrm{Standardized\ residuals}|}$"
LABEL_THEORETICAL = "Theoretical quantiles"
LABEL_LEVERAGE = "Leverage"


def apply_global_style() -> None:
    """Apply the grayscale publication style to matplotlib ``rcParams``."""
    plt.rcParams.update(
        {
            "font.family": "STIXGeneral",
            "font.size": STYLE.BASE_FONTSIZE,
            "axes.titlesize": STYLE.TITLE_FONTSIZE,
            "figure.titlesize": STYLE.TITLE_FONTSIZE,
            "axes.labelsize": STYLE.LABEL_FONTSIZE,
            "xtick.labelsize": STYLE.TICK_FONTSIZE,
            "ytick.labelsize": STYLE.TICK_FONTSIZE,
            "mathtext.fontset": "stix",
            "mathtext.default": "regular",
            "axes.titlepad": 8,
            "axes.labelpad": 6,
            "axes.linewidth": STYLE.LINEWIDTH_THIN,
            "axes.spines.top": False,
            "axes.spines.right": False,
            "grid.alpha": STYLE.GRID_ALPHA,
            "grid.linestyle": ":",
            "grid.linewidth": 0.7,
            "axes.grid": False,
            "lines.linewidth": STYLE.LINEWIDTH,
            "lines.markersize": STYLE.MARKERSIZE,
            "figure.dpi": 120,
            "savefig.dpi": FIGURE_DPI,
            "savefig.bbox": "tight",
            "savefig.pad_inches": 0.12,
        }
    )


def set_global_style() -> None:
    """Apply global plotting style once per process."""
    if not _STYLE_STATE["initialized"]:
        apply_global_style()
        _STYLE_STATE["initialized"] = True


def fig_size(kind: str = "single") -> tuple[float, float]:
    """Return standardized figure size tuple for a named figure kind."""
    return FIG_SIZES.get(kind, FIG_SIZES["single"])


def new_figure(*args, **kwargs):
    """Create styled subplots."""
    set_global_style()
    return plt.subplots(*args, **kwargs)


def clean_axis(ax: Axes, nbins: int = 6) -> None:
    """Apply consistent ticks, a dotted grid, and open spines to one axis."""
    ax.tick_params(axis="both", which="major", labelsize=FONT_SIZES["tick"], width=1.0)
    ax.xaxis.set_major_locator(MaxNLocator(nbins=nbins, min_n_ticks=4))
    ax.yaxis.set_major_locator(MaxNLocator(nbins=nbins, min_n_ticks=4))
    ax.spines["top"].set_visible(False)
    ax.spines["right"].set_visible(False)
    ax.grid(True, axis="both", alpha=STYLE.GRID_ALPHA, linestyle=":", linewidth=0.7)


def set_axis_labels(ax: Axes, x: str | None = None, y: str | None = None) -> None:
    """Apply standardized axis labels with project typography."""
    if x is not None:
        ax.set_xlabel(x, fontsize=FONT_SIZES["axis_label"], labelpad=6)
    if y is not None:
        ax.set_ylabel(y, fontsize=FONT_SIZES["axis_label"], labelpad=6)


def should_plot_qq(n: int) -> bool:
    """Return whether a Q-Q comparison is a reliable shape check for size n."""
    return int(n) >= QQ_MIN_N


def small_sample_note(kind: str, n: int) -> str:
    """Return standardized caution text for a shape diagnostic on few points."""
    return f"{kind}: n={int(n)} < {QQ_MIN_N}; interpret shape with caution."


def save_figure(fig: Figure, savepath_base: str | Path) -> Path:
    """Write PNG, PDF and SVG copies of a figure next to one another.

    Only the PNG is rasterized at ``FIGURE_DPI``; the vector formats ignore
    ``dpi``. Missing parent directories are created.
    """
    base = Path(savepath_base)
    base.parent.mkdir(parents=True, exist_ok=True)
    for ext in OUTPUT_FORMATS:
        fig.savefig(
            str(base.with_suffix(f".{ext}")),
            dpi=FIGURE_DPI if ext == "png" else None,
            bbox_inches="tight",
            pad_inches=0.12,
        )
    return base.with_suffix(".png")


def finalize_figure(fig: Figure, savepath: str | Path) -> str:
    """Tighten the layout and save the figure bundle; return the PNG path."""
    with warnings.catch_warnings():
        warnings.simplefilter("ignore")
        fig.tight_layout(pad=1.2)
    return str(save_figure(fig, Path(savepath).with_suffix("")))


def sanitize_filename(name: str) -> str:
    """Normalize a filename component into a stable, filesystem-safe token."""
    text = re.sub(r"\s+", "_", str(name).strip())
    text = re.sub(r"[^A-Za-z0-9._-]+", "_", text)
    text = re.sub(r"_+", "_", text).strip("._")
    return text or "figure"
