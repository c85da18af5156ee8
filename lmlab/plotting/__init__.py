"""
Diagnostic figures for simple linear regression.

All plotting functions accept precomputed ``FitResult`` and ``Diagnostics``
records and do not perform regression calculations.

Modules:
    diagnostic_plots:
        Scatter with fitted line, residuals vs fitted, normal Q-Q, and the
        four-panel residual diagnostic (adding scale-location and
        residuals vs leverage).

    style:
        Grayscale publication style, axis helpers, and multi-format saving
        (PNG at 300 DPI plus PDF and SVG).
"""

from .diagnostic_plots import (
    plot_diagnostics,
    plot_fit,
    plot_qq,
    plot_residuals_vs_fitted,
    qq_reference_line,
)
from .style import set_global_style

__all__ = [
    "plot_fit",
    "plot_residuals_vs_fitted",
    "plot_qq",
    "plot_diagnostics",
    "qq_reference_line",
    "set_global_style",
]
