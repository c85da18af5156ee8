"""
Statistical core for simple linear regression.

This subpackage fits one response on one predictor and derives the residual
diagnostics used in the lab handouts. All functions are pure; nothing here
reads files, draws figures, or formats text.

Modules:
    regression:
        Closed-form ordinary least squares with coefficient standard errors,
        t tests, R^2, adjusted R^2, and the omnibus F test.

    diagnostics:
        Fitted values, residuals, normal-quantile pairing for Q-Q
        comparison, leverage, standardized residuals, Cook's distance, and
        the Shapiro-Wilk residual normality test.

Design Principle:
    This subpackage has no dependencies on plotting/, reporting, or output
    modules, so it can be tested in isolation.
"""

from .diagnostics import (
    Diagnostics,
    NormalityTest,
    diagnose,
    normal_plotting_positions,
    normality_test,
)
from .regression import FitResult, fit, fit_arrays, fit_frame

__all__ = [
    "FitResult",
    "fit",
    "fit_arrays",
    "fit_frame",
    "Diagnostics",
    "NormalityTest",
    "diagnose",
    "normal_plotting_positions",
    "normality_test",
]
