"""
A Python package for simple linear regression in statistics lab work.

Fits one response on one predictor by ordinary least squares, derives
residual diagnostics, and prints an lm-style model summary.

Modules:
    - stats: Regression fit, residual diagnostics, and normality test.
    - reporting: Fixed-layout model summary text.
    - data_processing: Loads paired samples from CSV files and DataFrames.
    - plotting: Fitted-line and residual diagnostic figures.
    - output: Writes summary text and result tables.
"""

__version__ = "1.0.0"

from .data_processing import load_samples, load_table, samples_from_frame
from .errors import (
    DegenerateResponseError,
    InsufficientDataError,
    InvalidInputError,
    RegressionError,
)
from .output import save_results, save_summary
from .reporting import ReportConfig, format_summary
from .schema import Sample
from .stats import Diagnostics, FitResult, diagnose, fit, fit_frame, normality_test

__all__ = [
    # Data model
    "Sample",
    "FitResult",
    "Diagnostics",
    # Errors
    "RegressionError",
    "InsufficientDataError",
    "DegenerateResponseError",
    "InvalidInputError",
    # Analysis
    "fit",
    "fit_frame",
    "diagnose",
    "normality_test",
    # Reporting
    "ReportConfig",
    "format_summary",
    # Data processing
    "load_table",
    "load_samples",
    "samples_from_frame",
    # Output
    "save_summary",
    "save_results",
]
