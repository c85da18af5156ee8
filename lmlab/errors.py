"""Exception taxonomy for regression fitting, diagnostics, and reporting.

All errors describe invalid input rather than transient failure, so callers
should not retry. Each subclasses ``ValueError`` to stay catchable where bad
numerical input is already handled that way.
"""

from __future__ import annotations


class RegressionError(ValueError):
    """Base class for errors raised by the regression pipeline."""


class InsufficientDataError(RegressionError):
    """Raised when fewer than two distinct predictor values are available."""


class DegenerateResponseError(RegressionError):
    """Raised when every response value is identical (zero total variance)."""


class InvalidInputError(RegressionError):
    """Raised when a fit or diagnostics record is malformed or incomplete."""
