"""Write the model summary and result tables to submission-ready files.

This module is the output boundary between in-memory analysis and the text
and CSV artifacts handed in with each lab.
"""

from __future__ import annotations

import logging
import os
from typing import Dict

from .stats.diagnostics import Diagnostics
from .stats.regression import FitResult

logger = logging.getLogger(__name__)


def save_summary(text: str, output_dir: str = "output", stem: str = "model_summary") -> str:
    """Write the formatted model summary to ``<output_dir>/<stem>.txt``.

    Returns:
        str: Path of the written file.
    """
    os.makedirs(output_dir, exist_ok=True)
    path = os.path.join(output_dir, f"{stem}.txt")
    with open(path, "w", encoding="utf-8") as handle:
        handle.write(text if text.endswith("\n") else text + "\n")
    logger.info("Saved model summary to %s", path)
    return path


def save_diagnostics_csv(
    diagnostics: Diagnostics,
    output_dir: str = "output",
    stem: str = "regression_diagnostics",
) -> str:
    """Write the per-sample diagnostics table (fitted, residual, influence).

    Returns:
        str: Path of the written CSV file.
    """
    os.makedirs(output_dir, exist_ok=True)
    path = os.path.join(output_dir, f"{stem}.csv")
    diagnostics.to_frame().to_csv(path, index=False)
    logger.info("Saved regression diagnostics to %s", path)
    return path


def save_coefficients_csv(
    fit: FitResult,
    output_dir: str = "output",
    stem: str = "coefficients",
    level: float = 0.95,
) -> str:
    """Write the coefficient table with confidence bounds at ``level``.

    Returns:
        str: Path of the written CSV file.
    """
    os.makedirs(output_dir, exist_ok=True)
    path = os.path.join(output_dir, f"{stem}.csv")
    table = fit.coefficients_frame().join(fit.confint(level))
    table.index.name = "Term"
    table.to_csv(path)
    logger.info("Saved coefficient table to %s", path)
    return path


def save_results(
    fit: FitResult,
    diagnostics: Diagnostics,
    summary_text: str,
    output_dir: str = "output",
) -> Dict[str, str]:
    """Save the summary text, coefficient table, and diagnostics table.

    Returns:
        dict[str, str]: Paths keyed by ``"summary"``, ``"coefficients"``, and
        ``"diagnostics"``.
    """
    return {
        "summary": save_summary(summary_text, output_dir),
        "coefficients": save_coefficients_csv(fit, output_dir),
        "diagnostics": save_diagnostics_csv(diagnostics, output_dir),
    }
