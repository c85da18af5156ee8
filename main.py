#!/usr/bin/env python3
"""
Main script for running a simple linear regression lab analysis.
"""

# Pipeline overview (README-style):
# 1) Load paired samples from a delimited file, or build the worked example
#    y = 2x + 1 with seeded Gaussian noise when no file is given.
# 2) Fit the response on the predictor by ordinary least squares.
# 3) Derive residual diagnostics and the Shapiro-Wilk residual check.
# 4) Print the model summary and export text, tables, and figures.
#
# Usage: python main.py [data.csv x_column y_column] [--outdir DIR]

import argparse
import logging
import os
import sys
import time

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
    handlers=[
        logging.StreamHandler(sys.stdout),
        logging.FileHandler("lmlab_analysis.log", mode="w"),
    ],
)

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

import numpy as np

from lmlab.data_processing import load_samples
from lmlab.errors import RegressionError
from lmlab.output import save_results
from lmlab.plotting import plot_diagnostics, plot_fit, plot_qq
from lmlab.reporting import format_summary
from lmlab.schema import Sample
from lmlab.stats import diagnose, fit, normality_test

OUTPUT_DIR = "output"
EXAMPLE_SEED = 42


def example_samples(n=30, seed=EXAMPLE_SEED):
    """Return the worked example: y = 2x + 1 plus unit-variance noise."""
    rng = np.random.default_rng(seed)
    x = np.linspace(0.0, 10.0, n)
    y = 2.0 * x + 1.0 + rng.normal(0.0, 1.0, size=n)
    return [Sample(float(a), float(b)) for a, b in zip(x, y)]


def _build_arg_parser():
    """Build command-line parser for the regression pipeline."""
    parser = argparse.ArgumentParser(
        description=(
            "Fit a simple linear regression and write its summary, tables and "
            "diagnostic figures. Without arguments the worked example is used."
        )
    )
    parser.add_argument(
        "data", nargs="?", default=None, help="Delimited file with paired samples."
    )
    parser.add_argument("x", nargs="?", default=None, help="Predictor column name.")
    parser.add_argument("y", nargs="?", default=None, help="Response column name.")
    parser.add_argument(
        "--outdir",
        default=OUTPUT_DIR,
        help=f"Output directory (default: {OUTPUT_DIR}).",
    )
    return parser


def main(argv=None):
    """Main execution function with step timing and technical logging."""

    parser = _build_arg_parser()
    args = parser.parse_args(argv)
    if args.data is not None and args.y is None:
        parser.error("a data file needs both x and y column names")

    start_time = time.time()
    logging.info("Initializing regression analysis pipeline")

    if args.data is not None:
        x_name, y_name = args.x, args.y
        try:
            samples = load_samples(args.data, x_name, y_name)
        except (KeyError, OSError, ValueError) as exc:
            logging.error("Could not load samples from %s: %s", args.data, exc)
            return 1
        logging.info(
            "Loaded %d samples of %s ~ %s from %s", len(samples), y_name, x_name, args.data
        )
    else:
        x_name, y_name = "x", "y"
        samples = example_samples()
        logging.info("No input file given; using worked example (n=%d)", len(samples))

    step_start = time.time()
    try:
        model = fit(samples, x_name=x_name, y_name=y_name)
        diagnostics = diagnose(samples, model)
    except RegressionError as exc:
        logging.error("Regression failed: %s", exc)
        return 1
    logging.info(
        "Fit and diagnostics completed in %.2f seconds", time.time() - step_start
    )

    summary = format_summary(model, diagnostics)
    print(summary)

    if diagnostics.n >= 3:
        shapiro = normality_test(diagnostics)
        logging.info(
            "Shapiro-Wilk on residuals: W=%.4f, p=%.4g", shapiro.statistic, shapiro.p_value
        )

    paths = save_results(model, diagnostics, summary, args.outdir)
    paths["fit_plot"] = plot_fit(samples, model, args.outdir)
    paths["qq_plot"] = plot_qq(diagnostics, args.outdir)
    paths["diagnostic_plot"] = plot_diagnostics(model, diagnostics, args.outdir)

    logging.info("Total execution time: %.2f seconds", time.time() - start_time)
    logging.info("Analysis pipeline completed successfully")
    logging.info("Generated output files:")
    for label, path in paths.items():
        logging.info("  - %s: %s", label, path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
