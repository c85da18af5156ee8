"""
Load paired regression samples from delimited files and data frames.
"""

# Lab data arrive as CSV or tab-delimited exports with one column per
# variable. Both columns are coerced to numeric; rows where either is missing
# or unparseable are dropped before the samples reach the fitter.

import logging

import pandas as pd

from .schema import Sample

logger = logging.getLogger(__name__)


def load_table(filepath):
    """
    Load a delimited table, sniffing the separator.

    Args:
        filepath (str): Path to a comma-, tab-, or semicolon-delimited file.

    Returns:
        pd.DataFrame: Loaded DataFrame.
    """
    return pd.read_csv(filepath, sep=None, engine="python")


def samples_from_frame(df, x, y):
    """Extract paired samples from two columns of a DataFrame.

    Values are coerced with ``pd.to_numeric(errors="coerce")`` so stray text
    such as ``"NA"`` or ``"--"`` becomes missing. Any row where either value
    is missing is dropped and the number of dropped rows is logged.

    Args:
        df: Source :class:`pandas.DataFrame`.
        x: Column holding the predictor.
        y: Column holding the response.

    Returns:
        list[Sample]: One sample per complete row, in table order.

    Raises:
        KeyError: If ``x`` or ``y`` is not a column of ``df``.
    """
    for col in (x, y):
        if col not in df.columns:
            raise KeyError(
                f"Missing column '{col}'; available columns: {list(df.columns)}"
            )

    pairs = pd.DataFrame(
        {
            "x": pd.to_numeric(df[x], errors="coerce"),
            "y": pd.to_numeric(df[y], errors="coerce"),
        }
    )
    complete = pairs.dropna()
    dropped = len(pairs) - len(complete)
    if dropped:
        logger.warning(
            "Dropped %d incomplete row(s) from columns '%s' and '%s'", dropped, x, y
        )

    return [Sample(float(a), float(b)) for a, b in complete.itertuples(index=False)]


def load_samples(filepath, x, y):
    """Load a delimited file and return the paired samples for ``x`` and ``y``."""
    df = load_table(filepath)
    logger.info("Loaded %d rows from %s", len(df), filepath)
    return samples_from_frame(df, x, y)
