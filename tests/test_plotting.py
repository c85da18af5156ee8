import os

import numpy as np
from scipy.stats import norm

from lmlab.plotting import (
    plot_diagnostics,
    plot_fit,
    plot_qq,
    plot_residuals_vs_fitted,
    qq_reference_line,
)
from lmlab.plotting.style import (
    FONT_SIZES,
    QQ_MIN_N,
    sanitize_filename,
    should_plot_qq,
    small_sample_note,
)
from lmlab.stats import diagnose, fit


def make_dummy_fit(n=12):
    rng = np.random.default_rng(3)
    x = np.linspace(0.0, 5.0, n)
    y = 0.5 + 1.5 * x + rng.normal(0.0, 0.3, size=n)
    samples = list(zip(x, y))
    res = fit(samples, x_name="time", y_name="distance")
    return samples, res, diagnose(samples, res)


def test_plot_fit(tmp_path):
    samples, res, _ = make_dummy_fit()
    out = plot_fit(samples, res, output_dir=str(tmp_path))
    assert out.endswith("regression_fit.png")
    assert os.path.exists(out)
    assert os.path.exists(out.replace(".png", ".pdf"))
    assert os.path.exists(out.replace(".png", ".svg"))


def test_plot_residuals_vs_fitted(tmp_path):
    _, _, diag = make_dummy_fit()
    out = plot_residuals_vs_fitted(diag, output_dir=str(tmp_path))
    assert os.path.exists(out)


def test_plot_qq_small_sample(tmp_path):
    _, _, diag = make_dummy_fit(n=6)
    out = plot_qq(diag, output_dir=str(tmp_path), stem="qq small")
    assert out.endswith("qq_small.png")
    assert os.path.exists(out)


def test_plot_diagnostics(tmp_path):
    _, res, diag = make_dummy_fit(n=25)
    out = plot_diagnostics(res, diag, output_dir=str(tmp_path))
    assert out.endswith("regression_diagnostics.png")
    assert os.path.exists(out)


def test_qq_reference_line_passes_through_quartiles():
    _, _, diag = make_dummy_fit(n=25)
    intercept, slope = qq_reference_line(diag)
    r1, r3 = np.quantile(diag.residuals, [0.25, 0.75])

    assert np.isclose(intercept + slope * norm.ppf(0.25), r1)
    assert np.isclose(intercept + slope * norm.ppf(0.75), r3)


def test_small_sample_note_and_gate():
    assert not should_plot_qq(QQ_MIN_N - 1)
    assert should_plot_qq(QQ_MIN_N)
    assert small_sample_note("Q-Q", 6) == f"Q-Q: n=6 < {QQ_MIN_N}; interpret shape with caution."


def test_sanitize_filename():
    assert sanitize_filename("  residuals vs/fitted ") == "residuals_vs_fitted"
    assert sanitize_filename("...") == "figure"


def test_font_sizes_cover_drawn_text_only():
    assert set(FONT_SIZES) == {"title", "axis_label", "tick", "annotation"}
