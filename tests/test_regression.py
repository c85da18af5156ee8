import dataclasses
import logging
import math

import numpy as np
import pandas as pd
import pytest
from scipy.stats import linregress
from scipy.stats import t as student_t

from lmlab.errors import DegenerateResponseError, InsufficientDataError
from lmlab.schema import Sample
from lmlab.stats.regression import fit, fit_arrays, fit_frame


def noisy_samples(seed=0, n=25):
    rng = np.random.default_rng(seed)
    x = np.linspace(0.0, 10.0, n)
    y = 3.0 - 0.7 * x + rng.normal(0.0, 1.5, size=n)
    return [Sample(float(a), float(b)) for a, b in zip(x, y)]


def test_exact_line_recovers_coefficients():
    samples = [Sample(x, 2.0 * x + 1.0) for x in [0.0, 1.0, 2.0, 3.0, 4.0]]
    res = fit(samples)

    assert res.intercept == pytest.approx(1.0)
    assert res.slope == pytest.approx(2.0)
    assert res.r_squared == pytest.approx(1.0)
    assert res.n == 5
    assert res.df == 3
    assert res.se_slope == pytest.approx(0.0, abs=1e-12)


def test_constant_response_raises():
    samples = [(0, 5), (1, 5), (2, 5), (3, 5)]
    with pytest.raises(DegenerateResponseError, match="constant"):
        fit(samples)


def test_constant_predictor_raises():
    samples = [(3, 1.0), (3, 2.0), (3, 4.0)]
    with pytest.raises(InsufficientDataError, match="distinct"):
        fit(samples)


def test_predictor_check_runs_before_response_check():
    with pytest.raises(InsufficientDataError):
        fit([(3, 5), (3, 5), (3, 5)])


def test_single_sample_raises():
    with pytest.raises(InsufficientDataError):
        fit([(1.0, 2.0)])


def test_matches_scipy_linregress():
    samples = noisy_samples(seed=1)
    res = fit(samples)
    x = np.array([s.x for s in samples])
    y = np.array([s.y for s in samples])
    ref = linregress(x, y)

    assert np.isclose(res.slope, ref.slope)
    assert np.isclose(res.intercept, ref.intercept)
    assert np.isclose(res.r_squared, ref.rvalue**2)
    assert np.isclose(res.se_slope, ref.stderr)
    assert np.isclose(res.se_intercept, ref.intercept_stderr)
    assert np.isclose(res.p_slope, ref.pvalue)


def test_f_statistic_is_squared_slope_t():
    res = fit(noisy_samples(seed=2))
    assert np.isclose(res.f_statistic, res.t_slope**2)
    assert np.isclose(res.f_p_value, res.p_slope)


def test_adjusted_r_squared_and_residual_standard_error():
    res = fit(noisy_samples(seed=3))
    n = res.n
    assert np.isclose(res.adj_r_squared, 1 - (1 - res.r_squared) * (n - 1) / (n - 2))
    assert np.isclose(res.residual_standard_error, math.sqrt(res.rss / (n - 2)))
    assert np.isclose(res.r_squared, 1 - res.rss / res.tss)


@pytest.mark.parametrize("seed", [0, 1, 2, 3, 4])
def test_residuals_sum_to_zero_and_r2_in_unit_interval(seed):
    samples = noisy_samples(seed=seed, n=12)
    res = fit(samples)
    x = np.array([s.x for s in samples])
    y = np.array([s.y for s in samples])
    resid = y - res.predict(x)

    assert abs(float(np.sum(resid))) < 1e-9
    assert 0.0 <= res.r_squared <= 1.0


def test_accepts_plain_pairs():
    res = fit([(0, 1), (1, 3), (2, 5.5)])
    assert res.n == 3
    assert res.slope == pytest.approx(2.25)


def test_non_finite_pairs_are_dropped_with_warning(caplog):
    caplog.set_level(logging.WARNING)
    res = fit([(0, 1), (1, 3), (2, float("nan")), (3, 7.2), (float("inf"), 1)])

    assert res.n == 3
    assert any("Dropped 2 non-finite" in rec.message for rec in caplog.records)


def test_two_samples_have_no_residual_degrees_of_freedom():
    res = fit([(0, 1), (2, 5)])
    assert res.df == 0
    assert res.slope == pytest.approx(2.0)
    assert res.r_squared == pytest.approx(1.0)
    assert math.isnan(res.se_slope)
    assert math.isnan(res.p_slope)
    assert math.isnan(res.residual_standard_error)
    assert math.isnan(res.f_statistic)


def test_fit_result_is_immutable():
    res = fit(noisy_samples())
    with pytest.raises(dataclasses.FrozenInstanceError):
        res.slope = 0.0


def test_predict_scalar_and_array():
    res = fit([(0, 1), (1, 3), (2, 5), (3, 7.1)])
    assert isinstance(res.predict(10.0), float)
    out = res.predict([0.0, 1.0])
    assert out.shape == (2,)
    assert np.isclose(out[0], res.intercept)


def test_confint_uses_t_quantile():
    res = fit(noisy_samples(seed=5))
    ci = res.confint()
    t_crit = student_t.ppf(0.975, res.df)

    assert list(ci.columns) == ["2.5 %", "97.5 %"]
    assert list(ci.index) == ["(Intercept)", "x"]
    assert np.isclose(ci.loc["x", "97.5 %"], res.slope + t_crit * res.se_slope)
    assert np.isclose(ci.loc["(Intercept)", "2.5 %"], res.intercept - t_crit * res.se_intercept)


def test_confint_rejects_bad_level():
    res = fit(noisy_samples())
    with pytest.raises(ValueError, match="Confidence level"):
        res.confint(1.5)


def test_coefficients_frame_layout():
    res = fit(noisy_samples(), x_name="dose", y_name="response")
    table = res.coefficients_frame()

    assert list(table.index) == ["(Intercept)", "dose"]
    assert list(table.columns) == ["Estimate", "Std. Error", "t value", "Pr(>|t|)"]
    assert np.isclose(table.loc["dose", "Estimate"], res.slope)
    assert res.formula == "response ~ dose"


def test_fit_frame_uses_column_names():
    df = pd.DataFrame({"length": [1.0, 2.0, 3.0, 4.0], "mass": [2.1, 3.9, 6.2, 7.8]})
    res = fit_frame(df, "length", "mass")
    assert res.formula == "mass ~ length"
    assert res.n == 4


def test_fit_frame_missing_column_raises():
    df = pd.DataFrame({"length": [1.0, 2.0, 3.0]})
    with pytest.raises(KeyError, match="mass"):
        fit_frame(df, "length", "mass")


def test_fit_arrays_matches_fit():
    samples = noisy_samples(seed=6)
    x = np.array([s.x for s in samples])
    y = np.array([s.y for s in samples])
    assert fit_arrays(x, y) == fit(samples)
