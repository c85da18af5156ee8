import numpy as np
import pytest
from scipy.stats import norm, shapiro

from lmlab.errors import InsufficientDataError, InvalidInputError
from lmlab.schema import Sample
from lmlab.stats.diagnostics import diagnose, normal_plotting_positions, normality_test
from lmlab.stats.regression import fit


def make_samples(seed=0, n=15):
    rng = np.random.default_rng(seed)
    x = rng.uniform(0.0, 20.0, size=n)
    y = 4.0 + 0.5 * x + rng.normal(0.0, 2.0, size=n)
    return [Sample(float(a), float(b)) for a, b in zip(x, y)]


def test_residuals_are_observed_minus_fitted():
    samples = make_samples()
    res = fit(samples)
    diag = diagnose(samples, res)
    y = np.array([s.y for s in samples])

    assert np.allclose(diag.fitted, res.intercept + res.slope * diag.x)
    assert np.allclose(diag.residuals, y - diag.fitted)
    assert abs(float(np.sum(diag.residuals))) < 1e-9


def test_sorted_residuals_match_quantile_pairing_order():
    samples = make_samples(seed=1)
    diag = diagnose(samples, fit(samples))

    assert np.array_equal(np.sort(diag.residuals), diag.sorted_residuals)
    assert np.array_equal(np.sort(diag.sorted_residuals), diag.sorted_residuals)
    assert np.all(np.diff(diag.theoretical_quantiles) > 0)


def test_plotting_positions_follow_half_offset_convention():
    q = normal_plotting_positions(4)
    assert np.allclose(q, norm.ppf([0.125, 0.375, 0.625, 0.875]))
    assert np.isclose(q[0], -q[-1])


def test_qq_pairs_zip_quantiles_with_sorted_residuals():
    samples = make_samples(seed=2, n=6)
    diag = diagnose(samples, fit(samples))
    pairs = diag.qq_pairs()

    assert len(pairs) == 6
    assert pairs[0] == (float(diag.theoretical_quantiles[0]), float(diag.sorted_residuals[0]))


def test_leverage_matches_hat_matrix():
    samples = make_samples(seed=3)
    diag = diagnose(samples, fit(samples))
    X = np.column_stack([np.ones(diag.n), diag.x])
    hat = X @ np.linalg.inv(X.T @ X) @ X.T

    assert np.allclose(diag.leverage, np.diag(hat))
    assert np.isclose(np.sum(diag.leverage), 2.0)


def test_standardized_residuals_and_cooks_distance():
    samples = make_samples(seed=4)
    res = fit(samples)
    diag = diagnose(samples, res)
    h = diag.leverage
    expected_std = diag.residuals / (res.residual_standard_error * np.sqrt(1 - h))

    assert np.allclose(diag.standardized_residuals, expected_std)
    assert np.allclose(diag.cooks_distance, expected_std**2 * h / (2 * (1 - h)))


def test_two_point_fit_has_undefined_influence_measures():
    samples = [(0.0, 1.0), (1.0, 3.0)]
    diag = diagnose(samples, fit(samples))
    assert np.all(np.isnan(diag.standardized_residuals))
    assert np.all(np.isnan(diag.cooks_distance))


def test_arrays_are_read_only():
    samples = make_samples()
    diag = diagnose(samples, fit(samples))
    with pytest.raises(ValueError):
        diag.residuals[0] = 0.0


def test_repeated_calls_give_equal_results():
    samples = make_samples(seed=5)
    res = fit(samples)
    first = diagnose(samples, res)
    second = diagnose(samples, res)

    assert first is not second
    assert np.array_equal(first.residuals, second.residuals)
    assert np.array_equal(first.theoretical_quantiles, second.theoretical_quantiles)


def test_sample_count_mismatch_raises():
    samples = make_samples(n=10)
    res = fit(samples)
    with pytest.raises(InvalidInputError, match="10 samples"):
        diagnose(samples[:-1], res)


def test_other_dataset_of_same_size_raises():
    res = fit(make_samples(seed=0, n=10))
    other = make_samples(seed=5, n=10)
    with pytest.raises(InvalidInputError, match="do not match the fitted dataset"):
        diagnose(other, res)


@pytest.mark.parametrize(
    "offset, tilt",
    [(3.0, 0.0), (0.0, 0.25), (-1.0, 0.1)],
)
def test_same_predictor_with_shifted_response_raises(offset, tilt):
    samples = make_samples(n=12)
    res = fit(samples)
    shifted = [Sample(s.x, s.y + offset + tilt * s.x) for s in samples]
    with pytest.raises(InvalidInputError, match="do not match"):
        diagnose(shifted, res)


def test_reordered_samples_are_accepted():
    samples = make_samples(n=12)
    res = fit(samples)
    diag = diagnose(samples[::-1], res)
    assert np.isclose(np.sum(diag.leverage), 2.0)


def test_non_fit_result_raises():
    with pytest.raises(InvalidInputError, match="FitResult"):
        diagnose([(0, 1), (1, 2)], {"slope": 1.0, "intercept": 1.0})


def test_to_frame_columns():
    samples = make_samples(n=8)
    frame = diagnose(samples, fit(samples)).to_frame()

    assert len(frame) == 8
    assert list(frame.columns) == [
        "x",
        "y",
        "Fitted",
        "Residual",
        "Leverage",
        "Standardized Residual",
        "Cook's Distance",
    ]


def test_normality_test_matches_scipy_shapiro():
    samples = make_samples(seed=6, n=30)
    diag = diagnose(samples, fit(samples))
    result = normality_test(diag)
    ref = shapiro(np.asarray(diag.residuals))

    assert result.n == 30
    assert np.isclose(result.statistic, ref.statistic)
    assert np.isclose(result.p_value, ref.pvalue)
    assert 0.0 < result.statistic <= 1.0


def test_normality_test_needs_three_residuals():
    samples = [(0.0, 1.0), (1.0, 3.0)]
    diag = diagnose(samples, fit(samples))
    with pytest.raises(InsufficientDataError, match="at least 3"):
        normality_test(diag)
