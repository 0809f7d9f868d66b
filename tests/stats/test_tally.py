# tests/stats/test_tally.py
import numpy as np
import pytest

from ccperf.stats import RatioTallyMatrix, TallyMatrix
from ccperf.utils.errors import NotFoundError


def test_tally_mean_variance_min_max():
    t = TallyMatrix(1, 2)
    for x in ([1.0, 10.0], [2.0, 20.0], [3.0, 30.0]):
        t.add([x])
    np.testing.assert_allclose(t.average(), [[2.0, 20.0]])
    np.testing.assert_allclose(t.variance(), [[1.0, 100.0]])
    np.testing.assert_array_equal(t.min(), [[1.0, 10.0]])
    np.testing.assert_array_equal(t.max(), [[3.0, 30.0]])
    np.testing.assert_array_equal(t.counts(), [[3, 3]])


def test_empty_and_single_observation():
    t = TallyMatrix(2, 1)
    assert np.isnan(t.average()).all()
    t.add([[1.0], [2.0]])
    np.testing.assert_array_equal(t.average(), [[1.0], [2.0]])
    assert np.isnan(t.variance()).all()


def test_shape_is_fixed_by_first_observation():
    t = TallyMatrix()
    t.add(np.zeros((2, 3)))
    assert t.shape == (2, 3)
    with pytest.raises(ValueError):
        t.add(np.zeros((3, 2)))


def test_observations_kept_on_demand():
    t = TallyMatrix(1, 1, keep_observations=True)
    t.add([[0.5]])
    t.add([[0.7]])
    assert t.observations(0, 0) == [0.5, 0.7]

    plain = TallyMatrix(1, 1)
    plain.add([[0.5]])
    with pytest.raises(NotFoundError):
        plain.observations(0, 0)


def test_from_observations_with_uneven_cells():
    t = TallyMatrix.from_observations([[[1.0, 2.0, 3.0], [5.0]]])
    np.testing.assert_array_equal(t.counts(), [[3, 1]])
    np.testing.assert_allclose(t.average(), [[2.0, 5.0]])
    assert np.isnan(t.variance()[0, 1])


def test_init_keeps_shape():
    t = TallyMatrix(1, 1)
    t.add([[4.0]])
    t.init()
    assert t.shape == (1, 1)
    np.testing.assert_array_equal(t.counts(), [[0]])


def test_ratio_of_means():
    t = RatioTallyMatrix(1, 1)
    t.add([[8.0]], [[10.0]])
    t.add([[2.0]], [[10.0]])
    np.testing.assert_allclose(t.average(), [[0.5]])
    # per-observation ratios
    np.testing.assert_allclose(t.min(), [[0.2]])
    np.testing.assert_allclose(t.max(), [[0.8]])


def test_ratio_zero_over_zero():
    t = RatioTallyMatrix(1, 2, zero_over_zero=1.0)
    t.add([[0.0, 0.0]], [[0.0, 4.0]])
    t.add([[0.0, 1.0]], [[0.0, 4.0]])
    np.testing.assert_allclose(t.average(), [[1.0, 0.125]])
    assert t.variance()[0, 0] == 0.0


def test_ratio_delta_method_variance():
    rng = np.random.default_rng(7)
    x = rng.normal(10.0, 1.0, size=200)
    y = rng.normal(20.0, 2.0, size=200)
    t = RatioTallyMatrix(1, 1)
    for a, b in zip(x, y):
        t.add([[a]], [[b]])

    r = x.mean() / y.mean()
    cov = np.cov(x, y, ddof=1)
    expected = (cov[0, 0] - 2 * r * cov[0, 1] + r * r * cov[1, 1]) / y.mean() ** 2
    np.testing.assert_allclose(t.variance(), [[expected]], rtol=1e-9)
    np.testing.assert_array_equal(t.counts(), [[200]])


def test_ratio_shape_mismatch():
    t = RatioTallyMatrix()
    with pytest.raises(ValueError):
        t.add(np.zeros((1, 2)), np.zeros((2, 1)))
