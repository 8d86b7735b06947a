import numpy as np
import pytest
from scipy.interpolate import CubicSpline

from maths.interpolater import CubicSplineModel, SearchAccelerator, MIN_SAMPLES


@pytest.fixture
def knots():
    return np.array([0.0, 1.0, 2.0, 3.0, 4.0])


class TestSearchAccelerator:
    def test_find_from_empty_cache(self, knots):
        acc = SearchAccelerator()
        assert acc.find(knots, 2.5) == 2
        assert acc.cache == 2
        assert acc.miss_count == 1
        assert acc.hit_count == 0

    def test_nearby_query_hits_cache(self, knots):
        acc = SearchAccelerator()
        acc.find(knots, 2.5)
        assert acc.find(knots, 2.9) == 2
        assert acc.hit_count == 1
        assert acc.miss_count == 1

    def test_search_below_cache(self, knots):
        acc = SearchAccelerator()
        acc.find(knots, 3.5)
        assert acc.find(knots, 0.5) == 0
        assert acc.miss_count == 2

    def test_last_knot_maps_to_last_interval(self, knots):
        acc = SearchAccelerator()
        assert acc.find(knots, 4.0) == 3
        assert acc.find(knots, 0.0) == 0

    def test_reset(self, knots):
        acc = SearchAccelerator()
        acc.find(knots, 3.5)
        acc.reset()
        assert acc.cache == 0
        assert acc.hit_count == 0
        assert acc.miss_count == 0

    def test_matches_searchsorted(self):
        rng = np.random.default_rng(7)
        xp = np.cumsum(rng.uniform(0.1, 1.0, 50))
        acc = SearchAccelerator()
        for x in rng.uniform(xp[0], xp[-1], 200):
            expected = min(np.searchsorted(xp, x, side='right') - 1, len(xp) - 2)
            assert acc.find(xp, x) == expected


class TestCubicSplineModel:
    def test_matches_scipy_natural_spline(self, sine_samples):
        x, y = sine_samples
        model = CubicSplineModel(x, y)
        reference = CubicSpline(x, y, bc_type='natural')
        xs = np.linspace(x[0], x[-1], 501)
        np.testing.assert_allclose(model.evaluate_clamped(xs, y[0], y[-1]), reference(xs), rtol=1e-12, atol=1e-14)

    def test_random_order_queries(self, sine_samples):
        x, y = sine_samples
        model = CubicSplineModel(x, y)
        reference = CubicSpline(x, y, bc_type='natural')
        xs = np.random.default_rng(3).uniform(x[0], x[-1], 100)
        for s in xs:
            assert model(s) == pytest.approx(float(reference(s)), rel=1e-12, abs=1e-14)

    def test_passes_through_knots(self, sine_samples):
        x, y = sine_samples
        model = CubicSplineModel(x, y)
        for xi, yi in zip(x, y):
            assert model(xi) == pytest.approx(yi, rel=1e-9, abs=1e-12)

    def test_linear_data_stays_linear(self):
        x = np.array([1.0, 2.0, 4.0, 5.0])
        model = CubicSplineModel(x, 3.0 * x - 1.0)
        for s in [1.0, 1.5, 3.3, 4.9, 5.0]:
            assert model(s) == pytest.approx(3.0 * s - 1.0)

    def test_clamped_outside_knots(self):
        model = CubicSplineModel([0.0, 1.0, 2.0], [0.0, 1.0, 4.0])
        result = model.evaluate_clamped([-3.0, 0.0, 1.0, 2.0, 7.0], -1.0, 9.0)
        np.testing.assert_allclose(result, [-1.0, 0.0, 1.0, 4.0, 9.0])

    def test_natural_midpoint(self):
        # second derivative at the middle knot is 3 for these samples
        model = CubicSplineModel([0.0, 1.0, 2.0], [0.0, 1.0, 4.0])
        assert model(0.5) == pytest.approx(0.3125)
        assert model(1.5) == pytest.approx(2.3125)

    @pytest.mark.parametrize("x, y", [
        ([0.0, 1.0], [0.0, 1.0]),
        ([0.0, 1.0, 2.0], [0.0, 1.0]),
        ([0.0, 2.0, 1.0], [0.0, 1.0, 2.0]),
        ([0.0, 1.0, 1.0], [0.0, 1.0, 2.0]),
        ([0.0, 1.0, 2.0], [0.0, np.nan, 2.0]),
    ])
    def test_rejects_bad_samples(self, x, y):
        with pytest.raises(ValueError):
            CubicSplineModel(x, y)

    def test_min_samples(self):
        assert MIN_SAMPLES == 3
        assert len(CubicSplineModel([0.0, 1.0, 2.0], [1.0, 2.0, 0.0])) == 3

    def test_copy_has_own_accelerator(self, sine_samples):
        x, y = sine_samples
        model = CubicSplineModel(x, y)
        model(5.0)
        other = model.copy()
        assert other.accelerator is not model.accelerator
        assert other.accelerator.cache == 0
        assert other(5.0) == model(5.0)

    def test_keeps_own_copy_of_samples(self):
        x = np.array([0.0, 1.0, 2.0, 3.0])
        y = x ** 2
        model = CubicSplineModel(x, y)
        before = model(1.5)
        x *= 10.0
        y[:] = 0.0
        np.testing.assert_array_equal(model.x, [0.0, 1.0, 2.0, 3.0])
        assert model(1.5) == before


def test_accelerator_moved_to_shorter_table(knots):
    acc = SearchAccelerator()
    long_table = np.linspace(0.0, 10.0, 11)
    assert acc.find(long_table, 9.5) == 9
    assert acc.find(knots, 3.5) == 3
    assert acc.find(knots, 0.5) == 0
