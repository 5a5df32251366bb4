import numpy as np
import pytest
from numpy.testing import assert_allclose
from kfilter import gh


def test_gh_update():
    f = gh.GHFilter(x=0.0, dx=0.0, dt=1.0, g=0.8, h=0.2)
    x, dx = f.update(1.0)
    assert_allclose(x, 0.8)
    assert_allclose(dx, 0.2)
    assert_allclose(f.y, 1.0)
    assert_allclose(f.x_prediction, 0.0)

    f.g = 1.0
    f.h = 0.01
    x, dx = f.update(2.0)
    assert_allclose(x, 2.0)
    assert_allclose(f.x_prediction, 1.0)


def test_gh_arrays_and_overrides():
    f = gh.GHFilter(x=np.array([0.0, 10.0]), dx=np.array([1.0, -1.0]), dt=0.5,
                    g=0.5, h=0.1)
    assert f.y.shape == (2,)
    x, dx = f.update(np.array([1.0, 9.0]), g=1.0, h=0.0)
    assert_allclose(x, [1.0, 9.0])
    assert_allclose(dx, [1.0, -1.0])
    assert f.g == 0.5


def test_gh_batch_filter():
    data = np.arange(1, 21, dtype=float) + 0.1 * np.sin(np.arange(20))
    f = gh.GHFilter(x=0.0, dx=1.0, dt=1.0, g=0.6, h=0.1)
    results, predictions = f.batch_filter(data, save_predictions=True)
    assert results.shape == (21, 2)
    assert predictions.shape == (20,)
    assert_allclose(results[0], [0.0, 1.0])
    assert f.x == 0.0

    for i, z in enumerate(data):
        x, dx = f.update(z)
        assert_allclose(results[i + 1], [x, dx])
        assert_allclose(predictions[i], f.x_prediction)


def test_gh_tracks_ramp():
    f = gh.GHFilter(x=0.0, dx=0.0, dt=1.0, g=0.5, h=0.2)
    for t in range(1, 100):
        x, dx = f.update(2.0 * t)
    assert_allclose(x, 2.0 * 99, atol=1e-6)
    assert_allclose(dx, 2.0, atol=1e-6)


def test_gh_vrf():
    f = gh.GHFilter(0.0, 0.0, 1.0, g=0.5, h=0.2)
    den = 0.5 * (4 - 1.0 - 0.2)
    vx, vdx = f.vrf()
    assert_allclose(vx, (0.5 + 0.4 - 0.3) / den)
    assert_allclose(vdx, 0.08 / den)
    assert_allclose(f.vrf_prediction(), (0.5 + 0.4 + 0.1) / den)

    with pytest.raises(ValueError):
        gh.GHFilter(0.0, 0.0, 0.0, 0.5, 0.2)


def test_ghk_update():
    f = gh.GHKFilter(x=0.0, dx=0.0, ddx=0.0, dt=1.0, g=0.5, h=0.2, k=0.05)
    x, dx, ddx = f.update(1.0)
    assert_allclose(x, 0.5)
    assert_allclose(dx, 0.2)
    assert_allclose(ddx, 0.1)

    f = gh.GHKFilter(x=0.0, dx=1.0, ddx=2.0, dt=1.0, g=0.5, h=0.2, k=0.05)
    f.update(2.0)
    assert_allclose(f.x_prediction, 2.0)
    assert_allclose(f.dx_prediction, 3.0)
    assert_allclose(f.ddx_prediction, 2.0)
    assert_allclose(f.y, 0.0)


def test_ghk_tracks_parabola():
    g, h, k = gh.critical_damping_parameters(0.5, order=3)
    f = gh.GHKFilter(x=0.0, dx=0.0, ddx=0.0, dt=1.0, g=g, h=h, k=k)
    for t in range(1, 200):
        x, dx, ddx = f.update(0.5 * t**2)
    assert_allclose(x, 0.5 * 199**2, rtol=1e-6)
    assert_allclose(dx, 199.0, rtol=1e-6)
    assert_allclose(ddx, 1.0, rtol=1e-6)


def test_ghk_vrf_and_bias():
    g, h, k = gh.critical_damping_parameters(0.5, order=3)
    f = gh.GHKFilter(0.0, 0.0, 0.0, 2.0, g=g, h=h, k=k)
    vx, vdx, vddx = f.vrf()
    assert 0 < vx < 1
    assert vdx > 0
    assert vddx > 0
    assert f.vrf_prediction() > vx
    assert_allclose(f.bias_error(1.0), -4.0 / (2 * k))

    f_gh = gh.GHFilter(0.0, 0.0, 2.0, g=0.5, h=0.2)
    f_ghk = gh.GHKFilter(0.0, 0.0, 0.0, 2.0, g=0.5, h=0.2, k=1e-12)
    assert_allclose(f_ghk.vrf()[:2], f_gh.vrf(), rtol=1e-6)
    assert_allclose(f_ghk.vrf_prediction(), f_gh.vrf_prediction(), rtol=1e-6)


def test_optimal_noise_smoothing():
    g, h, k = gh.optimal_noise_smoothing(0.5)
    assert g == 0.5
    h_expected = ((2 * 0.125 - 4 * 0.25) +
                  (4 * 0.5**6 - 64 * 0.5**5 + 64 * 0.5**4) ** 0.5) / 4
    assert_allclose(h, h_expected)
    assert_allclose(k, (h * 1.5 - 0.25) / 0.5)


def test_least_squares_parameters():
    assert_allclose(gh.least_squares_parameters(0), (1.0, 3.0))
    assert_allclose(gh.least_squares_parameters(1), (1.0, 1.0))
    g, h = gh.least_squares_parameters(100)
    assert g < 0.05
    assert h < 0.001


def test_critical_damping_parameters():
    assert_allclose(gh.critical_damping_parameters(0.5), (0.75, 0.25))
    assert_allclose(gh.critical_damping_parameters(0.5, order=3),
                    (0.875, 0.5625, 0.0625))
    with pytest.raises(ValueError):
        gh.critical_damping_parameters(0.5, order=4)


def test_benedict_bordner_constants():
    assert_allclose(gh.benedict_bordner_constants(0.5), (0.5, 0.25 / 1.5))
    g, h = gh.benedict_bordner_constants(0.5, critical=True)
    assert g == 0.5
    assert_allclose(h, 0.8 * (2 - 0.25 - 2 * 0.75 ** 0.5) / 0.25)


def test_gh_batch_filter_arrays():
    data = np.column_stack([np.arange(1.0, 11.0), -2 * np.arange(1.0, 11.0)])
    f = gh.GHFilter(x=np.array([0.0, 0.0]), dx=np.array([1.0, -2.0]), dt=1.0,
                    g=0.6, h=0.1)
    results, predictions = f.batch_filter(data, save_predictions=True)
    assert results.shape == (11, 2, 2)
    assert predictions.shape == (10, 2)
    assert_allclose(results[0], [[0.0, 0.0], [1.0, -2.0]])

    for i, z in enumerate(data):
        x, dx = f.update(z)
        assert_allclose(results[i + 1, 0], x)
        assert_allclose(results[i + 1, 1], dx)
        assert_allclose(predictions[i], f.x_prediction)
