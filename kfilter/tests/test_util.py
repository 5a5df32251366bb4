import numpy as np
import pytest
from numpy.testing import assert_allclose
from kfilter import util
from kfilter._common import resolve, check_vector, check_matrix


def test_bunch():
    b = util.Bunch(x=np.zeros(3), n=2)
    assert b.n == 2
    b.P = np.identity(3)
    assert 'P' in b
    del b.n
    with pytest.raises(AttributeError):
        b.n
    assert 'P' in repr(b)
    assert repr(util.Bunch()) == 'Bunch()'


def test_compute_rms():
    data = np.array([[1.0, -2.0], [-1.0, 2.0], [1.0, 2.0]])
    assert_allclose(util.compute_rms(data), [1.0, 2.0])


def test_is_symmetric_and_psd():
    A = np.array([[2.0, 1.0], [1.0, 2.0]])
    assert util.is_symmetric(A)
    assert util.is_psd(A)
    assert not util.is_symmetric(np.array([[1.0, 0.5], [0.0, 1.0]]))
    assert not util.is_symmetric(np.ones((2, 3)))
    assert not util.is_psd(np.array([[1.0, 2.0], [2.0, 1.0]]))
    assert util.is_psd(np.zeros((2, 2)))


def test_resolve():
    assert resolve(1, 2, 3) == 1
    assert resolve(None, 2, 3) == 2
    assert resolve(None, None, 3) == 3
    assert resolve(None, None) is None


def test_shape_checks():
    assert_allclose(check_vector('x', [[1.0], [2.0]], 2), [1.0, 2.0])
    with pytest.raises(ValueError):
        check_vector('x', [1.0, 2.0, 3.0], 2)
    assert_allclose(check_matrix('R', 2.0, 2, 2, scalar_ok=True), 2 * np.identity(2))
    with pytest.raises(ValueError):
        check_matrix('R', 2.0, 2, 2)
    with pytest.raises(ValueError):
        check_matrix('B', 2.0, 2, 1, scalar_ok=True)
