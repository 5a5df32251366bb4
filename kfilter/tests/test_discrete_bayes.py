import numpy as np
import pytest
from numpy.testing import assert_allclose
from kfilter import discrete_bayes


def test_normalize():
    pdf = np.array([1.0, 1.0, 1.0, 1.0])
    result = discrete_bayes.normalize(pdf)
    assert result is pdf
    assert_allclose(pdf, 0.25)

    with pytest.raises(ValueError):
        discrete_bayes.normalize(np.zeros(3))
    with pytest.raises(ValueError):
        discrete_bayes.normalize(np.array([1, 1, 2]))
    with pytest.raises(ValueError):
        discrete_bayes.normalize([0.5, 0.5])


def test_update():
    prior = np.array([0.1, 0.2, 0.3, 0.4])
    likelihood = np.array([1.0, 3.0, 1.0, 1.0])
    posterior = discrete_bayes.update(likelihood, prior)
    assert_allclose(posterior, np.array([0.1, 0.6, 0.3, 0.4]) / 1.4)
    assert_allclose(np.sum(posterior), 1.0)
    assert_allclose(prior, [0.1, 0.2, 0.3, 0.4])

    with pytest.raises(ValueError):
        discrete_bayes.update([1.0, 2.0], prior)


def test_predict_wrap():
    pdf = np.array([0.0, 1.0, 0.0, 0.0, 0.0])
    kernel = [0.1, 0.8, 0.1]

    prior = discrete_bayes.predict(pdf, 1, kernel)
    assert_allclose(prior, [0.0, 0.1, 0.8, 0.1, 0.0])

    prior = discrete_bayes.predict(pdf, 2, kernel)
    assert_allclose(prior, [0.0, 0.0, 0.1, 0.8, 0.1])

    prior = discrete_bayes.predict(pdf, -2, kernel)
    assert_allclose(prior, [0.1, 0.0, 0.0, 0.1, 0.8])

    pdf = np.array([0.1, 0.2, 0.3, 0.25, 0.15])
    for offset in range(-7, 8):
        prior = discrete_bayes.predict(pdf, offset, kernel)
        assert_allclose(np.sum(prior), 1.0)
        assert_allclose(discrete_bayes.predict(pdf, offset + len(pdf), kernel), prior)


def test_predict_constant():
    pdf = np.array([0.0, 0.0, 1.0, 0.0, 0.0])
    kernel = [0.1, 0.8, 0.1]

    prior = discrete_bayes.predict(pdf, 1, kernel, mode='constant')
    assert_allclose(prior, [0.0, 0.0, 0.1, 0.8, 0.1], atol=1e-15)

    prior = discrete_bayes.predict(pdf, 2, kernel, mode='constant')
    assert_allclose(prior, [0.0, 0.0, 0.0, 0.1, 0.8], atol=1e-15)

    prior = discrete_bayes.predict(pdf, -1, kernel, mode='constant', cval=0.5)
    assert_allclose(prior, [0.15, 0.8, 0.1, 0.05, 0.45], atol=1e-15)


def test_predict_invalid_mode():
    with pytest.raises(ValueError):
        discrete_bayes.predict([0.5, 0.5], 1, [1.0], mode='reflect')


def test_localization():
    hallway = np.array([1, 1, 0, 0, 0, 0, 0, 0, 1, 0])
    kernel = [0.1, 0.8, 0.1]
    belief = np.full(10, 0.1)

    position = 0
    for _ in range(12):
        position = (position + 1) % 10
        z = hallway[position]
        likelihood = np.where(hallway == z, 3.0, 1.0)
        belief = discrete_bayes.update(likelihood, belief)
        belief = discrete_bayes.predict(belief, 1, kernel)

    assert np.argmax(belief) == (position + 1) % 10
