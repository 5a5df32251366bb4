"""Discrete Bayes (histogram) filter.

The belief is a probability mass function over a discretized 1-D state space.
The predict step shifts it by a known offset and blurs it with a kernel which
describes the motion uncertainty. The update step multiplies it by the
likelihood of the measurement.
"""
import numpy as np
from scipy.ndimage import convolve, shift


def normalize(pdf):
    """Normalize `pdf` in place so that it sums to 1 and return it.

    `pdf` must be an ndarray of floating type, as it is modified in place.
    """
    if not isinstance(pdf, np.ndarray) or not np.issubdtype(pdf.dtype, np.floating):
        raise ValueError("pdf must be an ndarray of floating type")
    total = np.sum(pdf)
    if total == 0:
        raise ValueError("Cannot normalize a distribution with zero sum")
    pdf /= total
    return pdf


def update(likelihood, prior):
    """Compute the posterior from a likelihood and a prior.

    Parameters
    ----------
    likelihood : array_like, shape (n,)
        Likelihood of the measurement for each state.
    prior : array_like, shape (n,)
        Prior distribution, usually the output of `predict`.

    Returns
    -------
    ndarray, shape (n,)
        Normalized posterior distribution.
    """
    likelihood = np.asarray(likelihood, dtype=float)
    prior = np.asarray(prior, dtype=float)
    if likelihood.shape != prior.shape:
        raise ValueError("Inconsistent shapes of likelihood and prior")
    return normalize(likelihood * prior)


def predict(pdf, offset, kernel, mode='wrap', cval=0.0):
    """Shift a distribution by `offset` and convolve it with `kernel`.

    Parameters
    ----------
    pdf : array_like, shape (n,)
        Current distribution.
    offset : int
        Number of cells to move by, may be negative.
    kernel : array_like
        Motion uncertainty, usually centered and summing to 1.
    mode : {'wrap', 'constant'}, optional
        Boundary handling. With 'wrap' (default) the state space is circular and
        indices are taken modulo ``len(pdf)``. With 'constant' the cells moved
        in from outside are filled with `cval`.
    cval : float, optional
        Fill value for the 'constant' mode. Default is 0.

    Returns
    -------
    ndarray, shape (n,)
        Prior distribution.
    """
    pdf = np.asarray(pdf, dtype=float)
    kernel = np.asarray(kernel, dtype=float)
    if mode == 'wrap':
        return convolve(np.roll(pdf, offset), kernel, mode='wrap')
    if mode == 'constant':
        return convolve(shift(pdf, offset, cval=cval, order=0), kernel,
                        cval=cval, mode='constant')
    raise ValueError("mode must be 'wrap' or 'constant', got {!r}".format(mode))
