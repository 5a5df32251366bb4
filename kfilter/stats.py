"""Statistics helpers shared by the filters."""
from collections import namedtuple

import numpy as np
from scipy.stats import multivariate_normal


class Gaussian(namedtuple('Gaussian', ['mean', 'var'])):
    """Univariate normal distribution given by its mean and variance.

    Addition gives the distribution of the sum of two independent variables,
    which is the predict step of a 1-D Kalman filter. Multiplication gives the
    normalized product of the two densities, which is the update step.

    Examples
    --------
    >>> Gaussian(10.0, 4.0) * Gaussian(12.0, 4.0)
    Gaussian(mean=11.0, var=2.0)
    """
    __slots__ = ()

    def __add__(self, other):
        return Gaussian(self.mean + other.mean, self.var + other.var)

    def __mul__(self, other):
        mean = (self.var * other.mean + other.var * self.mean) / (self.var + other.var)
        var = 1 / (1 / self.var + 1 / other.var)
        return Gaussian(mean, var)


def logpdf(x, mean=None, cov=1, allow_singular=True):
    """Compute the log of the normal probability density at `x`.

    Parameters
    ----------
    x : array_like, shape (n,)
        Point at which the density is evaluated.
    mean : array_like, shape (n,) or None, optional
        Mean of the distribution. None (default) means zeros.
    cov : array_like, shape (n, n) or float, optional
        Covariance of the distribution. Default is 1.
    allow_singular : bool, optional
        Whether to allow a singular covariance. Default is True.

    Returns
    -------
    float
    """
    x = np.atleast_1d(np.asarray(x, dtype=float)).ravel()
    if mean is None:
        mean = np.zeros_like(x)
    else:
        mean = np.atleast_1d(np.asarray(mean, dtype=float)).ravel()
    return float(multivariate_normal.logpdf(x, mean, cov, allow_singular=allow_singular))
