"""Utility functions."""
import numpy as np


class Bunch(dict):
    """Dictionary with attribute access, used to return results."""
    def __getattr__(self, name):
        try:
            return self[name]
        except KeyError:
            raise AttributeError(name)

    __setattr__ = dict.__setitem__
    __delattr__ = dict.__delitem__

    def __repr__(self):
        if self.keys():
            m = max(map(len, list(self.keys()))) + 1
            return '\n'.join(['{}: {}'.format(k.rjust(m), getattr(v, 'shape', type(v)))
                              for k, v in self.items()])
        else:
            return self.__class__.__name__ + "()"

    def __dir__(self):
        return list(self.keys())


def compute_rms(data):
    """Compute root-mean-square of data along 0 axis."""
    return np.mean(np.square(data), axis=0) ** 0.5


def is_symmetric(A, atol=1e-6):
    """Check whether a square matrix is symmetric within an absolute tolerance.

    The tolerance is applied to the largest absolute element of ``A - A.T``.
    """
    A = np.asarray(A)
    if A.ndim != 2 or A.shape[0] != A.shape[1]:
        return False
    return bool(np.max(np.abs(A - A.T), initial=0.0) < atol)


def is_psd(A, atol=1e-9):
    """Check whether a symmetric matrix is positive semi-definite.

    Eigenvalues down to ``-atol`` are accepted to allow for rounding errors.
    """
    A = np.asarray(A)
    if A.size == 0:
        return True
    eigenvalues = np.linalg.eigvalsh(0.5 * (A + A.T))
    return bool(np.min(eigenvalues) >= -atol)
