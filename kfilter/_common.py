import numpy as np


def resolve(explicit, stored, default=None):
    """Pick a per-call argument, then the stored attribute, then a default."""
    if explicit is not None:
        return explicit
    if stored is not None:
        return stored
    return default


def check_vector(name, v, n):
    v = np.asarray(v, dtype=float)
    if v.ndim == 2 and 1 in v.shape:
        v = v.ravel()
    if v.shape != (n,):
        raise ValueError("Inconsistent shape of {}: expected ({},), got {}"
                         .format(name, n, v.shape))
    return v


def check_matrix(name, A, n, m, scalar_ok=False):
    A = np.asarray(A, dtype=float)
    if scalar_ok and A.ndim == 0:
        if n != m:
            raise ValueError("Scalar {} requires a square matrix".format(name))
        return A * np.identity(n)
    if A.shape != (n, m):
        raise ValueError("Inconsistent shape of {}: expected ({}, {}), got {}"
                         .format(name, n, m, A.shape))
    return A


def check_sequence(name, values, n_epochs):
    if values is None:
        return [None] * n_epochs
    if len(values) != n_epochs:
        raise ValueError("Inconsistent length of {}: expected {}, got {}"
                         .format(name, n_epochs, len(values)))
    return values
