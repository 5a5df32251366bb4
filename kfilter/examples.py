"""Example of estimation problems."""
from dataclasses import dataclass
import numpy as np
from scipy._lib._util import check_random_state


@dataclass
class LinearProblemExample:
    """Example of a linear estimation problem.

    Parameters
    ----------
    x0 : ndarray, shape (n_states,)
        Initial state estimate.
    P0 : ndarray, shape (n_states, n_states)
        Initial covariance.
    F : ndarray, shape (n_states, n_states)
        Transition matrix.
    H : ndarray, shape (n_meas, n_states)
        Measurement matrix.
    Q : ndarray, shape (n_states, n_states)
        Process noise covariance matrix.
    R : ndarray, shape (n_meas, n_meas)
        Measurement noise covariance matrix.
    n_epochs : int
        Number of epochs for estimation.
    zs : ndarray, shape (n_epochs, n_meas)
        Measurements.
    xt : ndarray, shape (n_epochs, n_states)
        True state for each epoch.
    """
    x0 : np.ndarray
    P0 : np.ndarray
    F : np.ndarray
    H : np.ndarray
    Q : np.ndarray
    R : np.ndarray
    n_epochs : int
    zs : np.ndarray
    xt : np.ndarray


def generate_constant_velocity(
    n_epochs=500,
    x0=np.array([0.0, 1.0]),
    P0=np.diag([10.0**2, 1.0**2]),
    dt=1.0,
    q=0.01,
    sigma_position=2.0,
    rng=0,
):
    """Generate data for an example of a body moving with nearly constant velocity.

    The continuous system model is::

        dx1 / dt = x2
        dx2 / dt = a

    with ``a`` being a random white acceleration with intensity `q`. It is
    discretized with a time step `dt`. The state is position and velocity and
    only the position is measured.

    Parameters
    ----------
    n_epochs : int
        Number of epochs for simulation.
    x0 : array_like, shape (2,)
        Initial state estimate.
    P0 : array_like, shape (2, 2)
        Initial state covariance.
    dt : float
        Time step.
    q : float
        Intensity of the acceleration noise.
    sigma_position : float
        Accuracy of the position measurements.
    rng : None, int or `numpy.random.RandomState`
        Seed to create or already created RandomState. None corresponds to
        nondeterministic seeding. Default is 0.

    Returns
    -------
    LinearProblemExample
    """
    rng = check_random_state(rng)
    n_states = 2

    x0 = np.asarray(x0, dtype=float)
    P0 = np.asarray(P0, dtype=float)
    F = np.array([[1, dt], [0, 1]])
    Q = q * np.array([[dt**3 / 3, dt**2 / 2], [dt**2 / 2, dt]])
    H = np.array([[1.0, 0.0]])
    R = np.array([[sigma_position**2]])

    xt = np.empty((n_epochs, n_states))
    zs = np.empty((n_epochs, 1))
    x = rng.multivariate_normal(x0, P0)
    for i in range(n_epochs):
        x = F @ x + rng.multivariate_normal(np.zeros(n_states), Q)
        xt[i] = x
        zs[i] = H @ x + rng.multivariate_normal(np.zeros(1), R)

    return LinearProblemExample(x0, P0, F, H, Q, R, n_epochs, zs, xt)
