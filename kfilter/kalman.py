"""Linear Kalman filter and Rauch-Tung-Striebel smoother.

The filter estimates the state of a discrete-time linear system::

    x_{k + 1} = F x_k + B u_k + w_k
    z_k = H x_k + v_k

with ``w_k ~ N(0, Q)`` and ``v_k ~ N(0, R)``. The belief is kept as the mean `x`
and covariance `P`, which are propagated by `KalmanFilter.predict` and corrected by
`KalmanFilter.update`.

References
----------
.. [1] R. Labbe, "Kalman and Bayesian Filters in Python",
   https://github.com/rlabbe/Kalman-and-Bayesian-Filters-in-Python
.. [2] D. Simon, "Optimal State Estimation", Wiley, 2006
"""
import logging
import sys
import warnings

import numpy as np
from scipy import linalg

from ._common import resolve, check_vector, check_matrix, check_sequence
from .stats import logpdf
from .util import Bunch, is_symmetric, is_psd

logger = logging.getLogger(__name__)


class SingularMatrix(np.linalg.LinAlgError):
    """Innovation covariance could not be inverted."""


class NumericalWarning(RuntimeWarning):
    """Covariance lost symmetry or positive semi-definiteness."""


class KalmanFilter:
    """Linear Kalman filter.

    All model matrices are public attributes and may be replaced between the
    steps. The dimensions given at construction are used to validate shapes at
    the start of each call, mismatches raise ValueError.

    Parameters
    ----------
    dim_x : int
        Number of state variables.
    dim_z : int
        Number of measurement variables.
    dim_u : int, optional
        Size of the control input. Default is 0, that is no control.

    Attributes
    ----------
    x : ndarray, shape (dim_x,)
        State estimate. Initialized with ones.
    P : ndarray, shape (dim_x, dim_x)
        State error covariance. Initialized with identity.
    F : ndarray, shape (dim_x, dim_x)
        State transition matrix. Initialized with identity.
    B : ndarray, shape (dim_x, dim_u) or None
        Control transition matrix. None (default) disables the control input.
    H : ndarray, shape (dim_z, dim_x)
        Measurement matrix. Initialized with zeros.
    Q : ndarray, shape (dim_x, dim_x)
        Process noise covariance. Initialized with identity.
    R : ndarray, shape (dim_z, dim_z)
        Measurement noise covariance. Initialized with identity.
    alpha_sq : float
        Fading memory factor, must be at least 1. Default is 1, which
        corresponds to the standard filter.
    x_prior, P_prior : ndarray
        Copies of `x` and `P` made after the last predict step.
    x_post, P_post : ndarray
        Copies of `x` and `P` made after the last update step.
    z : ndarray, shape (dim_z,) or None
        Last measurement, None before the first update or after a skipped one.
    y : ndarray, shape (dim_z,)
        Innovation of the last update.
    K : ndarray, shape (dim_x, dim_z)
        Kalman gain of the last update.
    S : ndarray, shape (dim_z, dim_z)
        Innovation covariance of the last update.
    SI : ndarray, shape (dim_z, dim_z)
        Inverse of `S`.
    """
    def __init__(self, dim_x, dim_z, dim_u=0):
        if dim_x < 1:
            raise ValueError("dim_x must be 1 or greater")
        if dim_z < 1:
            raise ValueError("dim_z must be 1 or greater")
        if dim_u < 0:
            raise ValueError("dim_u must be 0 or greater")

        self.dim_x = dim_x
        self.dim_z = dim_z
        self.dim_u = dim_u

        self.x = np.ones(dim_x)
        self.P = np.identity(dim_x)
        self.Q = np.identity(dim_x)
        self.B = None
        self.F = np.identity(dim_x)
        self.H = np.zeros((dim_z, dim_x))
        self.R = np.identity(dim_z)
        self.alpha_sq = 1.0

        self.z = None
        self.y = np.zeros(dim_z)
        self.K = np.zeros((dim_x, dim_z))
        self.S = np.zeros((dim_z, dim_z))
        self.SI = np.zeros((dim_z, dim_z))

        self.x_prior = self.x.copy()
        self.P_prior = self.P.copy()
        self.x_post = self.x.copy()
        self.P_post = self.P.copy()

    @classmethod
    def from_model(cls, x, P, F, H, Q=None, R=None, B=None, alpha_sq=1.0):
        """Create a filter with dimensions inferred from the model arrays.

        Parameters
        ----------
        x : array_like, shape (n_states,)
            Initial state estimate.
        P : array_like, shape (n_states, n_states) or float
            Initial error covariance, a scalar is multiplied by identity.
        F : array_like, shape (n_states, n_states)
            State transition matrix.
        H : array_like, shape (n_meas, n_states)
            Measurement matrix.
        Q : array_like, shape (n_states, n_states), float or None, optional
            Process noise covariance. None (default) keeps identity.
        R : array_like, shape (n_meas, n_meas), float or None, optional
            Measurement noise covariance. None (default) keeps identity.
        B : array_like, shape (n_states, n_controls) or None, optional
            Control transition matrix. None (default) means no control.
        alpha_sq : float, optional
            Fading memory factor. Default is 1.

        Returns
        -------
        KalmanFilter
        """
        x = np.asarray(x, dtype=float)
        H = np.asarray(H, dtype=float)
        if x.ndim != 1:
            raise ValueError("x must be a 1-D array")
        if H.ndim != 2:
            raise ValueError("H must be a 2-D array")
        dim_u = 0
        if B is not None:
            B = np.asarray(B, dtype=float)
            if B.ndim != 2:
                raise ValueError("B must be a 2-D array")
            dim_u = B.shape[1]

        kf = cls(len(x), H.shape[0], dim_u)
        kf.x = x.copy()
        kf.P = check_matrix('P', P, kf.dim_x, kf.dim_x, scalar_ok=True).copy()
        kf.F = check_matrix('F', F, kf.dim_x, kf.dim_x).copy()
        kf.H = check_matrix('H', H, kf.dim_z, kf.dim_x).copy()
        if Q is not None:
            kf.Q = check_matrix('Q', Q, kf.dim_x, kf.dim_x, scalar_ok=True).copy()
        if R is not None:
            kf.R = check_matrix('R', R, kf.dim_z, kf.dim_z, scalar_ok=True).copy()
        if B is not None:
            kf.B = check_matrix('B', B, kf.dim_x, kf.dim_u).copy()
        if alpha_sq < 1:
            raise ValueError("alpha_sq must be greater than or equal to 1")
        kf.alpha_sq = alpha_sq

        kf.x_prior = kf.x.copy()
        kf.P_prior = kf.P.copy()
        kf.x_post = kf.x.copy()
        kf.P_post = kf.P.copy()
        return kf

    @property
    def alpha(self):
        """Fading memory factor, square root of `alpha_sq`."""
        return self.alpha_sq ** 0.5

    @alpha.setter
    def alpha(self, value):
        if not np.isscalar(value) or value < 1:
            raise ValueError("alpha must be a float greater than or equal to 1")
        self.alpha_sq = value ** 2

    def predict(self, u=None, B=None, F=None, Q=None):
        """Predict the next state with the process model.

        `B`, `F` and `Q` are used for this call only, when given. The control
        input is applied only if both `u` and a control matrix are available.

        Parameters
        ----------
        u : array_like, shape (dim_u,) or None, optional
            Control input.
        B : array_like, shape (dim_x, dim_u) or None, optional
            Control transition matrix, `self.B` is used if None.
        F : array_like, shape (dim_x, dim_x) or None, optional
            State transition matrix, `self.F` is used if None.
        Q : array_like, shape (dim_x, dim_x), float or None, optional
            Process noise covariance, `self.Q` is used if None.
        """
        x, P = self._predict(u, B, F, Q)
        self.x = x
        self.P = P
        self.x_prior = x.copy()
        self.P_prior = P.copy()

    def predict_steadystate(self, u=None, B=None):
        """Predict the next state keeping the covariance unchanged.

        Use it together with `update_steadystate` once the gain has converged.
        """
        x, _ = self._predict(u, B, None, None, with_covariance=False)
        self.x = x
        self.x_prior = x.copy()
        self.P_prior = self.P.copy()

    def update(self, z, R=None, H=None):
        """Incorporate a measurement into the state estimate.

        The covariance is updated in the Joseph form. The filter is modified
        only if the whole computation succeeds.

        Parameters
        ----------
        z : array_like, shape (dim_z,) or None
            Measurement. If None, the update is skipped.
        R : array_like, shape (dim_z, dim_z), float or None, optional
            Measurement noise covariance, `self.R` is used if None.
        H : array_like, shape (dim_z, dim_x) or None, optional
            Measurement matrix, `self.H` is used if None.

        Raises
        ------
        SingularMatrix
            If the innovation covariance is singular.
        """
        if z is None:
            self._skip_update()
            return

        z = check_vector('z', z, self.dim_z)
        x, P, y, S, SI, K = self._update(z, R, H)

        self.x = x
        self.P = P
        self.y = y
        self.S = S
        self.SI = SI
        self.K = K
        self.z = z.copy()
        self.x_post = x.copy()
        self.P_post = P.copy()

        if not is_symmetric(P) or not is_psd(P):
            warnings.warn("Updated covariance is not symmetric positive semi-definite",
                          NumericalWarning)

    def update_steadystate(self, z):
        """Incorporate a measurement using the stored gain `K`.

        Neither the covariance nor `S` and `SI` are modified.
        """
        if z is None:
            self._skip_update()
            return

        z = check_vector('z', z, self.dim_z)
        H = check_matrix('H', self.H, self.dim_z, self.dim_x)
        K = check_matrix('K', self.K, self.dim_x, self.dim_z)
        x = check_vector('x', self.x, self.dim_x)

        y = z - H @ x
        self.x = x + K @ y
        self.y = y
        self.z = z.copy()
        self.x_post = self.x.copy()
        self.P_post = self.P.copy()

    def get_prediction(self, u=None, B=None, F=None, Q=None):
        """Compute the result of `predict` without modifying the filter.

        Returns
        -------
        x : ndarray, shape (dim_x,)
            Predicted state.
        P : ndarray, shape (dim_x, dim_x)
            Predicted covariance.
        """
        return self._predict(u, B, F, Q)

    def get_update(self, z, R=None, H=None):
        """Compute the result of `update` without modifying the filter.

        Returns
        -------
        x : ndarray, shape (dim_x,)
            Updated state.
        P : ndarray, shape (dim_x, dim_x)
            Updated covariance.
        """
        if z is None:
            return self.x.copy(), self.P.copy()
        z = check_vector('z', z, self.dim_z)
        x, P, *_ = self._update(z, R, H)
        return x, P

    def residual_of(self, z):
        """Compute the residual of `z` with respect to the last predicted state."""
        z = check_vector('z', z, self.dim_z)
        H = check_matrix('H', self.H, self.dim_z, self.dim_x)
        return z - H @ check_vector('x_prior', self.x_prior, self.dim_x)

    def measurement_of_state(self, x):
        """Project a state vector into the measurement space."""
        H = check_matrix('H', self.H, self.dim_z, self.dim_x)
        return H @ check_vector('x', x, self.dim_x)

    @property
    def log_likelihood(self):
        """Log-likelihood of the last measurement, None if there was none."""
        if self.z is None:
            return None
        return logpdf(self.y, cov=self.S)

    @property
    def likelihood(self):
        """Likelihood of the last measurement, None if there was none.

        The value is floored by the smallest positive float to keep it usable
        in products and divisions.
        """
        log_likelihood = self.log_likelihood
        if log_likelihood is None:
            return None
        return max(float(np.exp(log_likelihood)), sys.float_info.min)

    @property
    def mahalanobis(self):
        """Mahalanobis distance of the last innovation, None if there was none."""
        if self.z is None:
            return None
        return float(np.sqrt(max(self.y @ self.SI @ self.y, 0.0)))

    def _predict(self, u, B, F, Q, with_covariance=True):
        F = check_matrix('F', resolve(F, self.F), self.dim_x, self.dim_x)
        B = resolve(B, self.B)
        x = check_vector('x', self.x, self.dim_x)

        if B is not None and u is not None:
            B = check_matrix('B', B, self.dim_x, self.dim_u)
            u = check_vector('u', u, self.dim_u)
            x = F @ x + B @ u
        else:
            x = F @ x

        if not with_covariance:
            return x, None

        if self.alpha_sq < 1:
            raise ValueError("alpha_sq must be greater than or equal to 1")
        Q = check_matrix('Q', resolve(Q, self.Q), self.dim_x, self.dim_x,
                         scalar_ok=True)
        P = check_matrix('P', self.P, self.dim_x, self.dim_x)
        P = self.alpha_sq * (F @ P @ F.T) + Q
        return x, P

    def _update(self, z, R, H):
        R = check_matrix('R', resolve(R, self.R), self.dim_z, self.dim_z,
                         scalar_ok=True)
        H = check_matrix('H', resolve(H, self.H), self.dim_z, self.dim_x)
        x = check_vector('x', self.x, self.dim_x)
        P = check_matrix('P', self.P, self.dim_x, self.dim_x)

        y = z - H @ x
        PHT = P @ H.T
        S = H @ PHT + R
        try:
            SI = linalg.inv(S)
        except linalg.LinAlgError as e:
            logger.debug("Innovation covariance is singular, update rejected")
            raise SingularMatrix("Innovation covariance is singular") from e
        K = PHT @ SI

        x = x + K @ y
        I_KH = np.identity(self.dim_x) - K @ H
        P = I_KH @ P @ I_KH.T + K @ R @ K.T
        return x, P, y, S, SI, K

    def _skip_update(self):
        logger.debug("No measurement, update skipped")
        self.z = None
        self.y = np.zeros(self.dim_z)
        self.x_post = self.x.copy()
        self.P_post = self.P.copy()

    def __repr__(self):
        names = ['dim_x', 'dim_z', 'dim_u', 'x', 'P', 'x_prior', 'P_prior', 'x_post',
                 'P_post', 'F', 'Q', 'R', 'H', 'K', 'y', 'S', 'SI', 'B', 'z',
                 'alpha_sq']
        lines = ['{}: {}'.format(name.rjust(8), getattr(self, name)) for name in names]
        return '\n'.join([self.__class__.__name__ + ':'] + lines)


def batch_filter(kf, zs, us=None, Bs=None, Fs=None, Qs=None, Rs=None, Hs=None,
                 update_first=False):
    """Run a filter over a sequence of measurements.

    The filter is modified in place and ends in the state after the last
    epoch.

    Parameters
    ----------
    kf : KalmanFilter
        Filter with the initial state and the default model.
    zs : sequence, length n_epochs
        Measurements, None entries are skipped.
    us, Bs, Fs, Qs, Rs, Hs : sequence with length n_epochs or None, optional
        Per-epoch arguments passed to `KalmanFilter.predict` and
        `KalmanFilter.update`. None (default) uses the filter attributes for
        each epoch.
    update_first : bool, optional
        Whether to update before predicting at each epoch. Default is False.

    Returns
    -------
    Bunch object with the following fields:

        - x : ndarray, shape (n_epochs, dim_x)
            Updated state estimates.
        - P : ndarray, shape (n_epochs, dim_x, dim_x)
            Updated error covariances.
        - x_prior : ndarray, shape (n_epochs, dim_x)
            Predicted state estimates.
        - P_prior : ndarray, shape (n_epochs, dim_x, dim_x)
            Predicted error covariances.
    """
    n_epochs = len(zs)
    us = check_sequence('us', us, n_epochs)
    Bs = check_sequence('Bs', Bs, n_epochs)
    Fs = check_sequence('Fs', Fs, n_epochs)
    Qs = check_sequence('Qs', Qs, n_epochs)
    Rs = check_sequence('Rs', Rs, n_epochs)
    Hs = check_sequence('Hs', Hs, n_epochs)

    x = np.empty((n_epochs, kf.dim_x))
    P = np.empty((n_epochs, kf.dim_x, kf.dim_x))
    x_prior = np.empty((n_epochs, kf.dim_x))
    P_prior = np.empty((n_epochs, kf.dim_x, kf.dim_x))

    for k in range(n_epochs):
        if update_first:
            kf.update(zs[k], R=Rs[k], H=Hs[k])
            x[k] = kf.x
            P[k] = kf.P
            kf.predict(u=us[k], B=Bs[k], F=Fs[k], Q=Qs[k])
            x_prior[k] = kf.x
            P_prior[k] = kf.P
        else:
            kf.predict(u=us[k], B=Bs[k], F=Fs[k], Q=Qs[k])
            x_prior[k] = kf.x
            P_prior[k] = kf.P
            kf.update(zs[k], R=Rs[k], H=Hs[k])
            x[k] = kf.x
            P[k] = kf.P

    return Bunch(x=x, P=P, x_prior=x_prior, P_prior=P_prior)


def rts_smoother(xs, Ps, F, Q):
    """Run Rauch-Tung-Striebel smoother over the output of a Kalman filter.

    The transition into epoch ``k`` is described by ``F[k]`` and ``Q[k]``, which
    matches the arguments passed to `KalmanFilter.predict` before the update at
    epoch ``k`` in `batch_filter`.

    Parameters
    ----------
    xs : array_like, shape (n_epochs, n_states)
        Filter state estimates.
    Ps : array_like, shape (n_epochs, n_states, n_states)
        Filter error covariances.
    F : array_like, shape (n_epochs, n_states, n_states) or (n_states, n_states)
        Transition matrices.
    Q : array_like, shape (n_epochs, n_states, n_states) or (n_states, n_states)
        Process noise covariance matrices.

    Returns
    -------
    Bunch object with the following fields:

        - x : ndarray, shape (n_epochs, n_states)
            Smoother state estimates.
        - P : ndarray, shape (n_epochs, n_states, n_states)
            Smoother error covariances.
        - K : ndarray, shape (n_epochs, n_states, n_states)
            Smoother gains, the last one is zero.
        - P_prior : ndarray, shape (n_epochs, n_states, n_states)
            Predicted covariances used in the backward pass, the last one is
            zero.
    """
    xs = np.asarray(xs, dtype=float)
    Ps = np.asarray(Ps, dtype=float)
    n_epochs, n_states = xs.shape

    F = np.asarray(F, dtype=float)
    if F.ndim == 2:
        F = np.resize(F, (n_epochs, *F.shape))
    Q = np.asarray(Q, dtype=float)
    if Q.ndim == 2:
        Q = np.resize(Q, (n_epochs, *Q.shape))

    if (Ps.shape != (n_epochs, n_states, n_states) or
            F.shape != (n_epochs, n_states, n_states) or
            Q.shape != (n_epochs, n_states, n_states)):
        raise ValueError("Inconsistent input shapes")

    x = xs.copy()
    P = Ps.copy()
    P_prior = np.zeros((n_epochs, n_states, n_states))
    K = np.zeros((n_epochs, n_states, n_states))

    for k in reversed(range(n_epochs - 1)):
        Fk = F[k + 1]
        P_prior[k] = Fk @ P[k] @ Fk.T + Q[k + 1]
        try:
            K[k] = linalg.cho_solve(linalg.cho_factor(P_prior[k]), Fk @ P[k]).T
        except linalg.LinAlgError as e:
            raise SingularMatrix(
                "Predicted covariance at epoch {} is not positive definite"
                .format(k + 1)) from e
        x[k] += K[k] @ (x[k + 1] - Fk @ x[k])
        P[k] += K[k] @ (P[k + 1] - P_prior[k]) @ K[k].T

    return Bunch(x=x, P=P, K=K, P_prior=P_prior)
