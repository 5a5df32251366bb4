"""g-h and g-h-k filters.

These are fixed-gain filters tracking a value and its derivatives. They predict
with a polynomial model and correct the prediction with constant fractions of
the residual. The module also provides formulas for choosing the gains.

References
----------
.. [1] R. Labbe, "Kalman and Bayesian Filters in Python", chapter 1
.. [2] E. Brookner, "Tracking and Kalman Filters Made Easy", Wiley, 1998
.. [3] J. E. Polge, B. K. Bhagavan, "A Study of the g-h-k Tracking Filter",
   Report No. RE-CR-76-1, University of Alabama in Huntsville, 1975
"""
import numpy as np


def _check_dt(dt):
    if dt <= 0:
        raise ValueError("dt must be positive")


class GHFilter:
    """g-h filter.

    `x` and `dx` may be scalars or arrays, in the latter case each component
    is filtered independently.

    Parameters
    ----------
    x : float or array_like
        Initial value of the filtered quantity.
    dx : float or array_like
        Initial value of its derivative.
    dt : float
        Time step between measurements.
    g : float
        Gain applied to the residual for the value.
    h : float
        Gain applied to the residual for the derivative.

    Examples
    --------
    >>> f = GHFilter(x=0.0, dx=0.0, dt=1.0, g=0.8, h=0.2)
    >>> f.update(1.0)
    (0.8, 0.2)
    """
    def __init__(self, x, dx, dt, g, h):
        _check_dt(dt)
        self.x = x
        self.dx = dx
        self.dt = dt
        self.g = g
        self.h = h
        self.x_prediction = self.x
        self.dx_prediction = self.dx
        if np.ndim(x) == 0:
            self.y = 0.0
            self.z = 0.0
        else:
            self.y = np.zeros(len(x))
            self.z = np.zeros(len(x))

    def update(self, z, g=None, h=None):
        """Run predict and update steps with a measurement.

        Parameters
        ----------
        z : float or array_like
            Measurement.
        g, h : float or None, optional
            Gains for this call only. None (default) uses the stored ones.

        Returns
        -------
        x, dx
            Updated value and derivative.
        """
        if g is None:
            g = self.g
        if h is None:
            h = self.h

        self.dx_prediction = self.dx
        self.x_prediction = self.x + self.dx * self.dt

        self.z = z
        self.y = z - self.x_prediction
        self.dx = self.dx_prediction + h * self.y / self.dt
        self.x = self.x_prediction + g * self.y
        return self.x, self.dx

    def batch_filter(self, data, save_predictions=False):
        """Filter a sequence of measurements.

        The filter itself is not modified.

        Parameters
        ----------
        data : array_like, shape (n,) or (n, n_values)
            Measurements, each one shaped as `x`.
        save_predictions : bool, optional
            Whether to return predicted values as well. Default is False.

        Returns
        -------
        results : ndarray, shape (n + 1, 2) or (n + 1, 2, n_values)
            Value and derivative, the first row holds the initial state.
        predictions : ndarray, shape (n,) or (n, n_values)
            Predicted values, returned only if `save_predictions` is True.
        """
        x = self.x
        dx = self.dx
        n = len(data)
        shape = np.shape(x)

        results = np.zeros((n + 1, 2) + shape)
        results[0] = x, dx
        predictions = np.zeros((n,) + shape)

        h_dt = self.h / self.dt
        for i, z in enumerate(data):
            x_est = x + dx * self.dt
            residual = z - x_est
            dx = dx + h_dt * residual
            x = x_est + self.g * residual
            results[i + 1] = x, dx
            predictions[i] = x_est

        if save_predictions:
            return results, predictions
        return results

    def vrf_prediction(self):
        """Variance reduction factor of the prediction step.

        References
        ----------
        .. [1] Asquith, "Weight Selection in First Order Linear Filters",
           Report No RG-TR-69-12, U.S. Army Missile Command, 1970
        """
        g = self.g
        h = self.h
        return (2 * g**2 + 2 * h + g * h) / (g * (4 - 2 * g - h))

    def vrf(self):
        """Variance reduction factors of the value and its derivative."""
        g = self.g
        h = self.h
        den = g * (4 - 2 * g - h)
        vx = (2 * g**2 + 2 * h - 3 * g * h) / den
        vdx = 2 * h**2 / (self.dt**2 * den)
        return vx, vdx


class GHKFilter:
    """g-h-k filter, tracks a value with its first and second derivatives.

    Parameters
    ----------
    x, dx, ddx : float or array_like
        Initial value and its derivatives.
    dt : float
        Time step between measurements.
    g, h, k : float
        Gains for the value, the first and the second derivative.
    """
    def __init__(self, x, dx, ddx, dt, g, h, k):
        _check_dt(dt)
        self.x = x
        self.dx = dx
        self.ddx = ddx
        self.dt = dt
        self.g = g
        self.h = h
        self.k = k
        self.x_prediction = self.x
        self.dx_prediction = self.dx
        self.ddx_prediction = self.ddx
        if np.ndim(x) == 0:
            self.y = 0.0
            self.z = 0.0
        else:
            self.y = np.zeros(len(x))
            self.z = np.zeros(len(x))

    def update(self, z, g=None, h=None, k=None):
        """Run predict and update steps with a measurement.

        Returns
        -------
        x, dx, ddx
            Updated value and derivatives.
        """
        if g is None:
            g = self.g
        if h is None:
            h = self.h
        if k is None:
            k = self.k

        dt = self.dt
        dt_sq = dt ** 2

        self.ddx_prediction = self.ddx
        self.dx_prediction = self.dx + self.ddx * dt
        self.x_prediction = self.x + self.dx * dt + 0.5 * self.ddx * dt_sq

        self.z = z
        self.y = z - self.x_prediction
        self.ddx = self.ddx_prediction + 2 * k * self.y / dt_sq
        self.dx = self.dx_prediction + h * self.y / dt
        self.x = self.x_prediction + g * self.y
        return self.x, self.dx, self.ddx

    def vrf_prediction(self):
        """Variance reduction factor of the value in the prediction step.

        References
        ----------
        .. [1] Asquith and Woods, "Total Error Minimization in First and Second
           Order Prediction Filters", Report No RE-TR-70-17, U.S. Army Missile
           Command, 1970
        """
        g = self.g
        h = self.h
        k = self.k
        gh2 = 2 * g + h
        return ((g * k * (gh2 - 4) + h * (g * gh2 + 2 * h)) /
                (2 * k - g * (h + k) * (gh2 - 4)))

    def vrf(self):
        """Variance reduction factors of the value and its two derivatives."""
        g = self.g
        h = self.h
        k = self.k

        hg4 = 4 - 2 * g - h
        ghk = g * h + g * k - 2 * k

        # Reduce to GHFilter.vrf as k -> 0.
        vx = ((2 * h * (2 * g**2 + 2 * h - 3 * g * h) - 2 * g * k * hg4) /
              (2 * hg4 * ghk))
        vdx = ((2 * h**3 - 4 * h**2 * k + 4 * k**2 * (2 - g)) /
               (self.dt**2 * hg4 * ghk))
        vddx = 8 * h * k**2 / (self.dt**4 * hg4 * ghk)
        return vx, vdx, vddx

    def bias_error(self, dddx):
        """Bias error of the value for a constant third derivative `dddx`."""
        return -self.dt**2 * dddx / (2 * self.k)


def optimal_noise_smoothing(g):
    """Compute g, h, k which optimally smooth noise for a given g.

    Due to Polge and Bhagavan [3]_.

    Returns
    -------
    g, h, k : float
    """
    h = (((2 * g**3 - 4 * g**2) + (4 * g**6 - 64 * g**5 + 64 * g**4) ** 0.5) /
         (8 * (1 - g)))
    k = (h * (2 - g) - g**2) / g
    return g, h, k


def least_squares_parameters(n):
    """Compute g and h turning a g-h filter into a least-squares fit.

    The first measurement corresponds to ``n = 0``.

    Returns
    -------
    g, h : float
    """
    den = (n + 2) * (n + 1)
    g = (2 * (2 * n + 1)) / den
    h = 6 / den
    return g, h


def critical_damping_parameters(theta, order=2):
    """Compute gains of a critically damped filter.

    Such a filter is also known as the discounted least-squares or
    fading-memory polynomial filter.

    Parameters
    ----------
    theta : float
        Discount factor in [0, 1], smaller values discount old data faster.
    order : {2, 3}, optional
        2 (default) returns g, h for a g-h filter, 3 returns g, h, k for a
        g-h-k filter.

    Returns
    -------
    tuple of float
    """
    if order == 2:
        return 1 - theta**2, (1 - theta)**2
    if order == 3:
        return (1 - theta**3, 1.5 * (1 - theta**2) * (1 - theta),
                0.5 * (1 - theta)**3)
    raise ValueError("order must be 2 or 3, got {}".format(order))


def benedict_bordner_constants(g, critical=False):
    """Compute g and h of the Benedict-Bordner filter.

    The filter minimizes transient errors. The default formula allows ringing,
    with `critical` set to True the filter is nearly critically damped, which
    reduces the ringing at the cost of performance.

    Returns
    -------
    g, h : float
    """
    g_sq = g**2
    if critical:
        return g, 0.8 * (2 - g_sq - 2 * (1 - g_sq) ** 0.5) / g_sq
    return g, g_sq / (2 - g)
