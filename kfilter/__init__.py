"""kfilter: Recursive state estimation with Kalman and related filters.

The central part is the linear Kalman filter for discrete-time systems of the
form::

    x_{k + 1} = F x_k + B u_k + w_k
    z_k = H x_k + v_k

Where

    - k   - integer epoch index
    - x_k - state vector
    - u_k - control vector
    - w_k - process noise vector with covariance Q
    - z_k - measurement vector
    - v_k - measurement noise vector with covariance R

It is implemented by `kfilter.KalmanFilter`, an object which keeps the
current belief together with the model matrices and is driven by alternating
``predict`` and ``update`` calls. A whole sequence of measurements can be
processed with `kfilter.batch_filter` and smoothed afterwards with
`kfilter.rts_smoother`.

Lightweight estimators which share the same predict/update idea are provided
in `kfilter.gh` (fixed-gain g-h and g-h-k filters) and
`kfilter.discrete_bayes` (histogram filter). `kfilter.moving_averages`
contains exponential and adaptive moving averages.

References
----------
.. [1] R. Labbe, "Kalman and Bayesian Filters in Python",
   https://github.com/rlabbe/Kalman-and-Bayesian-Filters-in-Python
.. [2] E. Brookner, "Tracking and Kalman Filters Made Easy", Wiley, 1998
"""
from . import discrete_bayes, examples, gh, moving_averages, stats, util
from .kalman import (KalmanFilter, SingularMatrix, NumericalWarning, batch_filter,
                     rts_smoother)
from .gh import GHFilter, GHKFilter
from .stats import Gaussian
