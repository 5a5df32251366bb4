"""Exponentially weighted and adaptive moving averages on regular time series."""
from dataclasses import dataclass

import numpy as np


class ExponentialWMA:
    """Exponentially weighted moving average.

    Each update computes ``e = coef * value + (1 - coef) * e``.

    Parameters
    ----------
    coef : float
        Weight of a new value, must be in (0, 1).
    start : float or array_like
        Initial estimate.
    """
    def __init__(self, coef, start):
        if not 0 < coef < 1:
            raise ValueError("coef must be in (0, 1)")
        self.coef = coef
        self._estimate = np.array(start, dtype=float)

    def update(self, value):
        self._estimate = self.coef * np.asarray(value) + (1 - self.coef) * self._estimate
        return self.estimate

    @property
    def estimate(self):
        if self._estimate.ndim == 0:
            return float(self._estimate)
        return self._estimate.copy()


def _check_unit_interval(name, value):
    if not 0 <= value <= 1:
        raise ValueError("{} must be in [0, 1], got {}".format(name, value))


@dataclass
class JambonParameters:
    """Parameters of `JambonAdaptiveMA`.

    Parameters
    ----------
    gain_coef : float
        Coefficient of the averages tracking rises and falls of the signal.
    low_power : float
        Exponent shaping how fast the coefficient grows with the trend strength.
    alpha_min : float
        Smallest coefficient, used when the signal shows no trend.
    alpha_delta : float
        Range of the coefficient above `alpha_min`.
    max_shrink : float
        Largest allowed ratio between consecutive coefficients.
    """
    gain_coef: float = 0.05
    low_power: float = 0.5
    alpha_min: float = 0.01
    alpha_delta: float = 1.0 - 0.01
    max_shrink: float = 0.9

    def set_alpha_range(self, alpha_min, alpha_max):
        if not 1 >= alpha_max >= alpha_min >= 0:
            raise ValueError("Range must satisfy 0 <= alpha_min <= alpha_max <= 1")
        self.alpha_min = alpha_min
        self.alpha_delta = alpha_max - alpha_min
        return self

    def set_shrink(self, max_shrink):
        _check_unit_interval('max_shrink', max_shrink)
        self.max_shrink = max_shrink
        return self

    def set_gain(self, gain_coef):
        if not 0 < gain_coef < 1:
            raise ValueError("gain_coef must be in (0, 1), got {}".format(gain_coef))
        self.gain_coef = gain_coef
        return self

    def set_low_power(self, low_power):
        _check_unit_interval('low_power', low_power)
        self.low_power = low_power
        return self


class JambonAdaptiveMA:
    """Martin Jambon's adaptive moving average of a scalar signal.

    The weight of new values grows when the signal trends consistently in one
    direction and shrinks when it oscillates. Rises and falls are tracked
    by two exponential averages of the positive and negative increments. From
    them the trend strength ``r = |gain + loss| / (gain - loss)`` in [0, 1] is
    found and mapped to the coefficient::

        d = 2 r - 1
        i = (1 + sign(d) |d| ** low_power) / 2
        alpha = max(max_shrink * alpha_previous, alpha_min + i * alpha_delta)

    The first update uses ``alpha_previous = 1``.
    """
    def __init__(self, params, start):
        self.params = params
        self._estimate = float(start)
        self._previous = float(start)
        self._alpha = 1.0
        self._gain = ExponentialWMA(params.gain_coef, 0.0)
        self._loss = ExponentialWMA(params.gain_coef, 0.0)

    @classmethod
    def with_defaults(cls, start):
        return cls(JambonParameters(), start)

    def update(self, value):
        value = float(value)
        slope = value - self._previous
        gain = self._gain.update(max(slope, 0.0))
        loss = self._loss.update(min(slope, 0.0))

        travel = gain - loss
        if travel == 0:
            i = 1.0
        else:
            r = abs(gain + loss) / travel
            d = 2 * r - 1
            i = (1 + np.sign(d) * abs(d) ** self.params.low_power) / 2

        p = self.params
        alpha = float(max(p.max_shrink * self._alpha, p.alpha_min + i * p.alpha_delta))

        self._estimate = (1 - alpha) * self._estimate + alpha * value
        self._previous = value
        self._alpha = alpha
        return self._estimate

    @property
    def estimate(self):
        return self._estimate

    @property
    def alpha(self):
        """Coefficient used by the last update."""
        return self._alpha
