"""
EMA-Smoothed Values

Fixed-alpha exponential moving average used to smooth the pattern metrics
between refreshes:

    value = value * (1 - alpha) + sample * alpha

alpha is per-update (not per-second): metrics refresh on a step cadence,
not on wall-clock time, so no delta-time scaling is applied.
"""

DEFAULT_ALPHA = 0.15


class SmoothedValue:
    """EMA wrapper for a single numeric value."""

    def __init__(self, initial_value=0.0, alpha=DEFAULT_ALPHA):
        """Initialize smoothed value.

        Args:
            initial_value: Starting value, also used by reset()
            alpha: Weight of each new sample in (0, 1]
        """
        if not 0.0 < alpha <= 1.0:
            raise ValueError(f"alpha must be in (0, 1], got {alpha}")
        self.initial_value = initial_value
        self.value = initial_value
        self.alpha = alpha

    def update(self, sample):
        """Blend a raw sample into the running value and return it."""
        self.value = self.value * (1.0 - self.alpha) + sample * self.alpha
        return self.value

    def get_value(self):
        return self.value

    def reset(self):
        self.value = self.initial_value

    def snap(self, value):
        """Set the running value immediately (no smoothing)."""
        self.value = value
