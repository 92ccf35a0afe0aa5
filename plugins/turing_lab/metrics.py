"""
Pattern Metrics Extraction

Summarizes the V channel with six descriptors for the audio collaborator.
Running every step would cost a full-grid reduction per step, so the grid
is sampled down to a fixed 64x64 (nearest-neighbor at cell centers) and
the controller only calls extract() every few steps.

Descriptors (raw, per sample):
  coverage       fraction of cells with v > threshold
  delta          mean |v - v_prev| against the previous sample (0 if none)
  cluster_count  4-connected regions above threshold, capped at 100
  symmetry       left-right correlation sum(l*r) / sqrt(sum(l^2) sum(r^2))
  edge_density   interior cells whose state differs from a 4-neighbor,
                 over all sample cells
  center_of_mass |v|-weighted centroid, normalized to [0, 1)

All six are smoothed with a fixed-alpha EMA before being published.
"""

from collections import namedtuple

import numpy as np
from scipy import ndimage

from .smoothing import SmoothedValue, DEFAULT_ALPHA

SAMPLE_SIZE = 64
MAX_CLUSTERS = 100

CenterOfMass = namedtuple("CenterOfMass", ["x", "y"])

Metrics = namedtuple("Metrics", [
    "coverage", "delta", "cluster_count", "symmetry", "edge_density",
    "center_of_mass",
])

EMPTY_METRICS = Metrics(0.0, 0.0, 0, 0.0, 0.0, CenterOfMass(0.0, 0.0))

_SCALAR_FIELDS = ("coverage", "delta", "cluster_count", "symmetry", "edge_density")


def metrics_to_dict(m):
    """Plain nested dict (e.g. for JSON)."""
    d = m._asdict()
    d["center_of_mass"] = m.center_of_mass._asdict()
    return d


def downsample(field, size=SAMPLE_SIZE):
    """Nearest-neighbor reduction of a square 2D field to (size, size).

    Picks the source cell under each target cell center, so the result is
    deterministic for a given grid and needs no averaging pass.
    """
    n = field.shape[0]
    idx = ((np.arange(size) + 0.5) * n / size).astype(np.intp)
    np.clip(idx, 0, n - 1, out=idx)
    return field[np.ix_(idx, idx)].astype(np.float64)


def count_clusters(mask, cap=MAX_CLUSTERS):
    """Number of 4-connected True regions, capped at `cap`."""
    _, n = ndimage.label(mask)
    return min(int(n), cap)


def edge_fraction(mask):
    """Interior cells whose state differs from any 4-neighbor, over all cells."""
    c = mask[1:-1, 1:-1]
    edges = ((c != mask[:-2, 1:-1]) | (c != mask[2:, 1:-1]) |
             (c != mask[1:-1, :-2]) | (c != mask[1:-1, 2:]))
    return float(edges.sum()) / mask.size


def left_right_symmetry(sample):
    half = sample.shape[1] // 2
    left = sample[:, :half]
    right = sample[:, ::-1][:, :half]
    den_l = float((left * left).sum())
    den_r = float((right * right).sum())
    if den_l <= 0.0 or den_r <= 0.0:
        return 0.0
    return float((left * right).sum()) / np.sqrt(den_l * den_r)


def center_of_mass(sample):
    """Normalized |v|-weighted centroid, or None when total mass is zero."""
    w = np.abs(sample)
    total = float(w.sum())
    if total <= 0.0:
        return None
    size = sample.shape[0]
    xs = np.arange(sample.shape[1], dtype=np.float64)
    ys = np.arange(size, dtype=np.float64)
    cx = float((w.sum(axis=0) * xs).sum()) / total / size
    cy = float((w.sum(axis=1) * ys).sum()) / total / size
    return CenterOfMass(cx, cy)


def compute_raw_metrics(sample, threshold, previous_sample=None):
    """Unsmoothed descriptors of one sample.

    Returns a dict with the five scalar fields plus "center_of_mass"
    (a CenterOfMass, or None when the sample has no mass).
    """
    mask = sample > threshold
    if previous_sample is not None and previous_sample.shape == sample.shape:
        delta = float(np.abs(sample - previous_sample).mean())
    else:
        delta = 0.0
    return {
        "coverage": float(mask.mean()),
        "delta": delta,
        "cluster_count": count_clusters(mask),
        "symmetry": left_right_symmetry(sample),
        "edge_density": edge_fraction(mask),
        "center_of_mass": center_of_mass(sample),
    }


class MetricsExtractor:
    """Owns the EMA state and previous sample; borrows the grid read-only."""

    def __init__(self, alpha=DEFAULT_ALPHA, sample_size=SAMPLE_SIZE):
        self.alpha = alpha
        self.sample_size = sample_size
        self._smoothed = {key: SmoothedValue(0.0, alpha) for key in _SCALAR_FIELDS}
        self._com_x = SmoothedValue(0.0, alpha)
        self._com_y = SmoothedValue(0.0, alpha)
        self.previous_sample = None
        self.metrics = EMPTY_METRICS

    def reset(self):
        """Clear running values and the previous sample."""
        for sv in self._smoothed.values():
            sv.reset()
        self._com_x.reset()
        self._com_y.reset()
        self.previous_sample = None
        self.metrics = EMPTY_METRICS

    def extract(self, grid, model, params):
        """Sample grid.current, update the EMA state, return new Metrics."""
        sample = downsample(grid.current_v, self.sample_size)
        threshold = model.activation_threshold(params)
        raw = compute_raw_metrics(sample, threshold, self.previous_sample)

        for key in _SCALAR_FIELDS:
            self._smoothed[key].update(raw[key])
        com = raw["center_of_mass"]
        if com is not None:
            self._com_x.update(com.x)
            self._com_y.update(com.y)

        self.previous_sample = sample
        self.metrics = Metrics(
            coverage=self._smoothed["coverage"].get_value(),
            delta=self._smoothed["delta"].get_value(),
            cluster_count=int(round(self._smoothed["cluster_count"].get_value())),
            symmetry=self._smoothed["symmetry"].get_value(),
            edge_density=self._smoothed["edge_density"].get_value(),
            center_of_mass=CenterOfMass(self._com_x.get_value(), self._com_y.get_value()),
        )
        return self.metrics
