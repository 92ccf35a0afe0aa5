"""
Brush state for interactive editing.

One brush event per frame from the pointer collaborator:
    active    - pointer pressed
    position  - (x, y) normalized to [0, 1] x [0, 1]
    radius    - in grid cells
    mode      - "seed" paints pattern, "erase" restores the resting state
"""

import numpy as np

from .reaction_base import BRUSH_MODES

MIN_RADIUS = 1
MAX_RADIUS = 50
DEFAULT_RADIUS = 10


class BrushState:

    def __init__(self, active=False, position=(0.0, 0.0), radius=DEFAULT_RADIUS,
                 mode="seed"):
        if mode not in BRUSH_MODES:
            raise ValueError(f"Unknown brush mode {mode!r}, expected one of {BRUSH_MODES}")
        x, y = position
        self.active = bool(active)
        self.position = (min(1.0, max(0.0, float(x))), min(1.0, max(0.0, float(y))))
        self.radius = float(min(MAX_RADIUS, max(MIN_RADIUS, radius)))
        self.mode = mode

    @classmethod
    def inactive(cls):
        return cls(active=False)

    def mask(self, size):
        """Boolean (size, size) mask of cells strictly inside the brush.

        Distance is measured in normalized grid space between cell centers
        and the brush position, compared against radius / size. No wrap.
        """
        if not self.active:
            return None
        coords = (np.arange(size, dtype=np.float64) + 0.5) / size
        bx, by = self.position
        dist_sq = (coords[np.newaxis, :] - bx) ** 2 + (coords[:, np.newaxis] - by) ** 2
        r = self.radius / size
        return dist_sq < r * r

    def __repr__(self):
        return (f"BrushState(active={self.active}, position={self.position}, "
                f"radius={self.radius}, mode={self.mode!r})")
