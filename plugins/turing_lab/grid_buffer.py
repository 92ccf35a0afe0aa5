"""
Ping-Pong Grid Buffer

Two equal-sized 2-channel float32 grids ("current" and "next"). Each
integration step reads only from current and writes only into next, then
swap() flips which one is current. The swap is an index flip, never a copy.

Layout: each grid is a (2, N, N) array, channel 0 = U, channel 1 = V.
"""

import numpy as np

MAX_GRID_SIZE = 4096
CHANNELS = {"U": 0, "V": 1}


class GridBuffer:

    def __init__(self):
        self.size = 0
        self._grids = [None, None]
        self._current = 0

    def allocate(self, n, u, v):
        """Create both grids at n x n and fill them with the seed planes."""
        n = int(n)
        if n <= 0 or n > MAX_GRID_SIZE:
            raise ValueError(f"Grid size must be in 1..{MAX_GRID_SIZE}, got {n}")
        self.size = n
        seed = np.empty((2, n, n), dtype=np.float32)
        seed[0] = u
        seed[1] = v
        self._grids = [seed, seed.copy()]
        self._current = 0

    def write(self, u, v):
        """Overwrite the current grid in place (reseed without reallocating)."""
        grid = self.current
        grid[0] = u
        grid[1] = v

    def swap(self):
        self._current = 1 - self._current

    @property
    def current(self):
        return self._grids[self._current]

    @property
    def next(self):
        return self._grids[1 - self._current]

    @property
    def current_u(self):
        return self.current[0]

    @property
    def current_v(self):
        return self.current[1]

    def read_channel(self, which):
        """Flat view of one channel of the current grid ("U" or "V")."""
        if which not in CHANNELS:
            raise ValueError(f"Unknown channel {which!r}, expected 'U' or 'V'")
        return self.current[CHANNELS[which]].ravel()
