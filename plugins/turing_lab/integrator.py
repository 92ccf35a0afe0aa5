"""
Integrator: advance the whole grid by one timestep.

Reads only grid.current, writes only grid.next, then swaps. Every cell of
next is a function of current alone, so the update is one vectorized pass
with no ordering between cells.
"""

import numpy as np

from .reaction_base import laplacian


class Integrator:

    def __init__(self):
        self._size = 0

    def _ensure_buffers(self, size):
        """(Re)allocate work buffers when the grid size changes."""
        if size == self._size:
            return
        self._size = size
        self._padded = np.zeros((size + 2, size + 2), dtype=np.float32)
        self._lap_u = np.empty((size, size), dtype=np.float32)
        self._lap_v = np.empty((size, size), dtype=np.float32)
        self._tmp = np.empty((size, size), dtype=np.float32)

    def laplacians(self, grid):
        """Laplacian of both channels of grid.current (work-buffer views)."""
        self._ensure_buffers(grid.size)
        cur = grid.current
        laplacian(cur[0], self._lap_u, self._padded, self._tmp)
        laplacian(cur[1], self._lap_v, self._padded, self._tmp)
        return self._lap_u, self._lap_v

    def step(self, grid, model, params, brush=None):
        """One timestep of `model` over `grid`, with optional brush overlay."""
        lap_u, lap_v = self.laplacians(grid)
        cur = grid.current
        new_u, new_v = model.step(cur[0], cur[1], lap_u, lap_v, params, params["dt"])

        mask = brush.mask(grid.size) if brush is not None else None
        if mask is not None and mask.any():
            eu, ev = model.edit_value(brush.mode, new_u[mask], new_v[mask], params)
            new_u[mask] = eu
            new_v[mask] = ev
            new_u, new_v = model.clamp(new_u, new_v)

        nxt = grid.next
        nxt[0] = new_u
        nxt[1] = new_v
        grid.swap()
