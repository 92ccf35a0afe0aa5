"""
Gray-Scott Reaction-Diffusion Model

Two chemical species (U, V) react and diffuse on a 2D grid:
  U + 2V -> 3V  (autocatalytic reaction)
  U is continuously fed in, V is continuously removed.

Equations:
  dU/dt = Du * laplacian(U) - U*V^2 + f*(1-U)
  dV/dt = Dv * laplacian(V) + U*V^2 - (f+k)*V

Both channels are clamped to [0, 1]. The uniform state U=1, V=0 is a
steady state, so patterns only grow from the seeded center disk or from
brush strokes.

References:
  Pearson, "Complex Patterns in a Simple System" (1993)
  Karl Sims, RD Tool (karlsims.com/rdtool.html)
"""

import numpy as np
from .reaction_base import ReactionModel


class GrayScott(ReactionModel):

    model_id = "gray-scott"
    model_label = "Gray-Scott"
    clamp_range = (0.0, 1.0)

    # Fixed activation level for coverage / cluster metrics
    THRESHOLD = 0.25

    @classmethod
    def get_param_defs(cls):
        return [
            {"key": "f", "label": "Feed rate (f)",
             "min": 0.000, "max": 0.100, "default": 0.055, "step": 0.001},
            {"key": "k", "label": "Kill rate (k)",
             "min": 0.000, "max": 0.080, "default": 0.062, "step": 0.001},
            {"key": "Du", "label": "Diffusion U",
             "min": 0.05, "max": 1.00, "default": 0.21, "step": 0.01},
            {"key": "Dv", "label": "Diffusion V",
             "min": 0.01, "max": 0.50, "default": 0.10, "step": 0.01},
            {"key": "dt", "label": "Timestep",
             "min": 0.1, "max": 2.0, "default": 1.0, "step": 0.1},
        ]

    def reaction(self, u, v, params):
        f = params["f"]
        k = params["k"]
        uvv = u * v * v
        return -uvv + f * (1.0 - u), uvv - (f + k) * v

    @staticmethod
    def seed_radius(size):
        return max(4, size / 20)

    def seed(self, size, params, rng=None):
        """U=1, V=0 everywhere, with a filled disk (U=0.5, V=0.25) at center."""
        u = np.ones((size, size), dtype=np.float32)
        v = np.zeros((size, size), dtype=np.float32)
        r = self.seed_radius(size)
        center = size / 2
        Y, X = np.ogrid[:size, :size]
        disk = (X - center) ** 2 + (Y - center) ** 2 < r * r
        u[disk] = 0.5
        v[disk] = 0.25
        return u, v

    def edit_value(self, mode, u, v, params):
        self._check_mode(mode)
        if mode == "erase":
            return 1.0, 0.0
        return u, 1.0

    def equilibrium(self, params):
        return 1.0, 0.0

    def activation_threshold(self, params):
        return self.THRESHOLD

    def render_range(self, params):
        return 0.0, 1.0
