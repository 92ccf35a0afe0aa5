"""
Schnakenberg Activator-Inhibitor Model

Simpler kinetics than Gray-Scott; produces clean spots, stripes and mixed
patterns with regular spacing.

Equations:
  du/dt = Du * laplacian(u) + gamma * (a - u + u^2 v)
  dv/dt = Dv * laplacian(v) + gamma * (b - u^2 v)

Uniform equilibrium: u_eq = a + b, v_eq = b / u_eq^2. The grid is seeded at
equilibrium plus a little uniform noise; the diffusion-driven instability
grows the pattern from that noise. Both channels are clamped to [0, 10].
"""

import numpy as np
from .reaction_base import ReactionModel

SEED_NOISE = 0.005


class Schnakenberg(ReactionModel):

    model_id = "schnakenberg"
    model_label = "Schnakenberg"
    clamp_range = (0.0, 10.0)

    @classmethod
    def get_param_defs(cls):
        return [
            {"key": "a", "label": "a",
             "min": 0.01, "max": 0.50, "default": 0.10, "step": 0.01},
            {"key": "b", "label": "b",
             "min": 0.50, "max": 2.00, "default": 0.90, "step": 0.01},
            {"key": "gamma", "label": "Gamma (g)",
             "min": 10, "max": 1000, "default": 200, "step": 10},
            {"key": "Du", "label": "Diffusion U",
             "min": 0.05, "max": 2.00, "default": 1.00, "step": 0.05},
            {"key": "Dv", "label": "Diffusion V",
             "min": 5.0, "max": 100.0, "default": 40.0, "step": 1.0},
            {"key": "dt", "label": "Timestep",
             "min": 0.0001, "max": 0.01, "default": 0.001, "step": 0.0001},
        ]

    def reaction(self, u, v, params):
        gamma = params["gamma"]
        u2v = u * u * v
        return gamma * (params["a"] - u + u2v), gamma * (params["b"] - u2v)

    def equilibrium(self, params):
        u_eq = params["a"] + params["b"]
        return u_eq, params["b"] / (u_eq * u_eq)

    def seed(self, size, params, rng=None):
        if rng is None:
            rng = np.random.default_rng()
        u_eq, v_eq = self.equilibrium(params)
        noise = rng.uniform(-SEED_NOISE, SEED_NOISE, size=(2, size, size))
        u = (u_eq + noise[0]).astype(np.float32)
        v = (v_eq + noise[1]).astype(np.float32)
        return u, v

    def edit_value(self, mode, u, v, params):
        self._check_mode(mode)
        if mode == "erase":
            return self.equilibrium(params)
        return u + 0.5, v

    def activation_threshold(self, params):
        return 1.2 * self.equilibrium(params)[1]

    def render_range(self, params):
        return 0.0, 2.0 * self.equilibrium(params)[1]
