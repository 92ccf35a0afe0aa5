"""
Fitzhugh-Nagumo Excitable Medium

A simplification of the Hodgkin-Huxley neuron: a fast activator u and a
slow inhibitor v. Produces traveling pulses, target waves and spirals.

Equations:
  du/dt = Du * laplacian(u) + u - u^3 - v
  dv/dt = Dv * laplacian(v) + epsilon * (u - a1*v - a0)

epsilon sets the timescale separation; a0, a1 position the nullclines
(excitable, oscillatory or bistable regimes). Both channels are clamped
to [-2, 2]. The grid starts at rest (all zeros) and is excited by brush
strokes.
"""

import numpy as np
from .reaction_base import ReactionModel


class FitzhughNagumo(ReactionModel):

    model_id = "fitzhugh-nagumo"
    model_label = "Fitzhugh-Nagumo"
    clamp_range = (-2.0, 2.0)

    @classmethod
    def get_param_defs(cls):
        return [
            {"key": "epsilon", "label": "Epsilon (e)",
             "min": 0.001, "max": 0.100, "default": 0.020, "step": 0.001},
            {"key": "a0", "label": "a0",
             "min": -0.50, "max": 0.50, "default": -0.005, "step": 0.005},
            {"key": "a1", "label": "a1",
             "min": 0.10, "max": 5.00, "default": 2.00, "step": 0.10},
            {"key": "Du", "label": "Diffusion U",
             "min": 0.05, "max": 2.00, "default": 1.00, "step": 0.05},
            {"key": "Dv", "label": "Diffusion V",
             "min": 0.01, "max": 1.00, "default": 0.50, "step": 0.01},
            {"key": "dt", "label": "Timestep",
             "min": 0.01, "max": 0.50, "default": 0.10, "step": 0.01},
        ]

    def reaction(self, u, v, params):
        ru = u - u * u * u - v
        rv = params["epsilon"] * (u - params["a1"] * v - params["a0"])
        return ru, rv

    def seed(self, size, params, rng=None):
        u = np.zeros((size, size), dtype=np.float32)
        v = np.zeros((size, size), dtype=np.float32)
        return u, v

    def edit_value(self, mode, u, v, params):
        self._check_mode(mode)
        if mode == "erase":
            return 0.0, 0.0
        return 1.0, v

    def activation_threshold(self, params):
        return 0.0

    def render_range(self, params):
        return -0.5, 0.5
