"""
Abstract Base Class for Reaction-Diffusion Models

Every model (Gray-Scott, Fitzhugh-Nagumo, Schnakenberg) implements this
interface so the integrator, metrics extractor and controller can work with
any of them interchangeably. Models are stateless descriptors: all mutable
state (grids, parameters) lives on the SimulationController.

Shared diffusion operator: a weighted 9-point Laplacian on a torus.
  center -1.0, cardinal 0.2 each, diagonal 0.05 each (weights sum to 0)
"""

from abc import ABC, abstractmethod
import numpy as np

from .presets import get_presets_for_model

LAPLACIAN_CENTER = -1.0
LAPLACIAN_CARDINAL = 0.2
LAPLACIAN_DIAGONAL = 0.05

BRUSH_MODES = ("seed", "erase")


def laplacian_kernel():
    """The 3x3 stencil as an array (for inspection and tests)."""
    d, c = LAPLACIAN_DIAGONAL, LAPLACIAN_CARDINAL
    return np.array([
        [d, c, d],
        [c, LAPLACIAN_CENTER, c],
        [d, c, d],
    ], dtype=np.float64)


def laplacian(field, out, padded, tmp):
    """Toroidal 9-point laplacian of a 2D field into `out`.

    Uses pad+slice (one wrapped copy into `padded`) instead of 8 np.roll
    calls. `padded` must be (N+2, N+2), `out` and `tmp` (N, N).
    """
    p = padded
    p[1:-1, 1:-1] = field
    p[0, 1:-1] = field[-1, :]
    p[-1, 1:-1] = field[0, :]
    p[1:-1, 0] = field[:, -1]
    p[1:-1, -1] = field[:, 0]
    p[0, 0] = field[-1, -1]
    p[0, -1] = field[-1, 0]
    p[-1, 0] = field[0, -1]
    p[-1, -1] = field[0, 0]

    np.add(p[:-2, 1:-1], p[2:, 1:-1], out=out)
    out += p[1:-1, :-2]
    out += p[1:-1, 2:]
    out *= LAPLACIAN_CARDINAL
    np.add(p[:-2, :-2], p[:-2, 2:], out=tmp)
    tmp += p[2:, :-2]
    tmp += p[2:, 2:]
    tmp *= LAPLACIAN_DIAGONAL
    out += tmp
    out -= field
    return out


class ReactionModel(ABC):
    """Base class for two-species reaction-diffusion models."""

    model_id = ""      # e.g. "gray-scott"
    model_label = ""   # e.g. "Gray-Scott"
    clamp_range = (0.0, 1.0)

    # ------------------------------------------------------------------
    # Parameter schema
    # ------------------------------------------------------------------

    @classmethod
    @abstractmethod
    def get_param_defs(cls):
        """Return the ordered list of parameter definitions.

        Each entry is a dict:
            {"key": "f", "label": "Feed rate (f)",
             "min": 0.0, "max": 0.1, "default": 0.055, "step": 0.001}
        """

    @classmethod
    def param_keys(cls):
        return [pdef["key"] for pdef in cls.get_param_defs()]

    @classmethod
    def default_params(cls):
        return {pdef["key"]: float(pdef["default"]) for pdef in cls.get_param_defs()}

    @classmethod
    def clamp_param(cls, key, value):
        """Clamp one value to its declared [min, max]. Unknown keys -> None."""
        for pdef in cls.get_param_defs():
            if pdef["key"] == key:
                return float(min(pdef["max"], max(pdef["min"], float(value))))
        return None

    @classmethod
    def presets(cls):
        return get_presets_for_model(cls.model_id)

    # ------------------------------------------------------------------
    # Kinetics
    # ------------------------------------------------------------------

    @abstractmethod
    def reaction(self, u, v, params):
        """Return the local reaction terms (rU, rV) without diffusion."""

    def step(self, u, v, lap_u, lap_v, params, dt):
        """Advance cells by one explicit Euler step.

        Pure: new arrays are returned, inputs are never written. Each output
        cell depends only on the same cell of the inputs.
        """
        ru, rv = self.reaction(u, v, params)
        new_u = u + (params["Du"] * lap_u + ru) * dt
        new_v = v + (params["Dv"] * lap_v + rv) * dt
        return self.clamp(new_u, new_v)

    def clamp(self, u, v):
        lo, hi = self.clamp_range
        return np.clip(u, lo, hi), np.clip(v, lo, hi)

    # ------------------------------------------------------------------
    # Seeding and brush
    # ------------------------------------------------------------------

    @abstractmethod
    def seed(self, size, params, rng=None):
        """Return the initial (U, V) planes as (size, size) float32 arrays."""

    @abstractmethod
    def edit_value(self, mode, u, v, params):
        """Brush substitution for the cells under the brush.

        Args:
            mode: "seed" or "erase"
            u, v: current values of the affected cells (already stepped)
        Returns:
            (U, V) replacement values, broadcastable to u and v
        """

    # ------------------------------------------------------------------
    # Analysis / display hooks
    # ------------------------------------------------------------------

    def equilibrium(self, params):
        """Uniform steady state (U, V), or None if the model has none."""
        return None

    @abstractmethod
    def activation_threshold(self, params):
        """V level above which a cell counts as patterned."""

    @abstractmethod
    def render_range(self, params):
        """(v_min, v_max) used to normalize V for display."""

    @staticmethod
    def _check_mode(mode):
        if mode not in BRUSH_MODES:
            raise ValueError(f"Unknown brush mode {mode!r}, expected one of {BRUSH_MODES}")
