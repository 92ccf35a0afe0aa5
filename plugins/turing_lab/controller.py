"""
SimulationController - Headless reaction-diffusion core

Owns all mutable simulation state (ping-pong grids, live parameters, step
counter, metrics EMA) and orchestrates model switches, grid resizes, preset
loads, brush strokes and the per-frame stepping cadence. Rendering and
audio live outside: they read snapshots and Metrics published here.

State machine:
    UNINITIALIZED -> SEEDED -> RUNNING <-> PAUSED
    set_model / set_grid_size / reset return to SEEDED, even from RUNNING.
    clear() and load_preset(clear=True) reseed but keep the play state.

Usage:
    from turing_lab.controller import SimulationController
    sim = SimulationController(model_id="gray-scott", grid_size=256)
    sim.play()
    rgb = sim.frame()             # (N, N, 3) uint8
    print(sim.metrics.coverage)
"""

import enum

import numpy as np

from .brush import BrushState
from .colormaps import get_colormap, render, resolve_colormap, DEFAULT_COLORMAP
from .config import (
    DEFAULT_GRID_SIZE, DEFAULT_STEPS_PER_FRAME, GRID_SIZES, LabConfig,
    MAX_STEPS_PER_FRAME, MIN_STEPS_PER_FRAME, warn,
)
from .grid_buffer import GridBuffer
from .integrator import Integrator
from .metrics import MetricsExtractor
from .models import DEFAULT_MODEL, get_model, resolve_model_id
from .presets import DEFAULT_PRESETS, PRESETS, find_preset, preset_overrides
from .smoothing import DEFAULT_ALPHA

METRICS_PERIOD = 8


class SimState(str, enum.Enum):
    UNINITIALIZED = "uninitialized"
    SEEDED = "seeded"
    RUNNING = "running"
    PAUSED = "paused"


class SimulationController:
    """Single-threaded simulation instance.

    Args:
        model_id: Initial model id (unknown ids fall back to gray-scott)
        grid_size: Grid resolution, one of `supported_sizes`
        steps_per_frame: Integration steps per frame() call
        colormap: Color map name for render()
        metrics_period: Extract metrics every this many integration steps
        metrics_alpha: EMA weight of each new metrics sample
        supported_sizes: Grid sizes the display backend can handle
        rng: numpy Generator used for seeding noise
    """

    def __init__(self, model_id=DEFAULT_MODEL, grid_size=DEFAULT_GRID_SIZE,
                 steps_per_frame=DEFAULT_STEPS_PER_FRAME, colormap=DEFAULT_COLORMAP,
                 metrics_period=METRICS_PERIOD, metrics_alpha=DEFAULT_ALPHA,
                 supported_sizes=GRID_SIZES, rng=None):
        self.state = SimState.UNINITIALIZED
        self.supported_sizes = tuple(supported_sizes)
        self.metrics_period = int(metrics_period)
        self.rng = rng if rng is not None else np.random.default_rng()

        self.grid = GridBuffer()
        self.integrator = Integrator()
        self.extractor = MetricsExtractor(alpha=metrics_alpha)
        self.brush = BrushState.inactive()

        self.steps_per_frame = DEFAULT_STEPS_PER_FRAME
        self.set_steps_per_frame(steps_per_frame)
        self.colormap = resolve_colormap(colormap)
        self.step_count = 0
        self.resize_rejected = False
        self._listeners = []

        self.model_id = resolve_model_id(model_id)
        if self.model_id != model_id:
            warn(f"Unknown model {model_id!r}, using {self.model_id!r}")
        self.params = get_model(self.model_id).default_params()
        self.preset_name = PRESETS[DEFAULT_PRESETS[self.model_id]]["name"]

        if grid_size not in self.supported_sizes:
            warn(f"Unsupported grid size {grid_size!r}, using {DEFAULT_GRID_SIZE}")
            grid_size = DEFAULT_GRID_SIZE
        self.grid_size = grid_size
        self._reseed()

    # -----------------------------------------------------------------------
    # Construction from / export to configuration
    # -----------------------------------------------------------------------

    @classmethod
    def from_config(cls, config, **kwargs):
        """Build a controller from a LabConfig, a flat mapping or a query string."""
        if isinstance(config, str):
            config = LabConfig.from_query(config)
        elif not isinstance(config, LabConfig):
            config = LabConfig.from_mapping(config)
        sim = cls(model_id=config.model, grid_size=config.grid,
                  steps_per_frame=config.speed, colormap=config.colormap, **kwargs)
        sim.params.update(config.params)
        sim.preset_name = config.preset
        # Seed depends on params for some models (Schnakenberg equilibrium)
        sim._reseed()
        return sim

    def to_config(self):
        return LabConfig(
            model=self.model_id, grid=self.grid_size, speed=self.steps_per_frame,
            colormap=self.colormap, preset=self.preset_name, params=dict(self.params),
        )

    # -----------------------------------------------------------------------
    # Public API
    # -----------------------------------------------------------------------

    @property
    def model(self):
        return get_model(self.model_id)

    @property
    def running(self):
        return self.state == SimState.RUNNING

    def set_model(self, model_id):
        """Switch model: reload defaults, reseed, clear metrics.

        Always returns to SEEDED, also from RUNNING: frame() does not advance
        the new model until play() is called again.
        """
        resolved = resolve_model_id(model_id)
        if resolved != model_id:
            warn(f"Unknown model {model_id!r}, using {resolved!r}")
        self.model_id = resolved
        self.params = self.model.default_params()
        self.preset_name = PRESETS[DEFAULT_PRESETS[resolved]]["name"]
        self._reseed()

    def set_grid_size(self, size):
        """Resize and reseed. Unsupported sizes are rejected.

        Returns True if the grid was resized, which leaves the sim SEEDED
        (call play() to resume). On rejection the previous grid and play
        state are kept untouched and `resize_rejected` is set.
        """
        try:
            size = int(size)
        except (TypeError, ValueError):
            size = None
        if size not in self.supported_sizes:
            warn(f"Grid size {size!r} not supported, keeping {self.grid_size}")
            self.resize_rejected = True
            return False
        self.resize_rejected = False
        self.grid_size = size
        self._reseed()
        return True

    def set_steps_per_frame(self, steps):
        try:
            steps = int(steps)
        except (TypeError, ValueError):
            warn(f"Ignoring non-numeric speed {steps!r}, keeping {self.steps_per_frame}")
            return self.steps_per_frame
        self.steps_per_frame = min(MAX_STEPS_PER_FRAME, max(MIN_STEPS_PER_FRAME, steps))
        return self.steps_per_frame

    def set_colormap(self, name):
        resolved = resolve_colormap(name)
        if resolved != name:
            warn(f"Unknown color map {name!r}, using {resolved!r}")
        self.colormap = resolved

    def set_param(self, key, value):
        """Set one parameter, clamped to its range. Unknown keys are ignored."""
        try:
            clamped = self.model.clamp_param(key, value)
        except (TypeError, ValueError):
            warn(f"Ignoring non-numeric value {value!r} for {key!r}")
            return None
        if clamped is None:
            warn(f"{self.model.model_label} has no parameter {key!r}")
            return None
        self.params[key] = clamped
        return clamped

    def set_runtime_params(self, **kwargs):
        """Apply several settings at once (param ids, or speed/colormap)."""
        for key, val in kwargs.items():
            if key == "speed":
                self.set_steps_per_frame(val)
            elif key == "colormap":
                self.set_colormap(val)
            else:
                self.set_param(key, val)

    def load_preset(self, ref, clear=False):
        """Load a preset of the current model by key, name or index.

        Only the parameters the preset lists are overwritten. With
        clear=True the grid is reseeded as well, keeping the play state
        like clear(). Returns the preset key, or None if the preset does
        not exist for this model.
        """
        key, preset = find_preset(self.model_id, ref)
        if preset is None:
            warn(f"No preset {ref!r} for {self.model.model_label}")
            return None
        for pkey, value in preset_overrides(preset).items():
            self.set_param(pkey, value)
        self.preset_name = preset["name"]
        if clear:
            self.clear()
        return key

    def reset(self):
        """Reseed with the current model and params; back to SEEDED."""
        self._reseed()

    def clear(self):
        """Reseed without changing the play state."""
        was_running = self.running
        self._reseed()
        if was_running:
            self.state = SimState.RUNNING

    def play(self):
        self.state = SimState.RUNNING

    def pause(self):
        if self.state != SimState.UNINITIALIZED:
            self.state = SimState.PAUSED

    def toggle(self):
        if self.running:
            self.pause()
        else:
            self.play()

    def apply_brush(self, active, position=(0.0, 0.0), radius=10, mode="seed"):
        """Set this frame's brush (cleared again at the end of frame())."""
        self.brush = BrushState(active=active, position=position, radius=radius, mode=mode)

    def step_once(self):
        """Manual single step: pauses if running, never starts running."""
        if self.running:
            self.pause()
        self._advance()
        if self.state == SimState.SEEDED:
            # A manual step keeps the simulation stopped
            self.state = SimState.PAUSED
        return self.metrics

    def frame(self):
        """One animation frame: K steps if running, then render.

        Metrics refresh on every metrics_period-th integration step, so the
        extraction cost does not depend on steps_per_frame.
        Returns the rendered (N, N, 3) uint8 image.
        """
        if self.running:
            for _ in range(self.steps_per_frame):
                self._advance()
        self.brush = BrushState.inactive()
        return self.render()

    # -----------------------------------------------------------------------
    # Outputs
    # -----------------------------------------------------------------------

    @property
    def metrics(self):
        return self.extractor.metrics

    def add_metrics_listener(self, callback):
        """Register callback(metrics) invoked after each metrics refresh."""
        self._listeners.append(callback)

    def remove_metrics_listener(self, callback):
        self._listeners.remove(callback)

    def snapshot_v(self):
        """Copy of the current V channel (N, N)."""
        return self.grid.current_v.copy()

    def snapshot_u(self):
        return self.grid.current_u.copy()

    def render(self, use_vignette=True):
        v_min, v_max = self.model.render_range(self.params)
        return render(self.grid.current_v, get_colormap(self.colormap),
                      v_min, v_max, use_vignette=use_vignette)

    @property
    def stats(self):
        """Return current simulation statistics."""
        v = self.grid.current_v
        return {
            "model": self.model_id,
            "state": self.state.value,
            "grid": self.grid_size,
            "steps": self.step_count,
            "v_mean": float(v.mean()),
            "v_max": float(v.max()),
        }

    # -----------------------------------------------------------------------
    # Internals
    # -----------------------------------------------------------------------

    def _reseed(self):
        u, v = self.model.seed(self.grid_size, self.params, rng=self.rng)
        if self.grid.size == self.grid_size:
            self.grid.write(u, v)
        else:
            self.grid.allocate(self.grid_size, u, v)
        self.step_count = 0
        self.extractor.reset()
        self.state = SimState.SEEDED

    def _advance(self):
        self.integrator.step(self.grid, self.model, self.params, self.brush)
        self.step_count += 1
        if self.step_count % self.metrics_period == 0:
            self._refresh_metrics()

    def _refresh_metrics(self):
        metrics = self.extractor.extract(self.grid, self.model, self.params)
        for callback in list(self._listeners):
            try:
                callback(metrics)
            except Exception as e:
                print(f"[RD] Metrics listener error: {e}")
        return metrics
