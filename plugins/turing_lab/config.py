"""
Lab Configuration (query-string shaped)

A flat mapping of string keys, loadable from a URL query string and
serializable back to the same shape for shareable links:

    model     model id ("gray-scott", "fitzhugh-nagumo", "schnakenberg")
    grid      grid size
    speed     integration steps per frame
    colormap  color map name
    preset    preset display name
    <param>   one entry per parameter of the active model ("f", "k", ...)

External input never raises: unknown models fall back to the default,
unknown color maps to "ocean", and parameter values are clamped to their
declared range (non-numeric values fall back to the default).
"""

from urllib.parse import parse_qsl, urlencode

from pydantic import BaseModel, Field, field_validator, model_validator

from .colormaps import COLORMAPS, DEFAULT_COLORMAP
from .models import DEFAULT_MODEL, MODEL_CLASSES, get_model
from .presets import DEFAULT_PRESETS, PRESETS

GRID_SIZES = (64, 128, 256, 512)
DEFAULT_GRID_SIZE = 256
MIN_STEPS_PER_FRAME = 1
MAX_STEPS_PER_FRAME = 64
DEFAULT_STEPS_PER_FRAME = 16

BASE_KEYS = ("model", "grid", "speed", "colormap", "preset")


def warn(msg):
    print(f"[RD] {msg}")


def _as_int(value, default):
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return default


class LabConfig(BaseModel):
    """Startup configuration for one simulation instance."""

    model: str = Field(
        default=DEFAULT_MODEL,
        description="Reaction-diffusion model id",
    )
    grid: int = Field(
        default=DEFAULT_GRID_SIZE,
        description="Simulation grid resolution",
    )
    speed: int = Field(
        default=DEFAULT_STEPS_PER_FRAME,
        ge=MIN_STEPS_PER_FRAME, le=MAX_STEPS_PER_FRAME,
        description="Integration steps per animation frame",
    )
    colormap: str = Field(
        default=DEFAULT_COLORMAP,
        description="Color map used for display",
    )
    preset: str = Field(
        default=PRESETS[DEFAULT_PRESETS[DEFAULT_MODEL]]["name"],
        description="Display name of the last loaded preset",
    )
    params: dict[str, float] = Field(
        default_factory=dict,
        description="Model parameters, keyed by parameter id",
    )

    @field_validator("model", mode="before")
    @classmethod
    def _known_model(cls, value):
        if value not in MODEL_CLASSES:
            warn(f"Unknown model {value!r}, using {DEFAULT_MODEL!r}")
            return DEFAULT_MODEL
        return value

    @field_validator("grid", mode="before")
    @classmethod
    def _grid_int(cls, value):
        size = _as_int(value, DEFAULT_GRID_SIZE)
        if size <= 0:
            warn(f"Invalid grid size {value!r}, using {DEFAULT_GRID_SIZE}")
            return DEFAULT_GRID_SIZE
        return size

    @field_validator("speed", mode="before")
    @classmethod
    def _clamp_speed(cls, value):
        steps = _as_int(value, DEFAULT_STEPS_PER_FRAME)
        return min(MAX_STEPS_PER_FRAME, max(MIN_STEPS_PER_FRAME, steps))

    @field_validator("colormap", mode="before")
    @classmethod
    def _known_colormap(cls, value):
        if value not in COLORMAPS:
            warn(f"Unknown color map {value!r}, using {DEFAULT_COLORMAP!r}")
            return DEFAULT_COLORMAP
        return value

    @field_validator("params", mode="before")
    @classmethod
    def _numeric_params(cls, value):
        # Drop non-numeric entries here; defaults fill them in below
        clean = {}
        for key, raw in dict(value or {}).items():
            try:
                clean[key] = float(raw)
            except (TypeError, ValueError):
                warn(f"Ignoring non-numeric value {raw!r} for {key!r}")
        return clean

    @model_validator(mode="after")
    def _complete_params(self):
        """Fill every parameter of the model, clamped; drop foreign keys."""
        model = get_model(self.model)
        full = model.default_params()
        for key, value in self.params.items():
            clamped = model.clamp_param(key, value)
            if clamped is None:
                continue
            if clamped != value:
                warn(f"{key}={value} out of range, clamped to {clamped}")
            full[key] = clamped
        self.params = full
        return self

    # ------------------------------------------------------------------
    # Flat mapping / query string
    # ------------------------------------------------------------------

    @classmethod
    def from_mapping(cls, mapping):
        """Build from a flat string mapping (e.g. parsed query string)."""
        mapping = dict(mapping)
        kwargs = {k: mapping[k] for k in BASE_KEYS if k in mapping}
        model_id = kwargs.get("model", DEFAULT_MODEL)
        if model_id not in MODEL_CLASSES:
            model_id = DEFAULT_MODEL
        keys = MODEL_CLASSES[model_id].param_keys()
        kwargs["params"] = {k: mapping[k] for k in keys if k in mapping}
        if "preset" not in mapping:
            kwargs["preset"] = PRESETS[DEFAULT_PRESETS[model_id]]["name"]
        return cls(**kwargs)

    @classmethod
    def from_query(cls, query):
        """Build from a query string ("?model=gray-scott&f=0.03" or without ?)."""
        if query.startswith("?"):
            query = query[1:]
        return cls.from_mapping(parse_qsl(query, keep_blank_values=False))

    def to_mapping(self):
        """Flat str -> str mapping with the same key set from_mapping reads."""
        out = {
            "model": self.model,
            "preset": self.preset,
            "colormap": self.colormap,
            "grid": str(self.grid),
            "speed": str(self.speed),
        }
        for key, value in self.params.items():
            out[key] = repr(float(value))
        return out

    def to_query(self):
        return urlencode(self.to_mapping())
