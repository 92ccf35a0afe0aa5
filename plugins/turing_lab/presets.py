"""
Reaction-Diffusion Parameter Presets

Each preset names a model and a partial parameter override known to produce
a recognisable pattern. Loading a preset only overwrites the keys it lists;
diffusion rates and timestep stay at their current values unless included.

Presets are listed per model in display order (PRESET_ORDERS), which is also
the order used for index-based selection (number keys 1-9 in a UI).
"""

# Keys that describe a preset rather than a model parameter
META_KEYS = ("model", "name", "description")

PRESETS = {
    # =====================================================================
    # GRAY-SCOTT
    # =====================================================================
    "turing_pattern": {
        "model": "gray-scott",
        "name": "Turing Pattern",
        "description": "Classic Turing pattern - self-replicating spots.",
        "f": 0.028, "k": 0.062,
    },
    "coral": {
        "model": "gray-scott",
        "name": "Coral",
        "description": "Branching, coral-like growth.",
        "f": 0.062, "k": 0.063,
    },
    "worms": {
        "model": "gray-scott",
        "name": "Worms",
        "description": "Writhing, worm-like stripes.",
        "f": 0.078, "k": 0.061,
    },
    "maze": {
        "model": "gray-scott",
        "name": "Maze",
        "description": "Dense labyrinthine patterns.",
        "f": 0.029, "k": 0.057,
    },
    "holes": {
        "model": "gray-scott",
        "name": "Holes",
        "description": "Negative-space spots.",
        "f": 0.039, "k": 0.058,
    },
    "chaos": {
        "model": "gray-scott",
        "name": "Chaos",
        "description": "Unstable, constantly shifting.",
        "f": 0.026, "k": 0.051,
    },
    "ripple": {
        "model": "gray-scott",
        "name": "Ripple",
        "description": "Concentric expanding rings.",
        "f": 0.014, "k": 0.045,
    },
    "spots": {
        "model": "gray-scott",
        "name": "Spots",
        "description": "Stable Turing spots (leopard-print).",
        "f": 0.030, "k": 0.062,
    },
    "stripes": {
        "model": "gray-scott",
        "name": "Stripes",
        "description": "Parallel stripe formation.",
        "f": 0.042, "k": 0.059,
    },

    # =====================================================================
    # FITZHUGH-NAGUMO
    # =====================================================================
    "spirals": {
        "model": "fitzhugh-nagumo",
        "name": "Spirals",
        "description": "Classic rotating spiral waves.",
        "epsilon": 0.020, "a0": -0.005, "a1": 2.00,
    },
    "target_waves": {
        "model": "fitzhugh-nagumo",
        "name": "Target Waves",
        "description": "Concentric rings from excitation points.",
        "epsilon": 0.020, "a0": 0.100, "a1": 2.00,
    },
    "turbulence": {
        "model": "fitzhugh-nagumo",
        "name": "Turbulence",
        "description": "Chaotic spiral breakup.",
        "epsilon": 0.010, "a0": -0.100, "a1": 1.50,
    },
    "slow_pulse": {
        "model": "fitzhugh-nagumo",
        "name": "Slow Pulse",
        "description": "Slow, wide traveling pulses.",
        "epsilon": 0.050, "a0": 0.000, "a1": 3.00,
    },
    "fast_excitable": {
        "model": "fitzhugh-nagumo",
        "name": "Fast Excitable",
        "description": "Rapid, thin wave fronts.",
        "epsilon": 0.005, "a0": 0.050, "a1": 2.50,
    },

    # =====================================================================
    # SCHNAKENBERG
    # =====================================================================
    "hex_spots": {
        "model": "schnakenberg",
        "name": "Hex Spots",
        "description": "Hexagonal array of spots.",
        "a": 0.10, "b": 0.90, "gamma": 200,
    },
    "zebra_stripes": {
        "model": "schnakenberg",
        "name": "Zebra Stripes",
        "description": "Regular parallel stripes.",
        "a": 0.05, "b": 0.90, "gamma": 500,
    },
    "mixed": {
        "model": "schnakenberg",
        "name": "Mixed",
        "description": "Spots transitioning to stripes.",
        "a": 0.08, "b": 1.00, "gamma": 300,
    },
    "dense_dots": {
        "model": "schnakenberg",
        "name": "Dense Dots",
        "description": "Tightly packed small spots.",
        "a": 0.12, "b": 0.80, "gamma": 800,
    },
    "wide_bands": {
        "model": "schnakenberg",
        "name": "Wide Bands",
        "description": "Broad, widely spaced stripes.",
        "a": 0.04, "b": 1.20, "gamma": 150,
    },
}

MODEL_ORDER = ["gray-scott", "fitzhugh-nagumo", "schnakenberg"]

PRESET_ORDERS = {
    model_id: [key for key, p in PRESETS.items() if p["model"] == model_id]
    for model_id in MODEL_ORDER
}

# First preset of each model is the one shown at startup
DEFAULT_PRESETS = {model_id: keys[0] for model_id, keys in PRESET_ORDERS.items()}


def get_presets_for_model(model_id):
    """Ordered list of (key, preset) for one model."""
    return [(key, PRESETS[key]) for key in PRESET_ORDERS.get(model_id, [])]


def find_preset(model_id, ref):
    """Resolve a preset reference for a model.

    `ref` may be a preset key ("turing_pattern"), a display name
    ("Turing Pattern", as stored in permalinks) or a 0-based index.
    Returns (key, preset) or (None, None).
    """
    entries = get_presets_for_model(model_id)
    if isinstance(ref, int):
        if 0 <= ref < len(entries):
            return entries[ref]
        return None, None
    for key, preset in entries:
        if ref == key or ref == preset["name"]:
            return key, preset
    return None, None


def preset_overrides(preset):
    """Only the parameter entries of a preset (drops name/description/model)."""
    return {k: v for k, v in preset.items() if k not in META_KEYS}
