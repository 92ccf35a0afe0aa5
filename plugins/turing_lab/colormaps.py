"""
Color Maps for Reaction-Diffusion Display

Maps the V channel to RGB. Each color map is a short list of evenly spaced
RGB stops (2 to 5); values are normalized with a model-dependent
(v_min, v_max) and interpolated piecewise-linearly between neighboring
stops. An optional vignette darkens the frame toward its borders.
"""

import numpy as np

DEFAULT_COLORMAP = "ocean"

COLORMAPS = {
    "monochrome": [(0, 0, 0), (255, 255, 255)],
    "thermal": [(0, 0, 0), (180, 0, 0), (255, 200, 0), (255, 255, 255)],
    "ocean": [(10, 15, 40), (0, 80, 120), (0, 180, 160), (200, 240, 230),
              (255, 255, 255)],
    "neon": [(0, 0, 0), (80, 0, 120), (180, 0, 140), (255, 50, 150),
             (255, 255, 255)],
    "earth": [(30, 20, 10), (80, 70, 30), (140, 120, 60), (200, 180, 120),
              (240, 230, 210)],
}

COLORMAP_ORDER = list(COLORMAPS.keys())


def get_colormap(name):
    """Get a color map's stops as a (n_stops, 3) float array in [0, 1]."""
    return np.asarray(COLORMAPS[name], dtype=np.float64) / 255.0


def resolve_colormap(name):
    return name if name in COLORMAPS else DEFAULT_COLORMAP


def map_colors(t, stops):
    """
    Piecewise-linear gradient lookup.

    Args:
        t: array of values in [0, 1] (clipped)
        stops: (n_stops, 3) array of colors in [0, 1], evenly spaced

    Returns:
        t.shape + (3,) float array in [0, 1]
    """
    stops = np.asarray(stops, dtype=np.float64)
    positions = np.linspace(0.0, 1.0, len(stops))
    t = np.clip(t, 0.0, 1.0)
    out = np.empty(t.shape + (3,), dtype=np.float64)
    for c in range(3):
        out[..., c] = np.interp(t, positions, stops[:, c])
    return out


def vignette(size):
    """Multiplicative border falloff, 1.0 over most of the frame."""
    uv = (np.arange(size, dtype=np.float64) + 0.5) / size
    edge = uv * (1.0 - uv)
    amount = np.outer(edge, edge) * 15.0
    return np.clip(amount ** 0.25, 0.0, 1.0)


def render(field, stops, v_min, v_max, use_vignette=True):
    """
    Render a 2D V field to an image.

    Args:
        field: (H, W) float array of V concentrations
        stops: color map stops, as returned by get_colormap
        v_min, v_max: values mapped to the first and last stop

    Returns:
        (H, W, 3) uint8 RGB image
    """
    span = v_max - v_min
    if span <= 0:
        t = np.zeros(field.shape, dtype=np.float64)
    else:
        t = (field.astype(np.float64) - v_min) / span
    rgb = map_colors(t, stops)
    if use_vignette and field.shape[0] == field.shape[1]:
        rgb *= vignette(field.shape[0])[..., np.newaxis]
    return (np.clip(rgb, 0.0, 1.0) * 255.0 + 0.5).astype(np.uint8)
