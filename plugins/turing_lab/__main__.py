"""
Turing Lab - Headless Entry Point

Usage:
    python -m turing_lab [model] [--preset NAME] [--size N] [--steps N]
                         [--speed K] [--colormap NAME] [--query QS]
                         [--snap PATH] [--list]

Examples:
    python -m turing_lab
    python -m turing_lab schnakenberg --preset zebra_stripes --steps 4000
    python -m turing_lab --query "model=gray-scott&f=0.029&k=0.057" --snap maze.png

Models:
    gray-scott       - Gray-Scott feed/kill kinetics (default)
    fitzhugh-nagumo  - Fitzhugh-Nagumo excitable medium
    schnakenberg     - Schnakenberg activator-inhibitor

Runs the simulation for the requested number of integration steps, prints
the smoothed metrics and a permalink query string, and optionally saves
the rendered frame as a PNG.

Use --list to see all available presets.
"""

import os
import sys

from .colormaps import COLORMAP_ORDER
from .controller import SimulationController
from .metrics import metrics_to_dict
from .models import MODEL_CLASSES, get_model, list_models


def snap(sim, path):
    """Save the current rendered frame as a PNG."""
    from PIL import Image

    rgb = sim.render()
    directory = os.path.dirname(os.path.abspath(path))
    os.makedirs(directory, exist_ok=True)
    Image.fromarray(rgb).save(path)
    print(f"[RD] saved: {path}")


def run(sim, steps, preset=None):
    if preset is not None:
        sim.load_preset(preset, clear=True)
    sim.play()
    frames = max(1, steps // sim.steps_per_frame)
    print(f"  {sim.model.model_label} @ {sim.grid_size}x{sim.grid_size}: "
          f"running {frames * sim.steps_per_frame} steps...", end="", flush=True)
    for _ in range(frames):
        sim.frame()
    stats = sim.stats
    print(f" done (step {stats['steps']}, "
          f"v mean {stats['v_mean']:.4f}, v max {stats['v_max']:.4f})")
    return sim.metrics


def main(argv=None):
    model_id = None
    preset = None
    size = None
    steps = 1000
    speed = None
    colormap = None
    query = None
    snap_path = None

    args = sys.argv[1:] if argv is None else list(argv)
    i = 0
    while i < len(args):
        arg = args[i]
        if arg == "--size" and i + 1 < len(args):
            size = int(args[i + 1])
            i += 2
        elif arg == "--steps" and i + 1 < len(args):
            steps = int(args[i + 1])
            i += 2
        elif arg == "--speed" and i + 1 < len(args):
            speed = int(args[i + 1])
            i += 2
        elif arg == "--preset" and i + 1 < len(args):
            preset = args[i + 1]
            i += 2
        elif arg == "--colormap" and i + 1 < len(args):
            colormap = args[i + 1]
            i += 2
        elif arg == "--query" and i + 1 < len(args):
            query = args[i + 1]
            i += 2
        elif arg == "--snap" and i + 1 < len(args):
            snap_path = args[i + 1]
            i += 2
        elif arg == "--list":
            print("\nAvailable presets:")
            for mid, label in list_models():
                print(f"\n  [{mid}] {label}")
                for key, preset in get_model(mid).presets():
                    print(f"    {key:16s} {preset['name']:16s} {preset['description']}")
            print(f"\nColor maps: {', '.join(COLORMAP_ORDER)}\n")
            return 0
        elif arg in ("--help", "-h"):
            print(__doc__)
            return 0
        elif arg in MODEL_CLASSES:
            model_id = arg
            i += 1
        else:
            print(f"Unknown argument: {arg}")
            print("Use --list to see available models and presets")
            return 2

    sim = SimulationController.from_config(query or "")
    if model_id is not None and model_id != sim.model_id:
        sim.set_model(model_id)
    if size is not None:
        sim.set_grid_size(size)
    if speed is not None:
        sim.set_steps_per_frame(speed)
    if colormap is not None:
        sim.set_colormap(colormap)

    metrics = run(sim, steps, preset=preset)

    print("\nMetrics:")
    for key, value in metrics_to_dict(metrics).items():
        print(f"  {key:16s} {value}")
    print(f"\nPermalink: ?{sim.to_config().to_query()}")

    if snap_path:
        snap(sim, snap_path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
