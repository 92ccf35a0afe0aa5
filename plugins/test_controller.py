#!/usr/bin/env python3
"""
Tests for SimulationController orchestration.

Verifies:
1. State machine transitions (seed, play, pause, manual step, reset)
2. Model switch and grid resize semantics
3. Preset loading, brush lifetime and metrics cadence
4. Configuration round-trip and the Turing Pattern scenario
"""

import numpy as np

from turing_lab.config import LabConfig
from turing_lab.controller import SimState, SimulationController
from turing_lab.gray_scott import GrayScott
from turing_lab.metrics import EMPTY_METRICS, compute_raw_metrics, downsample


def _sim(**kwargs):
    kwargs.setdefault("grid_size", 64)
    kwargs.setdefault("rng", np.random.default_rng(0))
    return SimulationController(**kwargs)


def test_state_machine():
    print("Testing state machine...")
    sim = _sim(steps_per_frame=4)
    assert sim.state == SimState.SEEDED
    assert sim.params == GrayScott.default_params()

    sim.frame()
    assert sim.step_count == 0, "SEEDED does not advance on frame()"

    sim.play()
    sim.frame()
    assert sim.state == SimState.RUNNING and sim.step_count == 4

    sim.pause()
    sim.frame()
    assert sim.state == SimState.PAUSED and sim.step_count == 4

    sim.step_once()
    assert sim.state == SimState.PAUSED and sim.step_count == 5

    sim.play()
    sim.step_once()
    assert sim.state == SimState.PAUSED, "Manual step pauses a running sim"

    sim.reset()
    assert sim.state == SimState.SEEDED and sim.step_count == 0

    sim.play()
    sim.frame()
    sim.clear()
    assert sim.state == SimState.RUNNING and sim.step_count == 0

    sim.toggle()
    assert sim.state == SimState.PAUSED
    print("  ✓ Transitions follow SEEDED -> RUNNING <-> PAUSED")


def test_manual_step_from_seeded_never_runs():
    print("Testing manual step from SEEDED...")
    sim = _sim()
    sim.step_once()
    assert sim.state == SimState.PAUSED
    assert sim.step_count == 1
    print("  ✓ step_once() leaves the sim stopped")


def test_resize_reseeds():
    print("Testing grid resize...")
    sim = _sim()
    sim.play()
    sim.frame()
    assert sim.set_grid_size(128)
    assert sim.state == SimState.SEEDED and sim.step_count == 0
    assert not sim.resize_rejected
    u, v = GrayScott().seed(128, sim.params)
    assert np.array_equal(sim.snapshot_u(), u)
    assert np.array_equal(sim.snapshot_v(), v)
    assert sim.grid.next.shape == sim.grid.current.shape == (2, 128, 128)
    print("  ✓ Resize yields a freshly seeded M x M grid")


def test_resize_rejected_keeps_grid():
    print("Testing rejected resize...")
    sim = _sim()
    sim.play()
    sim.frame()
    before = sim.snapshot_v()
    steps = sim.step_count
    assert not sim.set_grid_size(100)
    assert sim.resize_rejected
    assert sim.grid_size == 64 and sim.step_count == steps
    assert np.array_equal(sim.snapshot_v(), before)
    assert sim.state == SimState.RUNNING

    limited = _sim(supported_sizes=(64, 128))
    assert not limited.set_grid_size(512)
    assert limited.resize_rejected
    print("  ✓ Unsupported sizes are rejected with a flag")


def test_model_switch_clears_metrics():
    print("Testing model switch...")
    sim = _sim(steps_per_frame=8)
    sim.play()
    for _ in range(3):
        sim.frame()
    assert sim.metrics != EMPTY_METRICS
    assert sim.extractor.previous_sample is not None

    sim.set_model("fitzhugh-nagumo")
    assert sim.metrics == EMPTY_METRICS
    assert sim.extractor.previous_sample is None
    assert sim.state == SimState.SEEDED
    assert set(sim.params) == {"epsilon", "a0", "a1", "Du", "Dv", "dt"}
    assert not sim.snapshot_u().any()

    sim.set_model("no-such-model")
    assert sim.model_id == "gray-scott"
    print("  ✓ Switch reloads defaults, reseeds and clears metrics")


def test_preset_load_overrides_only_listed_keys():
    print("Testing preset load...")
    sim = _sim()
    sim.set_param("Du", 0.5)
    key = sim.load_preset("Maze")
    assert key == "maze"
    assert sim.params["f"] == 0.029 and sim.params["k"] == 0.057
    assert sim.params["Du"] == 0.5, "Diffusion stays unless the preset lists it"
    assert sim.preset_name == "Maze"

    sim.play()
    sim.frame()
    assert sim.load_preset(0) == "turing_pattern"
    assert sim.step_count > 0, "Plain preset load keeps the grid"
    sim.load_preset("coral", clear=True)
    assert sim.step_count == 0 and sim.state == SimState.RUNNING

    assert sim.load_preset("Spirals") is None, "Presets of other models are not found"
    assert sim.load_preset(99) is None
    print("  ✓ Presets overwrite only their own parameters")


def test_set_param_clamps():
    print("Testing parameter clamping...")
    sim = _sim()
    assert sim.set_param("f", 5.0) == 0.1
    assert sim.set_param("k", -1) == 0.0
    assert sim.set_param("gamma", 10) is None
    assert sim.set_param("f", "abc") is None
    assert sim.params["f"] == 0.1
    sim.set_runtime_params(speed=1000, colormap="neon", Dv=0.2)
    assert sim.steps_per_frame == 64 and sim.colormap == "neon"
    assert sim.params["Dv"] == 0.2
    sim.set_colormap("plaid")
    assert sim.colormap == "ocean"

    sim.set_runtime_params(speed="fast")
    assert sim.steps_per_frame == 64, "Non-numeric speed keeps the current value"
    assert sim.set_steps_per_frame(None) == 64
    assert sim.set_steps_per_frame("8") == 8
    assert sim.set_steps_per_frame(0) == 1
    print("  ✓ Out-of-range input is clamped, unknown keys ignored")


def test_brush_lasts_one_frame():
    print("Testing brush lifetime...")
    sim = _sim(steps_per_frame=1)
    sim.play()
    sim.apply_brush(True, (0.25, 0.25), 4, "seed")
    assert sim.brush.active
    sim.frame()
    assert not sim.brush.active
    v = sim.snapshot_v()
    assert v[16, 16] == 1.0, "Brush stroke should paint V=1 under the pointer"
    print("  ✓ Brush applies for one frame then resets")


def test_metrics_cadence_and_listeners():
    print("Testing metrics cadence...")
    sim = _sim(steps_per_frame=3)
    received = []
    sim.add_metrics_listener(received.append)

    def broken(_metrics):
        raise RuntimeError("consumer failed")

    sim.add_metrics_listener(broken)
    sim.play()
    for _ in range(8):
        sim.frame()
    assert sim.step_count == 24
    assert len(received) == 3, f"Expected one refresh per 8 steps, got {len(received)}"
    assert received[-1] is sim.metrics

    sim.remove_metrics_listener(broken)
    sim.pause()
    for _ in range(8):
        sim.step_once()
    assert len(received) == 4
    print("  ✓ Metrics refresh every 8th step and reach listeners")


def test_config_round_trip():
    print("Testing configuration round-trip...")
    sim = _sim(model_id="schnakenberg", steps_per_frame=8, colormap="earth")
    sim.load_preset("Zebra Stripes")
    sim.set_param("Dv", 55.0)
    mapping = sim.to_config().to_mapping()
    assert set(mapping) == {"model", "grid", "speed", "colormap", "preset",
                            "a", "b", "gamma", "Du", "Dv", "dt"}

    clone = SimulationController.from_config(mapping, rng=np.random.default_rng(9))
    assert clone.model_id == "schnakenberg"
    assert clone.params == sim.params
    assert clone.grid_size == 64 and clone.steps_per_frame == 8
    assert clone.colormap == "earth" and clone.preset_name == "Zebra Stripes"
    assert clone.to_config().to_mapping() == mapping

    query = sim.to_config().to_query()
    again = SimulationController.from_config(query)
    assert again.params == sim.params
    assert isinstance(sim.to_config(), LabConfig)
    print("  ✓ Config mapping reloads to an identical parameter set")


def test_render_output():
    print("Testing render...")
    for model_id in ("gray-scott", "fitzhugh-nagumo", "schnakenberg"):
        sim = _sim(model_id=model_id)
        rgb = sim.frame()
        assert rgb.shape == (64, 64, 3) and rgb.dtype == np.uint8
    print("  ✓ Each model renders an RGB frame")


def test_reseeding_and_play_state():
    print("Testing play state across reseeds...")
    sim = _sim(steps_per_frame=4)
    sim.play()
    sim.frame()

    sim.set_model("schnakenberg")
    assert sim.state == SimState.SEEDED
    sim.frame()
    assert sim.step_count == 0, "A switched model waits for play()"
    sim.play()
    sim.frame()
    assert sim.step_count == 4

    assert sim.set_grid_size(128)
    assert sim.state == SimState.SEEDED
    sim.play()
    sim.frame()

    sim.load_preset("Mixed", clear=True)
    assert sim.state == SimState.RUNNING and sim.step_count == 0
    sim.frame()
    assert sim.step_count == 4, "Load-and-clear keeps the sim running"
    print("  ✓ Model switch and resize stop the sim, clears keep it running")


def test_stats():
    print("Testing stats...")
    sim = _sim(steps_per_frame=4)
    sim.play()
    sim.frame()
    stats = sim.stats
    assert stats["model"] == "gray-scott" and stats["state"] == "running"
    assert stats["grid"] == 64 and stats["steps"] == 4
    assert 0.0 <= stats["v_mean"] <= stats["v_max"] <= 1.0
    print("  ✓ Stats summarize the current grid")


def _raw_metrics(sim):
    sample = downsample(sim.snapshot_v())
    return compute_raw_metrics(sample, sim.model.activation_threshold(sim.params))


def test_turing_pattern_scenario():
    print("Testing Turing Pattern scenario (256x256)...")
    sim = SimulationController(grid_size=256, steps_per_frame=8,
                               rng=np.random.default_rng(0))
    sim.load_preset("Turing Pattern", clear=True)
    assert sim.params["f"] == 0.028 and sim.params["k"] == 0.062
    sim.play()

    # First metrics refresh
    sim.frame()
    assert sim.step_count == 8
    raw = _raw_metrics(sim)
    assert 0.0 < raw["coverage"] < 1.0, f"coverage {raw['coverage']}"
    assert raw["cluster_count"] > 0, f"cluster_count {raw['cluster_count']}"
    assert 0.0 < sim.metrics.coverage < 1.0

    # Fifth refresh: the disk has broken into several spots
    for _ in range(4):
        sim.frame()
    assert sim.step_count == 40
    raw = _raw_metrics(sim)
    assert 0.0 < raw["coverage"] < 1.0
    assert raw["cluster_count"] > 1, f"cluster_count {raw['cluster_count']}"
    m = sim.metrics
    assert 0.0 < m.coverage < 1.0, f"coverage {m.coverage}"
    assert m.cluster_count > 0, f"cluster_count {m.cluster_count}"

    # With these diffusion rates the lone seed disk decays to the U=1, V=0 state
    sim.set_steps_per_frame(20)
    for _ in range(23):
        sim.frame()
    assert sim.step_count == 500
    assert _raw_metrics(sim)["coverage"] == 0.0
    assert sim.snapshot_v().max() < 0.25
    print(f"  ✓ step 40: coverage={m.coverage:.3f} clusters={m.cluster_count}; "
          "decayed by step 500")


if __name__ == "__main__":
    print("\n=== Testing SimulationController ===\n")

    test_state_machine()
    test_manual_step_from_seeded_never_runs()
    test_resize_reseeds()
    test_resize_rejected_keeps_grid()
    test_model_switch_clears_metrics()
    test_preset_load_overrides_only_listed_keys()
    test_set_param_clamps()
    test_brush_lasts_one_frame()
    test_metrics_cadence_and_listeners()
    test_config_round_trip()
    test_render_output()
    test_reseeding_and_play_state()
    test_stats()
    test_turing_pattern_scenario()

    print("\n✓ All tests passed!\n")
