#!/usr/bin/env python3
"""
Test script for metrics smoothing.

Verifies:
1. SmoothedValue EMA blending per update
2. reset/snap behavior
3. alpha validation
"""

from turing_lab.smoothing import DEFAULT_ALPHA, SmoothedValue


def test_smoothed_value():
    """Test EMA convergence toward a constant sample."""
    print("Testing SmoothedValue...")
    sv = SmoothedValue(0.0)
    assert sv.alpha == DEFAULT_ALPHA

    first = sv.update(1.0)
    assert abs(first - 0.15) < 1e-12, f"One update should move by alpha: {first}"
    assert sv.get_value() == first

    for _ in range(99):
        sv.update(1.0)
    assert abs(sv.get_value() - 1.0) < 1e-6, f"Should converge to sample: {sv.get_value()}"

    print("  ✓ SmoothedValue blends samples by alpha")


def test_reset_and_snap():
    print("Testing reset/snap...")
    sv = SmoothedValue(0.5, alpha=0.5)
    sv.update(1.0)
    assert sv.get_value() == 0.75

    sv.snap(3.0)
    assert sv.get_value() == 3.0, "Snap should set value immediately"

    sv.reset()
    assert sv.get_value() == 0.5, "Reset returns to the initial value"
    print("  ✓ reset() and snap() working correctly")


def test_alpha_one_tracks_raw():
    print("Testing alpha=1...")
    sv = SmoothedValue(alpha=1.0)
    for sample in (0.2, 7.0, -1.0):
        assert sv.update(sample) == sample
    print("  ✓ alpha=1 passes raw samples through")


def test_alpha_validation():
    print("Testing alpha validation...")
    for bad in (0.0, -0.1, 1.5):
        try:
            SmoothedValue(alpha=bad)
        except ValueError:
            continue
        raise AssertionError(f"alpha={bad} should be rejected")
    print("  ✓ Out-of-range alpha raises ValueError")


if __name__ == "__main__":
    print("\n=== Testing Metrics Smoothing ===\n")

    test_smoothed_value()
    test_reset_and_snap()
    test_alpha_one_tracks_raw()
    test_alpha_validation()

    print("\n✓ All tests passed!\n")
