from __future__ import annotations

import math

import pytest

from sludge_sweep.geometry import (
    TAU, angle_in_sweep, clamp, distance, normalize,
    normalize_angle,
)


def test_normalize_angle_maps_into_full_turn() -> None:
    assert normalize_angle(0.0) == 0.0
    assert normalize_angle(-math.pi / 2) == pytest.approx(1.5 * math.pi)
    assert normalize_angle(5 * math.pi) == pytest.approx(math.pi)
    assert 0.0 <= normalize_angle(-1e-17) < TAU


def test_sweep_without_wrap() -> None:
    start, end = math.radians(10), math.radians(90)
    assert angle_in_sweep(math.radians(45), start, end)
    assert angle_in_sweep(math.radians(10), start, end)
    assert not angle_in_sweep(math.radians(100), start, end)


def test_sweep_wrapping_through_zero() -> None:
    start, end = math.radians(350), math.radians(10)
    assert angle_in_sweep(math.radians(5), start, end)
    assert angle_in_sweep(math.radians(355), start, end)
    assert not angle_in_sweep(math.radians(180), start, end)


def test_sweep_accepts_unnormalized_bounds() -> None:
    # -0.4pi .. 0.4pi is the default swing when facing right
    start, end = -0.4 * math.pi, 0.4 * math.pi
    assert angle_in_sweep(0.0, start, end)
    assert angle_in_sweep(-0.3 * math.pi, start, end)
    assert not angle_in_sweep(math.pi, start, end)


def test_normalize_degenerate_vector() -> None:
    assert normalize(0.0, 0.0) == (0.0, 0.0)
    assert normalize(3.0, 4.0) == pytest.approx((0.6, 0.8))


def test_distance_and_clamp() -> None:
    assert distance(0, 0, 3, 4) == 5
    assert clamp(-5, 0, 10) == 0
    assert clamp(15, 0, 10) == 10
    assert clamp(7, 0, 10) == 7
