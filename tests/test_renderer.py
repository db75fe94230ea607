"""Smoke tests for drawing onto an off-screen surface."""

import pygame
import pytest

from uncharted.audio import CUE_TONES, render_tones
from uncharted.models import Cell, Rect
from uncharted.renderer import Palette, Renderer, lidar_heat, scan_heat
from uncharted.tools import Tool


@pytest.mark.parametrize(
    "density, color",
    [
        (0.0, Palette.SCAN_EMPTY),
        (0.1, Palette.SCAN_LOW),
        (0.3, Palette.SCAN_MEDIUM),
        (0.6, Palette.SCAN_HIGH),
    ],
)
def test_scan_heat_tiers(density, color):
    assert scan_heat(density) == color


@pytest.mark.parametrize(
    "proximity, color",
    [
        (0, Palette.LIDAR_VERY_CLOSE),
        (3, Palette.LIDAR_CLOSE),
        (6, Palette.LIDAR_MODERATE),
        (float("inf"), Palette.LIDAR_FAR),
    ],
)
def test_lidar_heat_tiers(proximity, color):
    assert lidar_heat(proximity) == color


def test_excavated_structure_cell_is_painted(site, viewport):
    surface = pygame.Surface(viewport.physical_size)
    renderer = Renderer(site, viewport)
    site.excavate(Rect(0, 0, 1, 1))
    site.excavate(Rect(9, 9, 1, 1))

    renderer.render(
        surface,
        scans=[Cell(10, 10)],
        lidars=[Cell(2, 2)],
        tool=Tool.EXCAVATE,
        selection=Rect(15, 15, 2, 2),
    )

    assert surface.get_at((2, 2))[:3] == Palette.STRUCTURE
    assert surface.get_at((95, 95))[:3] == Palette.DIRT


def test_drill_hover_preview_outlines_cell(site, viewport):
    surface = pygame.Surface(viewport.physical_size)
    Renderer(site, viewport).render(surface, tool=Tool.DRILL, hover=Cell(12, 2))

    assert surface.get_at((20, 120))[:3] == Palette.GRID


def test_cue_tones_render_within_range():
    samples = render_tones(CUE_TONES[next(iter(CUE_TONES))], sample_rate=8000)
    assert samples
    assert all(-1.0 <= sample <= 1.0 for sample in samples)
