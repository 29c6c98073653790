import math
import unittest

import pygame
from numpy.testing import assert_allclose

from config import (
    BODY_RADIUS, COORD_MAX, COORD_MIN, GUIDE_LINE_COLOR, SOL_COLOR, SOL_RADIUS, TEXT_COLOR,
)
from fakes import RecordingCanvas
from physics import PositionSnapshot, SnapshotError
from renderer import (
    Canvas, SceneRenderer, TextPanel, ViewportConfig, clamp_to_screen, project,
)


VIEWPORT = ViewportConfig.create(1200, 800, 30)


class TestProject(unittest.TestCase):

    def test_origin_is_centre(self):
        self.assertEqual(project((0, 0), VIEWPORT), (600.0, 400.0))

    def test_y_is_flipped(self):
        self.assertEqual(project((1, 1), VIEWPORT), (630.0, 370.0))

    def test_linear(self):
        cx, cy = project((0, 0), VIEWPORT)
        x, y = project((0.7, -1.3), VIEWPORT)
        for k in (2.0, -0.5, 10.0):
            kx, ky = project((0.7 * k, -1.3 * k), VIEWPORT)
            assert_allclose((kx - cx, ky - cy), (k * (x - cx), k * (y - cy)))

    def test_pure(self):
        self.assertEqual(project((3.2, -4.1), VIEWPORT), project((3.2, -4.1), VIEWPORT))

    def test_non_finite_passes_through(self):
        x, _ = project((math.nan, 0), VIEWPORT)
        self.assertTrue(math.isnan(x))


class TestViewportConfig(unittest.TestCase):

    def test_rejects_bad_sizes(self):
        for args in ((0, 800, 30), (1200, -1, 30), (1200, 800, 0)):
            with self.assertRaises(ValueError):
                ViewportConfig.create(*args)


class TestSceneRenderer(unittest.TestCase):

    def setUp(self):
        self.canvas = RecordingCanvas()
        self.renderer = SceneRenderer(self.canvas)

    def test_sol_and_earth(self):
        snap = PositionSnapshot(2440587.5, [(0, 0), (1, 0)], ["Sol", "Earth"])
        self.renderer.render(snap, VIEWPORT)

        circles = self.canvas.of_kind("circle")
        self.assertEqual(circles, [
            ("circle", (600.0, 400.0), SOL_RADIUS, SOL_COLOR),
            ("circle", (630.0, 400.0), BODY_RADIUS, TEXT_COLOR),
        ])
        self.assertGreater(SOL_RADIUS, BODY_RADIUS)

    def test_date_then_bodies_in_order(self):
        snap = PositionSnapshot(2440587.5, [(0, 0), (1, 0)], ["Sol", "Earth"])
        self.renderer.render(snap, VIEWPORT)

        self.assertEqual(self.canvas.calls, [
            ("text", "Year: 1970", (1105, 20), TEXT_COLOR),
            ("text", "Month: Jan", (1105, 40), TEXT_COLOR),
            ("text", "Day: 1", (1105, 60), TEXT_COLOR),
            ("text", "Sol", (10, 20), SOL_COLOR),
            ("line", (50, 20), (600.0, 400.0), GUIDE_LINE_COLOR),
            ("circle", (600.0, 400.0), SOL_RADIUS, SOL_COLOR),
            ("text", "Earth", (10, 40), TEXT_COLOR),
            ("line", (50, 40), (630.0, 400.0), GUIDE_LINE_COLOR),
            ("circle", (630.0, 400.0), BODY_RADIUS, TEXT_COLOR),
        ])

    def test_empty_snapshot_draws_only_date(self):
        self.renderer.render(PositionSnapshot(2451545.0, [], []), VIEWPORT)
        self.assertEqual([c[0] for c in self.canvas.calls], ["text", "text", "text"])
        self.assertEqual(self.canvas.of_kind("circle"), [])

    def test_duplicate_names_drawn_positionally(self):
        snap = PositionSnapshot(2451545.0, [(1, 0), (-1, 0)], ["Moon", "Moon"])
        self.renderer.render(snap, VIEWPORT)
        labels = [c for c in self.canvas.of_kind("text") if c[1] == "Moon"]
        self.assertEqual([c[2] for c in labels], [(10, 20), (10, 40)])
        self.assertEqual(len(self.canvas.of_kind("circle")), 2)

    def test_non_finite_body_skipped(self):
        snap = PositionSnapshot(2451545.0, [(math.inf, 0), (1, 0)], ["Lost", "Earth"])
        with self.assertLogs("renderer", level="WARNING"):
            self.renderer.render(snap, VIEWPORT)

        self.assertIn(("text", "Lost", (10, 20), TEXT_COLOR), self.canvas.calls)
        self.assertEqual(self.canvas.of_kind("circle"), [("circle", (630.0, 400.0), BODY_RADIUS, TEXT_COLOR)])
        self.assertEqual(len(self.canvas.of_kind("line")), 1)

    def test_mismatched_snapshot_is_fatal(self):
        snap = PositionSnapshot(2451545.0, [(0, 0)], ["Sol", "Earth"])
        with self.assertRaises(SnapshotError):
            self.renderer.render(snap, VIEWPORT)
        self.assertEqual(self.canvas.calls, [])


class TestPygameCanvas(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        pygame.font.init()

    @classmethod
    def tearDownClass(cls):
        pygame.font.quit()

    def setUp(self):
        self.surface = pygame.Surface((100, 80))
        self.canvas = Canvas(self.surface, pygame.font.Font(None, 20))

    def test_clear_and_circle(self):
        self.canvas.clear((0, 0, 0))
        self.canvas.circle((50.0, 40.0), 5, SOL_COLOR)
        self.assertEqual(tuple(self.surface.get_at((50, 40)))[:3], SOL_COLOR)
        self.assertEqual(tuple(self.surface.get_at((5, 5)))[:3], (0, 0, 0))

    def test_far_away_points_are_clamped(self):
        self.assertEqual(clamp_to_screen((1e12, -1e12)), (COORD_MAX, COORD_MIN))
        self.canvas.line((10, 10), (1e12, 1e12), GUIDE_LINE_COLOR)
        self.assertEqual(tuple(self.surface.get_at((10, 10)))[:3], GUIDE_LINE_COLOR)

    def test_present_draws_overlays(self):
        panel = TextPanel((0, 0), TEXT_COLOR)
        panel.write("Frames per Second:\n         latest = 60")
        recorder = RecordingCanvas()
        panel.draw(recorder)
        self.assertEqual([c[1] for c in recorder.calls], ["Frames per Second:", "         latest = 60"])

        self.canvas.clear((0, 0, 0))
        self.canvas.add_overlay(panel)
        self.canvas.present()
        lit = [tuple(self.surface.get_at((x, y)))[:3] != (0, 0, 0) for x in range(100) for y in range(40)]
        self.assertTrue(any(lit))


if __name__ == '__main__':
    unittest.main()
