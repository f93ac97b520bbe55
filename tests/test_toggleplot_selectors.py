from __future__ import annotations

import math
import unittest

import numpy as np

from toggleplot.dataset import build_initial_state
from toggleplot.selectors import (
    ChartSelectors,
    LinearScaler,
    MemoizedSelector,
    build_values_scaler,
    compute_boundary,
    interpolate_range,
    resting_boundary,
)
from toggleplot.state import ChartState, Series, Transition, ViewportDimensions


def _state() -> ChartState:
    data = {
        "columns": [["x", 0, 1, 2], ["a", 1, 5, 3], ["b", 2, 2, 2], ["c", -4, 0, 8]],
        "colors": {"a": "#111111", "b": "#222222", "c": "#333333"},
        "names": {"a": "A", "b": "B", "c": "C"},
    }
    return build_initial_state(data, ViewportDimensions(width=600.0, charts_height=400.0))


class LinearScalerTests(unittest.TestCase):
    def test_endpoints_map_exactly(self) -> None:
        cases = [
            ((0.1, 0.7), (0.3, 0.9)),
            ((1.0, 5.0), (0.0, 400.0)),
            ((-3.3, 17.1), (12.5, -7.25)),
            ((1e-9, 3e-9), (100.0, 200.0)),
        ]
        for domain, output in cases:
            scale = LinearScaler(domain=domain, output=output)
            self.assertEqual(scale(domain[0]), output[0])
            self.assertEqual(scale(domain[1]), output[1])

    def test_two_point_formula_with_nonzero_output_origin(self) -> None:
        scale = LinearScaler(domain=(10.0, 20.0), output=(100.0, 200.0))
        self.assertAlmostEqual(scale(15.0), 150.0)
        self.assertAlmostEqual(scale(25.0), 250.0)

    def test_floor_clamps_negative_outputs_to_zero(self) -> None:
        scale = LinearScaler(domain=(1.0, 5.0), output=(0.0, 100.0), floor=0.0)
        self.assertEqual(scale(0.0), 0.0)
        self.assertEqual(scale(-50.0), 0.0)
        self.assertEqual(scale(5.0), 100.0)

    def test_without_floor_negative_outputs_pass_through(self) -> None:
        scale = LinearScaler(domain=(1.0, 5.0), output=(0.0, 100.0))
        self.assertAlmostEqual(scale(0.0), -25.0)

    def test_maps_arrays(self) -> None:
        scale = LinearScaler(domain=(1.0, 5.0), output=(0.0, 100.0), floor=0.0)
        out = scale(np.asarray([0.0, 1.0, 3.0, 5.0]))
        np.testing.assert_allclose(out, [0.0, 0.0, 50.0, 100.0])

    def test_degenerate_domain_maps_to_middle(self) -> None:
        flat = LinearScaler(domain=(2.0, 2.0), output=(0.0, 10.0))
        self.assertTrue(flat.is_degenerate)
        self.assertEqual(flat(2.0), 5.0)
        empty = LinearScaler(domain=(math.inf, -math.inf), output=(0.0, 10.0))
        self.assertTrue(empty.is_degenerate)
        np.testing.assert_allclose(empty(np.asarray([1.0, 2.0])), [5.0, 5.0])


class BoundaryTests(unittest.TestCase):
    def test_boundary_spans_all_visible_values(self) -> None:
        state = _state()
        self.assertEqual(compute_boundary(state.charts), (-4.0, 8.0))
        self.assertEqual(compute_boundary(state.charts[:2]), (1.0, 5.0))
        self.assertEqual(compute_boundary(state.charts[1:2]), (2.0, 2.0))

    def test_empty_boundary_uses_infinite_sentinels(self) -> None:
        self.assertEqual(compute_boundary(()), (math.inf, -math.inf))

    def test_boundary_handles_values_beyond_float_placeholders(self) -> None:
        tiny = Series(id="t", name="T", color="#000", values=np.asarray([-1e308, -5e307]))
        self.assertEqual(compute_boundary((tiny,)), (-1e308, -5e307))

    def test_interpolate_range(self) -> None:
        self.assertEqual(interpolate_range((0.0, 10.0), (1.0, 5.0), 0.0), (0.0, 10.0))
        self.assertEqual(interpolate_range((0.0, 10.0), (1.0, 5.0), 0.5), (0.5, 7.5))
        self.assertEqual(interpolate_range((0.0, 10.0), (1.0, 5.0), 1.0), (1.0, 5.0))

    def test_values_scaler_follows_transition_progress(self) -> None:
        state = _state()
        visible = state.charts[:1]
        halfway = Transition(progress=0.5, initial_range=(0.0, 10.0), generation=1)
        scaler = build_values_scaler(visible, 400.0, halfway)
        self.assertEqual(scaler.domain, (0.5, 7.5))
        self.assertEqual(scaler.output, (0.0, 400.0))
        self.assertEqual(scaler.floor, 0.0)
        settled = build_values_scaler(visible, 400.0, None)
        self.assertEqual(settled.domain, (1.0, 5.0))

    def test_flat_target_is_padded_so_animation_lands_on_resting_domain(self) -> None:
        state = _state()
        flat = state.charts[1:2]
        self.assertEqual(resting_boundary(flat), (1.0, 3.0))
        self.assertEqual(resting_boundary(()), (math.inf, -math.inf))
        halfway = Transition(progress=0.5, initial_range=(1.0, 5.0), generation=1)
        self.assertEqual(build_values_scaler(flat, 400.0, halfway).domain, (1.0, 4.0))
        finished = Transition(progress=1.0, initial_range=(1.0, 5.0), generation=1)
        settled = build_values_scaler(flat, 400.0, None)
        self.assertEqual(build_values_scaler(flat, 400.0, finished).domain, settled.domain)
        self.assertEqual(settled.domain, (1.0, 3.0))
        self.assertEqual(settled(2.0), 200.0)


class MemoizedSelectorTests(unittest.TestCase):
    def test_identical_arguments_return_cached_result(self) -> None:
        calls: list[int] = []

        def total(values: list[int]) -> dict[str, int]:
            calls.append(1)
            return {"sum": sum(values)}

        selector = MemoizedSelector(total)
        values = [1, 2, 3]
        first = selector(values)
        second = selector(values)
        self.assertIs(first, second)
        self.assertEqual(len(calls), 1)
        self.assertEqual(selector.recomputations, 1)

    def test_equal_but_distinct_argument_recomputes_once(self) -> None:
        selector = MemoizedSelector(lambda values, scale: [v * scale for v in values])
        values = [1, 2]
        scale = 3
        first = selector(values, scale)
        replacement = [1, 2]
        second = selector(replacement, scale)
        third = selector(replacement, scale)
        self.assertEqual(first, second)
        self.assertIsNot(first, second)
        self.assertIs(second, third)
        self.assertEqual(selector.recomputations, 2)

    def test_chart_selectors_recompute_only_changed_dependencies(self) -> None:
        selectors = ChartSelectors()
        state = _state()
        visible = selectors.visible_for(state)
        timeline = selectors.scaled_timeline_for(state)
        scaler = selectors.values_scaler_for(state)
        self.assertIs(selectors.visible_for(state), visible)
        self.assertIs(selectors.scaled_timeline_for(state), timeline)
        self.assertIs(selectors.values_scaler_for(state), scaler)

        toggled = state.merge({"visible_chart_ids": ("a", "c")})
        self.assertEqual([s.id for s in selectors.visible_for(toggled)], ["a", "c"])
        self.assertEqual(selectors.visible_series.recomputations, 2)
        self.assertIs(selectors.scaled_timeline_for(toggled), timeline)
        self.assertEqual(selectors.timeline_scaler.recomputations, 1)
        self.assertEqual(selectors.scaled_timeline.recomputations, 1)

    def test_visible_series_keeps_declaration_order(self) -> None:
        selectors = ChartSelectors()
        state = _state().merge({"visible_chart_ids": ("c", "a")})
        self.assertEqual([s.id for s in selectors.visible_for(state)], ["a", "c"])

    def test_scaled_timeline_maps_to_pixel_columns(self) -> None:
        selectors = ChartSelectors()
        state = _state()
        self.assertEqual(selectors.scaled_timeline_for(state).tolist(), [0.0, 300.0, 600.0])
        narrowed = state.merge({"visible_range": (1, 2)})
        self.assertEqual(selectors.scaled_timeline_for(narrowed).tolist(), [-600.0, 0.0, 600.0])


if __name__ == "__main__":
    unittest.main()
