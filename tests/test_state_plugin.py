from __future__ import annotations

import unittest

import numpy as np

from statetrack import DEFAULT_OPTIONS, Plot, PlotDataError, Series, StateTrackPlugin
from statetrack.series import NUMERIC_RECORD_FORMAT, STATE_RECORD_FORMAT, Datapoints


class _RecordingSurface:
    def __init__(self) -> None:
        self.fill_style = "initial"
        self.text_align = "left"
        self.calls: list[tuple] = []
        self._stack: list[tuple] = []

    def save(self) -> None:
        self._stack.append((self.fill_style, self.text_align))

    def restore(self) -> None:
        self.fill_style, self.text_align = self._stack.pop()

    def fill_rect(self, x: float, y: float, width: float, height: float) -> None:
        self.calls.append(("rect", x, y, width, height, self.fill_style))

    def fill_text(self, text: str, x: float, y: float) -> None:
        self.calls.append(("text", text, x, y))

    def measure_text(self, text: str) -> float:
        return 6.0 * len(text)


def _plot(*, options: dict | None = None, state_data: list | None = None) -> Plot:
    return Plot(
        [
            {"label": "temperature", "data": [[0, 4.0], [5, 6.0], [10, 5.0]]},
            {
                "label": "door",
                "state": True,
                "state_label": "Door",
                "xaxis": 2,
                "states": {"on": "#ff0000"},
                "data": state_data if state_data is not None else [[5, "off"], [0, "on"], [2, "on"], [7, "off"]],
            },
        ],
        width=400,
        height=200,
        plugins=[StateTrackPlugin()],
        options=options,
    )


class StateTrackPluginTests(unittest.TestCase):
    def test_plugin_declares_name_version_and_disabled_default(self) -> None:
        plugin = StateTrackPlugin()
        self.assertEqual(plugin.name, "state")
        self.assertEqual(plugin.version, "0.2")
        self.assertEqual(plugin.options, {"series": {"state": False}})
        plugin.options["series"]["state"] = True
        self.assertFalse(DEFAULT_OPTIONS["series"]["state"])

    def test_process_datapoints_replaces_buffer_and_format(self) -> None:
        plot = _plot()
        series = plot.series[1]
        series.datapoints = Datapoints(points=list(series.data), format=NUMERIC_RECORD_FORMAT)
        StateTrackPlugin().process_datapoints(plot, series, series.datapoints)
        self.assertEqual(series.data, [(0, "on"), (5, "off")])
        self.assertEqual(series.datapoints.points, [(0, "on"), (5, "off")])
        self.assertEqual(series.datapoints.format, STATE_RECORD_FORMAT)
        self.assertEqual(series.datapoints.pointsize, 2)
        self.assertFalse(series.datapoints.is_numeric)

    def test_process_datapoints_ignores_plain_series(self) -> None:
        plot = _plot()
        series = plot.series[0]
        datapoints = Datapoints(points=list(series.data), format=NUMERIC_RECORD_FORMAT)
        StateTrackPlugin().process_datapoints(plot, series, datapoints)
        self.assertEqual(datapoints.points, [[0, 4.0], [5, 6.0], [10, 5.0]])
        self.assertEqual(datapoints.format, NUMERIC_RECORD_FORMAT)
        self.assertFalse(plot.xaxis.ticks_hidden)

    def test_draw_series_ignores_plain_series(self) -> None:
        plot = _plot()
        plot.draw()
        surface = _RecordingSurface()
        StateTrackPlugin().draw_series(plot, surface, plot.series[0])
        self.assertEqual(surface.calls, [])


class PlotHostTests(unittest.TestCase):
    def test_series_defaults_come_from_plugin_options(self) -> None:
        plot = Plot([{"data": [[0, 1], [1, 2]]}], plugins=[StateTrackPlugin()])
        self.assertFalse(plot.series[0].state)

    def test_unknown_series_option_is_rejected(self) -> None:
        with self.assertRaisesRegex(ValueError, "unknown series option"):
            Plot([{"data": [], "bogus": 1}])

    def test_process_data_hides_ticks_on_dedicated_axis_only(self) -> None:
        plot = _plot()
        plot.process_data()
        axes = plot.get_axes()
        self.assertTrue(axes["x2axis"].ticks_hidden)
        self.assertFalse(axes["xaxis"].ticks_hidden)
        self.assertFalse(axes["yaxis"].ticks_hidden)

    def test_draw_reduces_once_per_data_update(self) -> None:
        plot = _plot()
        plot.draw()
        first = plot.series[1].datapoints
        plot.draw()
        self.assertIs(plot.series[1].datapoints, first)
        self.assertEqual(plot.series[1].data, [(0, "on"), (5, "off")])

    def test_set_data_reruns_reduction(self) -> None:
        plot = _plot()
        plot.draw()
        plot.set_data(
            [
                {"data": [[0, 1.0], [10, 2.0]]},
                {"state": True, "xaxis": 2, "data": [[1, "a"], [2, "a"], [3, "b"]]},
            ]
        )
        plot.draw()
        self.assertEqual(plot.series[1].data, [(1, "a"), (3, "b")])
        self.assertTrue(plot.get_axes()["x2axis"].ticks_hidden)

    def test_set_data_restores_main_axis_ticks(self) -> None:
        plot = Plot([{"state": True, "data": [[0, "a"], [5, "b"]]}], plugins=[StateTrackPlugin()])
        plot.draw()
        self.assertTrue(plot.xaxis.ticks_hidden)
        plot.set_data([{"data": [[0, 1.0], [10, 2.0]]}])
        plot.draw()
        self.assertFalse(plot.xaxis.ticks_hidden)

    def test_set_data_keeps_configured_axis_limits(self) -> None:
        plot = _plot(options={"xaxis": {"min": 2, "max": 4}})
        plot.draw()
        plot.set_data([{"data": [[0, 1.0], [10, 2.0]]}])
        plot.draw()
        self.assertEqual((plot.xaxis.min, plot.xaxis.max), (2.0, 4.0))

    def test_track_box_sits_below_plot_area(self) -> None:
        plot = _plot()
        plot.draw()
        x0, y0, w, h = plot.plot_rect()  # type: ignore[misc]
        box = plot.series[1].xaxis.box  # type: ignore[union-attr]
        self.assertEqual(box.left, x0)
        self.assertEqual(box.width, w)
        self.assertGreater(box.top, y0 + h)
        self.assertLessEqual(box.top + box.height, plot.height)

    def test_state_track_uses_main_axis_range(self) -> None:
        plot = _plot(options={"xaxis": {"min": 2, "max": 4}}, state_data=[[0, "on"], [3, "off"], [5, "on"]])
        plot.draw()
        surface = _RecordingSurface()
        StateTrackPlugin().draw_series(plot, surface, plot.series[1])
        rects = [c for c in surface.calls if c[0] == "rect"]
        offset = plot.plot_offset()
        self.assertEqual(len(rects), 2)
        self.assertAlmostEqual(rects[0][1], offset.left + plot.xaxis.p2c(2.0))
        self.assertAlmostEqual(rects[0][1] + rects[0][3], offset.left + plot.xaxis.p2c(3.0))
        self.assertAlmostEqual(rects[1][1] + rects[1][3], offset.left + plot.xaxis.p2c(4.0))
        self.assertEqual(rects[0][5], "#ff0000")
        self.assertEqual(rects[1][5], "rgba(255,255,255,0)")

    def test_rendered_track_pixels(self) -> None:
        plot = _plot()
        frame = plot.to_rgba()
        box = plot.series[1].xaxis.box  # type: ignore[union-attr]
        offset = plot.plot_offset()
        y = box.top + box.height // 2
        on_x = int(offset.left + plot.xaxis.p2c(4.5))
        off_x = int(offset.left + plot.xaxis.p2c(6.0))
        self.assertEqual(tuple(frame[y, on_x]), (255, 0, 0, 255))
        self.assertEqual(tuple(frame[y, off_x]), (255, 255, 255, 255))

    def test_caption_is_drawn_left_of_track(self) -> None:
        plot = _plot()
        frame = plot.to_rgba()
        box = plot.series[1].xaxis.box  # type: ignore[union-attr]
        caption_area = frame[box.top - 2 : box.top + box.height, : box.left, :3]
        self.assertTrue(np.any(caption_area < 128))

    def test_empty_state_data_renders_without_rects(self) -> None:
        plot = _plot(state_data=[])
        plot.draw()
        surface = _RecordingSurface()
        StateTrackPlugin().draw_series(plot, surface, plot.series[1])
        self.assertEqual([c[1] for c in surface.calls], ["Door"])

    def test_line_series_still_drawn(self) -> None:
        plot = _plot()
        frame = plot.to_rgba()
        x0, y0, w, h = plot.plot_rect()  # type: ignore[misc]
        area = frame[y0 : y0 + h, x0 : x0 + w]
        blue = (area[:, :, 2] > 200) & (area[:, :, 0] < 120)
        self.assertTrue(np.any(blue))

    def test_plot_accepts_series_instances(self) -> None:
        series = Series(data=[(0, "x"), (1, "x")], state=True, xaxis_index=2)
        plot = Plot([Series(data=[[0, 0.0], [1, 1.0]]), series], plugins=[StateTrackPlugin()])
        plot.process_data()
        self.assertEqual(series.data, [(0, "x")])

    def test_too_small_figure_raises(self) -> None:
        plot = Plot([{"data": [[0, 1], [1, 2]]}], width=40, height=40)
        with self.assertRaisesRegex(PlotDataError, "too small"):
            plot.draw()

    def test_offset_requires_layout(self) -> None:
        with self.assertRaises(PlotDataError):
            _plot().plot_offset()

    def test_to_rgba_after_drawing_on_custom_surface(self) -> None:
        plot = _plot()
        plot.draw(_RecordingSurface())
        frame = plot.to_rgba()
        self.assertEqual(frame.shape, (200, 400, 4))

    def test_axis_pixel_mapping_round_trips(self) -> None:
        plot = _plot()
        plot.draw()
        self.assertAlmostEqual(plot.xaxis.c2p(plot.xaxis.p2c(3.25)), 3.25)
        self.assertAlmostEqual(plot.yaxis.c2p(plot.yaxis.p2c(5.5)), 5.5)
        self.assertEqual(plot.xaxis.p2c(plot.xaxis.min), 0.0)


if __name__ == "__main__":
    unittest.main()
