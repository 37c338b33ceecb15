from __future__ import annotations

import unittest

from slipchart_core import ChartOptions, build_schedule_chart
from slipchart_ui.ascii_renderer import AsciiRenderConfig, render_chart_ascii, render_chart_markdown
from slipchart_ui.html_renderer import HtmlRenderConfig, render_chart_html


def _model(extra_rows: tuple[str, ...] = (), options: ChartOptions | None = None):
    lines = ["Task Name,Original Date,New Date", '"Design Review, Phase 1",01/05/2024,01/20/2024', *extra_rows]
    return build_schedule_chart("\n".join(lines), options)


class AsciiRendererTests(unittest.TestCase):
    def test_axis_rows_and_task_lane(self) -> None:
        text = render_chart_ascii(_model())
        lines = text.splitlines()
        self.assertEqual(lines[0], "Schedule Changes")
        self.assertIn("Weeks:", text)
        self.assertIn("Dates:", text)
        self.assertIn("W01", text)
        self.assertIn("W07", text)
        self.assertIn("12/17", text)
        lane = next(line for line in lines if line.startswith("Design Review, Phase 1 |"))
        self.assertIn("o" * 6 + "." * 6 + "#" * 6, lane)
        self.assertTrue(lane.endswith("1/5/2024 -> 1/20/2024 (15 days)"))

    def test_arrow_lane_carries_direction_and_label(self) -> None:
        text = render_chart_ascii(_model(("Pulled in,2024-01-18,2024-01-02",)))
        self.assertIn("------" + "--15--" + "----->", text)
        self.assertIn("<-----", text)
        self.assertIn("backward long", text)

    def test_arrows_can_be_hidden(self) -> None:
        text = render_chart_ascii(_model(), AsciiRenderConfig(show_arrows=False))
        self.assertNotIn("Arrows:", text)
        with self.assertRaises(ValueError):
            AsciiRenderConfig(week_column_width=2)

    def test_markdown_has_timeline_and_escaped_table(self) -> None:
        text = render_chart_markdown(_model(("A | B,2024-01-08,2024-01-09",)))
        self.assertTrue(text.startswith("# Schedule Changes\n"))
        self.assertIn("## Timeline", text)
        self.assertIn("```text", text)
        self.assertIn("| Design Review, Phase 1 | 1/5/2024 | 1/20/2024 | 15 | forward |", text)
        self.assertIn("| A \\| B |", text)


class HtmlRendererTests(unittest.TestCase):
    def test_headers_group_weeks_by_month(self) -> None:
        page = render_chart_html(_model())
        self.assertIn('<th colspan="3">December 2023</th>', page)
        self.assertIn('<th colspan="4">January 2024</th>', page)
        self.assertIn("W1<br>12/17", page)
        self.assertEqual(page.count('<tr class="task-row"'), 1)

    def test_cells_arrows_and_tooltip(self) -> None:
        page = render_chart_html(_model())
        self.assertIn('<div class="bar bar-original"></div>', page)
        self.assertIn('<div class="bar bar-passthrough"></div>', page)
        self.assertIn('<div class="bar bar-completion"></div>', page)
        self.assertIn('<span class="arrow-label">15d</span>', page)
        self.assertIn("&#9654;", page)
        self.assertIn("Duration: 15 days", page)
        self.assertNotIn('legend-color bar-same-week', page)

    def test_task_names_are_escaped(self) -> None:
        page = render_chart_html(_model(("<b>Bold</b> & co,2024-01-08,2024-01-09",)))
        self.assertIn("&lt;b&gt;Bold&lt;/b&gt; &amp; co", page)
        self.assertNotIn("<b>Bold</b>", page)

    def test_title_option_and_hidden_arrows(self) -> None:
        chart = _model(options=ChartOptions(title="Q1 <Slips>"))
        page = render_chart_html(chart, HtmlRenderConfig(show_arrows=False, show_tooltips=False))
        self.assertIn("<h1>Q1 &lt;Slips&gt;</h1>", page)
        self.assertNotIn('class="arrow-line', page)
        self.assertNotIn('class="tooltip"', page)

    def test_same_week_legend_and_backward_head(self) -> None:
        page = render_chart_html(_model(("Quick fix,2024-01-10,2024-01-12", "Pulled in,2024-01-18,2024-01-02")))
        self.assertIn('<div class="bar bar-same-week"></div>', page)
        self.assertIn('legend-color bar-same-week', page)
        self.assertIn("&#9664;", page)

    def test_rendering_is_deterministic(self) -> None:
        chart = _model(("Pulled in,2024-01-18,2024-01-02",))
        self.assertEqual(render_chart_html(chart), render_chart_html(chart))
        self.assertEqual(render_chart_ascii(chart), render_chart_ascii(chart))


if __name__ == "__main__":
    unittest.main()
