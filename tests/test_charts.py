"""
Tests for the chart widgets
"""

import json

from kizua.charts import (
    DEFAULT_LINE_COLOR,
    demand_chart,
    opportunity_chart,
    trend_chart,
    trends_frame,
)
from kizua.decode import decode_analysis
from kizua.models import HistoryPoint


class TestTrendChart:
    """Per-product line chart"""

    def test_empty_series_is_renderable(self):
        fig = trend_chart([])
        assert len(fig.data) == 1
        assert len(fig.data[0].y) == 0
        json.loads(fig.to_json())

    def test_single_point(self):
        fig = trend_chart([HistoryPoint("2024-01-01", 5)])
        assert list(fig.data[0].y) == [5]

    def test_points_kept_in_input_order(self):
        series = [
            HistoryPoint("2024-01-03", 7),
            HistoryPoint("2024-01-01", 3),
            HistoryPoint("2024-01-02", -1.5),
        ]
        fig = trend_chart(series)
        assert list(fig.data[0].x) == [0, 1, 2]
        assert list(fig.data[0].customdata) == ["2024-01-03", "2024-01-01", "2024-01-02"]
        assert list(fig.data[0].y) == [7, 3, -1.5]

    def test_repeated_dates_get_separate_positions(self):
        """Each sample keeps its own slot even when the date label repeats"""
        series = [
            HistoryPoint("2024-01-01", 1),
            HistoryPoint("2024-01-02", 5),
            HistoryPoint("2024-01-01", 9),
        ]
        trace = trend_chart(series).data[0]
        assert len(set(trace.x)) == 3
        assert list(trace.y) == [1, 5, 9]
        assert list(trace.customdata) == ["2024-01-01", "2024-01-02", "2024-01-01"]
        assert "%{customdata}" in trace.hovertemplate

    def test_thirty_points(self):
        series = [HistoryPoint(f"2024-01-{d:02d}", d * 2) for d in range(1, 31)]
        assert len(trend_chart(series).data[0].y) == 30

    def test_smoothed_line_without_markers(self):
        trace = trend_chart([HistoryPoint("a", 1), HistoryPoint("b", 2)]).data[0]
        assert trace.mode == "lines"
        assert trace.line.shape == "spline"

    def test_axes_labels_hidden(self):
        fig = trend_chart([HistoryPoint("a", 1)])
        assert fig.layout.xaxis.visible is False
        assert fig.layout.yaxis.showticklabels is False

    def test_color(self):
        assert trend_chart([]).data[0].line.color == DEFAULT_LINE_COLOR
        assert trend_chart([], color="#059669").data[0].line.color == "#059669"

    def test_input_not_mutated(self):
        series = [HistoryPoint("b", 2), HistoryPoint("a", 1)]
        trend_chart(series)
        assert series == [HistoryPoint("b", 2), HistoryPoint("a", 1)]


class TestSummaryCharts:
    """Opportunity bar, demand pie and table"""

    def test_trends_frame(self, multi_payload):
        df = trends_frame(decode_analysis(multi_payload))
        assert df["Produto"].tolist() == ["Smartphones Importados", "Painéis Solares", "Perucas"]
        assert df["Procura"].tolist() == ["Alta", "Média", "Baixa"]
        assert df.loc[1, "Keywords"] == "paineis solares, geradores, paineis solares"

    def test_trends_frame_empty(self, payload):
        payload["trends"] = []
        df = trends_frame(decode_analysis(payload))
        assert df.empty
        assert "Score" in df.columns

    def test_opportunity_chart_has_one_bar_per_product(self, multi_payload):
        fig = opportunity_chart(decode_analysis(multi_payload))
        bars = sum(len(trace.x) for trace in fig.data)
        assert bars == 3

    def test_demand_chart_counts(self, multi_payload):
        multi_payload["trends"][2]["demandLevel"] = "Alta"
        fig = demand_chart(decode_analysis(multi_payload))
        counts = dict(zip(fig.data[0].labels, fig.data[0].values))
        assert counts == {"Alta": 2, "Média": 1}
