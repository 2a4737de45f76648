import importlib
from datetime import date

import plotly.graph_objects as go

from core.export import ExportedReport
from core.models import Filters
from visualization import build_budget_chart, build_expense_treemap, build_net_flow_chart, build_sankey_chart


def test_app_package_exports_main():
    module = importlib.import_module("app")

    assert hasattr(module, "main"), "app package should expose main entrypoint"


def test_charts_render_snapshot_sections(service):
    snapshot = service.build_dashboard("all", today=date(2024, 3, 20))

    net_flow = build_net_flow_chart(snapshot["netFlow"])
    budget = build_budget_chart(snapshot["budgetStatus"])
    sankey = build_sankey_chart(snapshot["sankeyData"])
    treemap = build_expense_treemap(snapshot["expenseTreeMap"])

    assert [trace.name for trace in net_flow.data] == ["Income", "Expense", "Net flow"]
    assert list(net_flow.data[0].x) == ["2024-02", "2024-03"]
    assert list(budget.data[0].y) == ["Food", "Transport"]
    assert set(sankey.data[0].node.label) == {"Budi", "Family", "Sari", "Unspecified"}
    assert treemap.data


def test_charts_fall_back_to_placeholder_when_empty():
    for figure in (
        build_net_flow_chart([]),
        build_budget_chart([]),
        build_sankey_chart([]),
        build_expense_treemap({"total": 0.0, "hierarchical": [], "byCategory": [], "bySubcategory": []}),
    ):
        assert isinstance(figure, go.Figure)
        assert not figure.data
        assert figure.layout.annotations


def test_overview_export_is_reused_for_the_same_dashboard_key(monkeypatch, service):
    main_module = importlib.import_module("app.main")
    calls = []

    def fake_export(active_service, period, filters):
        calls.append(period)
        return ExportedReport(filename=f"kasflow-{period}.csv", mime="text/csv", content=f"# {period}")

    monkeypatch.setattr(main_module, "_dashboard_service", lambda: service)
    monkeypatch.setattr(main_module, "export_dashboard_csv", fake_export)
    main_module._export_report.clear()

    first = main_module._export_report("dashboardData_current_month_{}", "current_month", Filters())
    again = main_module._export_report("dashboardData_current_month_{}", "current_month", Filters())
    other = main_module._export_report("dashboardData_last_month_{}", "last_month", Filters())
    main_module._export_report.clear()

    assert calls == ["current_month", "last_month"]
    assert first == again
    assert other.filename == "kasflow-last_month.csv"
