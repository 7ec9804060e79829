from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Iterable, Optional

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.table import Table, TableStyleInfo

from rsm.domain.errors import BackendError
from rsm.domain.models import DashboardKPIs, SaleRecord, SalesDelta, SalesPoint

log = logging.getLogger(__name__)

SERIES_DAYS = 30
DELTA_DAYS = 7


def compute_sales_delta(current_sum: float, previous_sum: float) -> Optional[SalesDelta]:
    if previous_sum <= 0:
        return None
    delta = (current_sum - previous_sum) * 100 / previous_sum
    return SalesDelta(value=delta, is_positive=delta >= 0)


def compute_sales_series(records: Iterable[SaleRecord], today: date, days: int = SERIES_DAYS) -> list[SalesPoint]:
    buckets: dict[date, float] = {today - timedelta(days=i): 0.0 for i in range(days - 1, -1, -1)}
    for rec in records:
        day = rec.created_at.astimezone().date()
        if day in buckets:
            buckets[day] += rec.qty_kg
    return [SalesPoint(day=d, total_kg=v) for d, v in buckets.items()]


def sum_qty(records: Iterable[SaleRecord]) -> float:
    return sum(r.qty_kg for r in records)


def delta_windows(now: datetime) -> tuple[tuple[datetime, None], tuple[datetime, datetime]]:
    """(current, previous) windows: [now-7d, open) and [now-14d, now-7d)."""
    seven = now - timedelta(days=DELTA_DAYS)
    fourteen = now - timedelta(days=DELTA_DAYS * 2)
    return (seven, None), (fourteen, seven)


def series_window_start(now: datetime) -> datetime:
    return now - timedelta(days=SERIES_DAYS)


class ReportingService:
    def __init__(self, repo):
        self.repo = repo

    def fetch_kpis(self) -> Optional[DashboardKPIs]:
        try:
            row = self.repo.get_dashboard_kpis()
        except BackendError as e:
            log.warning("fetch_kpis_failed status=%s error=%s", e.status_code, e.message)
            return None
        if not row:
            return None
        try:
            return DashboardKPIs.from_row(row)
        except (TypeError, ValueError) as e:
            log.warning("fetch_kpis_malformed error=%s", e)
            return None

    def fetch_sales_window(self, start: datetime, end: datetime | None = None) -> Optional[list[SaleRecord]]:
        try:
            rows = self.repo.list_sales_between(start, end)
            return [SaleRecord.from_row(r) for r in rows]
        except (BackendError, KeyError, TypeError, ValueError) as e:
            log.warning("fetch_sales_window_failed start=%s end=%s error=%s", start, end, e)
            return None

    def export_snapshot_excel(self, path: str, state) -> None:
        wb = Workbook()

        def kg(cell):
            cell.number_format = "#,##0.00"

        def bold_row(ws, r):
            for c in ws[r]:
                c.font = Font(bold=True)

        def set_widths(ws, widths: dict[str, int]):
            for col, w in widths.items():
                ws.column_dimensions[col].width = w

        def add_table(ws, name: str, end_row: int, end_col: int):
            ref = f"A1:{get_column_letter(end_col)}{end_row}"
            tab = Table(displayName=name, ref=ref)
            tab.tableStyleInfo = TableStyleInfo(name="TableStyleMedium9", showRowStripes=True, showColumnStripes=False)
            ws.add_table(tab)

        status_fill = {
            "low": PatternFill("solid", fgColor="FEF3C7"),
            "out": PatternFill("solid", fgColor="FEE2E2"),
        }

        # -------- 1) Stock --------
        ws = wb.active
        ws.title = "Stock"
        ws.append(["SKU", "Name", "Name (TH)", "Category", "Pack kg", "Reorder kg", "On hand kg", "Status"])
        bold_row(ws, 1)
        for p in state.products:
            ws.append([p.sku or "", p.name, p.name_th or "", p.category,
                       p.pack_size_kg, p.reorder_point_kg, p.on_hand_kg, p.status])
            r = ws.max_row
            for col in ("E", "F", "G"):
                kg(ws[f"{col}{r}"])
            if p.status in status_fill:
                ws[f"H{r}"].fill = status_fill[p.status]
        ws.freeze_panes = "A2"
        set_widths(ws, {"A": 20, "B": 30, "C": 24, "D": 12, "E": 10, "F": 12, "G": 12, "H": 8})
        if ws.max_row >= 2:
            add_table(ws, "StockTable", ws.max_row, 8)

        # -------- 2) Transactions --------
        ws2 = wb.create_sheet("Transactions")
        ws2.append(["Datetime", "Type", "Product", "Qty kg", "Ref", "Note"])
        bold_row(ws2, 1)
        for t in state.transactions:
            ws2.append([t.created_local.strftime("%Y-%m-%d %H:%M:%S"), t.type, t.product_name or "",
                        t.qty_kg, t.ref or "", t.note or ""])
            kg(ws2[f"D{ws2.max_row}"])
        ws2.freeze_panes = "A2"
        set_widths(ws2, {"A": 22, "B": 8, "C": 30, "D": 12, "E": 16, "F": 34})
        if ws2.max_row >= 2:
            add_table(ws2, "TransactionsTable", ws2.max_row, 6)

        # -------- 3) Sales 30d --------
        ws3 = wb.create_sheet("Sales 30d")
        ws3.append(["Date", "OUT kg"])
        bold_row(ws3, 1)
        for point in state.sales_series:
            ws3.append([point.label, point.total_kg])
            kg(ws3[f"B{ws3.max_row}"])
        total_row = ws3.max_row + 1
        ws3[f"A{total_row}"] = "Total"
        ws3[f"B{total_row}"] = sum(p.total_kg for p in state.sales_series)
        ws3[f"A{total_row}"].font = Font(bold=True)
        kg(ws3[f"B{total_row}"])
        set_widths(ws3, {"A": 14, "B": 14})

        wb.save(path)
        log.info("snapshot_exported path=%s products=%s transactions=%s", path, len(state.products), len(state.transactions))
