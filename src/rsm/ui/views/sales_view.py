from __future__ import annotations

import logging
import tkinter as tk
from datetime import date
from tkinter import ttk, filedialog

log = logging.getLogger(__name__)


class SalesView:
    def __init__(self, notebook: ttk.Notebook, app):
        self.app = app
        self.frame = ttk.Frame(notebook)
        notebook.add(self.frame, text="Sales")
        self._series: tuple = ()

        top = ttk.Frame(self.frame)
        top.pack(fill="x", padx=10, pady=(10, 0))
        ttk.Label(top, text="วิเคราะห์การขาย (30 วันล่าสุด)", style="Title.TLabel").pack(side="left")
        self.total_var = tk.StringVar(value="")
        ttk.Label(top, textvariable=self.total_var).pack(side="left", padx=16)
        ttk.Button(top, text="📊 Export Excel", command=self.export_report).pack(side="right")

        self.canvas = tk.Canvas(self.frame, height=420, bg="#f8fafc", highlightthickness=1, highlightbackground="#cbd5e1")
        self.canvas.pack(fill="both", expand=True, padx=10, pady=10)
        self.canvas.bind("<Configure>", lambda _e: self._draw())

    def render(self, state):
        if state.sales_series == self._series:
            return
        self._series = state.sales_series
        self.total_var.set(f"รวม {sum(p.total_kg for p in self._series):,.2f} กก.")
        self._draw()

    def _draw(self):
        canvas = self.canvas
        canvas.delete("all")
        w, h = int(canvas.winfo_width() or 1000), int(canvas.winfo_height() or 420)
        canvas.create_text(12, 16, text="ยอดขาย (กก.)", anchor="w", font=("Segoe UI", 10, "bold"), fill="#0f172a")
        if not self._series:
            canvas.create_text(w // 2, h // 2, text="ไม่มีข้อมูล", fill="#64748b")
            return

        vals = [p.total_kg for p in self._series]
        maxv = max(vals) or 1
        base_y = h - 30
        points = []
        for i, p in enumerate(self._series):
            x = 40 + int(i * (w - 80) / max(len(self._series) - 1, 1))
            y = base_y - int(p.total_kg * (h - 70) / maxv)
            points.extend([x, y])
            canvas.create_oval(x - 3, y - 3, x + 3, y + 3, fill="#d97706", outline="")
            if i % 5 == 0 or i == len(self._series) - 1:
                canvas.create_text(x, h - 14, text=p.label[5:], font=("Segoe UI", 8), fill="#475569")
        canvas.create_line(40, base_y, w - 40, base_y, fill="#cbd5e1")
        canvas.create_text(36, base_y - (h - 70), text=f"{maxv:.0f}", anchor="e", font=("Segoe UI", 8), fill="#475569")
        canvas.create_line(*points, fill="#d97706", width=3, smooth=True)

    def export_report(self):
        path = filedialog.asksaveasfilename(
            title="Save snapshot as",
            defaultextension=".xlsx",
            filetypes=[("Excel files", "*.xlsx")],
            initialfile=f"rice_stock_{date.today().isoformat()}.xlsx",
        )
        if not path:
            return
        try:
            self.app.controller.export_snapshot(path)
        except OSError as e:
            log.exception("Excel export failed: %s", e)
            self.app.show_error("Export error", f"Excel export failed: {e}")
            return
        self.app.toast("Excel exported.", kind="success")
