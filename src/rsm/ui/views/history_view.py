from __future__ import annotations

from tkinter import ttk

TYPE_LABELS = {"IN": "📥 รับเข้า", "OUT": "📤 ขาย", "ADJUST": "⚖️ ปรับปรุง"}


class HistoryView:
    def __init__(self, notebook: ttk.Notebook, app):
        self.app = app
        self.frame = ttk.Frame(notebook)
        notebook.add(self.frame, text="History")
        self._rendered = None

        box = ttk.LabelFrame(self.frame, text="ประวัติรายการ (50 รายการล่าสุด)")
        box.pack(fill="both", expand=True, padx=10, pady=10)

        cols = ("dt", "type", "product", "qty", "ref", "note")
        self.tree = ttk.Treeview(box, columns=cols, show="headings", height=22)
        heads = {"dt": "วัน-เวลา", "type": "ประเภท", "product": "สินค้า",
                 "qty": "จำนวน (กก.)", "ref": "อ้างอิง", "note": "หมายเหตุ"}
        widths = {"dt": 170, "type": 110, "product": 260, "qty": 110, "ref": 130, "note": 280}
        for c in cols:
            self.tree.heading(c, text=heads[c])
            self.tree.column(c, width=widths[c], anchor="w")
        self.tree.tag_configure("IN", foreground="#047857")
        self.tree.tag_configure("ADJUST", foreground="#4338ca")

        vsb = ttk.Scrollbar(box, orient="vertical", command=self.tree.yview)
        self.tree.configure(yscrollcommand=vsb.set)
        self.tree.pack(side="left", fill="both", expand=True, padx=(10, 0), pady=10)
        vsb.pack(side="right", fill="y", pady=10, padx=(0, 10))

    def render(self, state):
        if state.transactions == self._rendered:
            return
        self._rendered = state.transactions

        self.tree.delete(*self.tree.get_children())
        for t in state.transactions:
            self.tree.insert(
                "", "end", iid=t.id,
                values=(
                    t.created_local.strftime("%Y-%m-%d %H:%M:%S"),
                    TYPE_LABELS.get(t.type, t.type),
                    t.product_name or "",
                    f"{t.qty_kg:.2f}",
                    t.ref or "-",
                    t.note or "",
                ),
                tags=(t.type,),
            )
