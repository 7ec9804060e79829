from __future__ import annotations

import tkinter as tk
from tkinter import ttk

TYPE_CHOICES = {
    "IN": "📥 รับสินค้าเข้า (Receive)",
    "OUT": "📤 ขายสินค้า (Sale)",
    "ADJUST": "⚖️ ปรับปรุงสต็อก (Adjustment)",
}


class TransactionDialog:
    def __init__(self, app, state):
        self.app = app
        self.window = tk.Toplevel(app)
        self.window.title("บันทึกรายการ")
        self.window.transient(app)
        self.window.resizable(False, False)
        self.window.protocol("WM_DELETE_WINDOW", self.on_cancel)

        self._label_to_type = {v: k for k, v in TYPE_CHOICES.items()}
        self._product_labels: dict[str, str] = {}
        for p in state.products:
            label = f"{p.name} (คงเหลือ: {p.on_hand_kg:.2f} กก.)"
            self._product_labels[label] = p.product_id

        self.type_var = tk.StringVar(value=TYPE_CHOICES[state.modal_txn_type])
        selected = next((lab for lab, pid in self._product_labels.items() if pid == state.selected_product_id), "")
        self.product_var = tk.StringVar(value=selected)

        f = ttk.Frame(self.window)
        f.pack(fill="both", expand=True, padx=16, pady=12)

        ttk.Label(f, text="ประเภทรายการ *").grid(row=0, column=0, sticky="w", pady=4)
        ttk.Combobox(f, textvariable=self.type_var, values=list(TYPE_CHOICES.values()), state="readonly", width=36)\
            .grid(row=0, column=1, sticky="ew", pady=4)

        ttk.Label(f, text="สินค้า *").grid(row=1, column=0, sticky="w", pady=4)
        product_box = ttk.Combobox(f, textvariable=self.product_var, values=list(self._product_labels),
                                   state="readonly", width=36)
        product_box.grid(row=1, column=1, sticky="ew", pady=4)
        product_box.bind("<<ComboboxSelected>>", self._on_product_selected)

        self.e_qty = self._entry(f, "จำนวน (กก.) *", 2)
        self.e_ref = self._entry(f, "อ้างอิง (เช่น เลขที่ใบเสร็จ)", 3)
        self.e_note = self._entry(f, "หมายเหตุ", 4)

        btns = ttk.Frame(f)
        btns.grid(row=5, column=0, columnspan=2, sticky="e", pady=(10, 0))
        ttk.Button(btns, text="ยกเลิก", command=self.on_cancel).pack(side="left", padx=6)
        ttk.Button(btns, text="💾 บันทึก", style="Big.TButton", command=self.on_submit).pack(side="left")

        self.e_qty.focus_set()
        self.e_qty.bind("<Return>", lambda _e: self.on_submit())

    def _entry(self, parent, label, row):
        ttk.Label(parent, text=label).grid(row=row, column=0, sticky="w", pady=4)
        e = ttk.Entry(parent, width=38)
        e.grid(row=row, column=1, sticky="ew", pady=4)
        return e

    def _on_product_selected(self, _evt=None):
        self.app.controller.select_product(self._product_labels.get(self.product_var.get(), ""))

    def on_submit(self):
        result = self.app.controller.submit_transaction(
            txn_type=self._label_to_type.get(self.type_var.get(), ""),
            product_id=self._product_labels.get(self.product_var.get(), ""),
            qty_kg=self.e_qty.get(),
            ref=self.e_ref.get(),
            note=self.e_note.get(),
        )
        if not result.ok:
            self.app.show_error("บันทึกรายการไม่สำเร็จ", result.error or "")
            return
        self.app.toast("บันทึกรายการแล้ว", kind="success")

    def on_cancel(self):
        self.app.controller.close_transaction_modal()

    def destroy(self):
        self.window.destroy()
