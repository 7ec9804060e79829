from __future__ import annotations

import tkinter as tk
from tkinter import ttk

from rsm.domain.models import CATEGORIES


class AddProductView:
    def __init__(self, notebook: ttk.Notebook, app):
        self.app = app
        self.frame = ttk.Frame(notebook)
        notebook.add(self.frame, text="Add product")

        self.category = tk.StringVar(value="")

        box = ttk.LabelFrame(self.frame, text="เพิ่มสินค้าใหม่")
        box.pack(anchor="n", padx=10, pady=10, ipadx=8)

        self.e_name = self._entry(box, "ชื่อสินค้า (อังกฤษ) *", 0)
        self.e_name_th = self._entry(box, "ชื่อสินค้า (ไทย)", 1)

        ttk.Label(box, text="หมวดหมู่ *").grid(row=2, column=0, sticky="w", padx=8, pady=4)
        ttk.Combobox(box, textvariable=self.category, values=list(CATEGORIES), state="readonly", width=30)\
            .grid(row=2, column=1, sticky="ew", padx=8, pady=4)

        self.e_pack = self._entry(box, "ขนาดบรรจุ (กก.) *", 3)
        self.e_reorder = self._entry(box, "จุดสั่งซื้อใหม่ (กก.)", 4)

        btns = ttk.Frame(box)
        btns.grid(row=5, column=0, columnspan=2, sticky="ew", padx=8, pady=(8, 10))
        ttk.Button(btns, text="💾 บันทึกสินค้า", style="Big.TButton", command=self.on_submit).pack(side="left")
        ttk.Button(btns, text="ล้าง", command=self.clear_form).pack(side="left", padx=10)

        for entry in (self.e_name, self.e_name_th, self.e_pack, self.e_reorder):
            entry.bind("<Return>", lambda _e: self.on_submit())

    def _entry(self, parent, label, row):
        ttk.Label(parent, text=label).grid(row=row, column=0, sticky="w", padx=8, pady=4)
        e = ttk.Entry(parent, width=32)
        e.grid(row=row, column=1, sticky="ew", padx=8, pady=4)
        parent.columnconfigure(1, weight=1)
        return e

    def form_values(self) -> dict:
        return {
            "name": self.e_name.get(),
            "name_th": self.e_name_th.get(),
            "category": self.category.get(),
            "pack_size_kg": self.e_pack.get(),
            "reorder_point_kg": self.e_reorder.get(),
        }

    def clear_form(self):
        for e in (self.e_name, self.e_name_th, self.e_pack, self.e_reorder):
            e.delete(0, tk.END)
        self.category.set("")

    def on_submit(self):
        result = self.app.controller.submit_product(self.form_values())
        if not result.ok:
            self.app.show_error("เพิ่มสินค้าไม่สำเร็จ", result.error or "")
            return
        self.clear_form()
        self.app.toast("เพิ่มสินค้าแล้ว", kind="success")
