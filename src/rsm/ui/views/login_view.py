from __future__ import annotations

import tkinter as tk
from tkinter import ttk

from rsm.services.auth_service import DEMO_PASSWORD, DEMO_USERNAME


class LoginView:
    def __init__(self, root: tk.Tk, app):
        self.app = app
        self.frame = ttk.Frame(root)

        self.username = tk.StringVar(value=DEMO_USERNAME)
        self.password = tk.StringVar(value=DEMO_PASSWORD)
        self.error_var = tk.StringVar(value="")

        box = ttk.LabelFrame(self.frame, text="🌾 ระบบจัดการสต็อกข้าว")
        box.place(relx=0.5, rely=0.45, anchor="center")

        ttk.Label(box, text="ระบบจัดการสินค้าคงคลังมืออาชีพ").grid(row=0, column=0, columnspan=2, padx=16, pady=(12, 4))
        ttk.Label(box, text=f"เดโม: {DEMO_USERNAME} / {DEMO_PASSWORD}").grid(row=1, column=0, columnspan=2, padx=16, pady=(0, 8))

        ttk.Label(box, text="ชื่อผู้ใช้").grid(row=2, column=0, sticky="w", padx=16, pady=4)
        user_e = ttk.Entry(box, textvariable=self.username, width=28)
        user_e.grid(row=2, column=1, padx=16, pady=4)

        ttk.Label(box, text="รหัสผ่าน").grid(row=3, column=0, sticky="w", padx=16, pady=4)
        pass_e = ttk.Entry(box, textvariable=self.password, show="•", width=28)
        pass_e.grid(row=3, column=1, padx=16, pady=4)

        ttk.Label(box, textvariable=self.error_var, style="Error.TLabel", wraplength=320)\
            .grid(row=4, column=0, columnspan=2, padx=16, pady=(4, 0))

        ttk.Button(box, text="🚀 เข้าสู่ระบบ", style="Big.TButton", command=self.on_submit)\
            .grid(row=5, column=0, columnspan=2, sticky="ew", padx=16, pady=(8, 14))

        for entry in (user_e, pass_e):
            entry.bind("<Return>", lambda _e: self.on_submit())

    def show(self, state):
        self.error_var.set(state.auth_error)
        if not self.frame.winfo_ismapped():
            self.frame.pack(fill="both", expand=True)

    def hide(self):
        self.frame.pack_forget()

    def reset(self):
        self.username.set(DEMO_USERNAME)
        self.password.set(DEMO_PASSWORD)

    def on_submit(self):
        ok = self.app.controller.login(self.username.get().strip(), self.password.get())
        if not ok:
            self.reset()
        self.app.render(self.app.controller.state)
