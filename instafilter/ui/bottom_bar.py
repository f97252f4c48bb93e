from __future__ import annotations

from typing import Callable, Optional, Sequence

import customtkinter as ctk


class BottomBar(ctk.CTkFrame):
    def __init__(self, master: ctk.CTk, filter_titles: Sequence[str], **kwargs) -> None:
        super().__init__(master, height=64, **kwargs)

        # callbacks
        self.on_filter_change: Optional[Callable[[str], None]] = None
        self.on_share: Optional[Callable[[], None]] = None

        # layout
        self.grid_rowconfigure(0, weight=1)
        self.grid_columnconfigure(2, weight=1)  # spacer

        # Filter choice
        self._filter_label = ctk.CTkLabel(self, text="Фильтр")
        self._filter_label.grid(row=0, column=0, padx=(10, 6), pady=8, sticky="w")

        self._filter_menu = ctk.CTkOptionMenu(self, values=list(filter_titles), command=self._on_filter_menu)
        self._filter_menu.grid(row=0, column=1, padx=6, pady=8, sticky="w")

        # Share
        self._share_btn = ctk.CTkButton(self, text="Поделиться…", width=120, command=self._on_share_click)
        self._share_btn.grid(row=0, column=3, padx=(6, 10), pady=8, sticky="e")

        self.set_image_selected(False)

    # public API (sync from controller)
    def set_filter_title(self, title: str) -> None:
        self._filter_menu.set(title)

    def set_image_selected(self, selected: bool) -> None:
        # без изображения менять фильтр и делиться нечем
        state = "normal" if selected else "disabled"
        self._filter_menu.configure(state=state)
        self._share_btn.configure(state=state)

    # events
    def _on_filter_menu(self, value: str) -> None:
        if self.on_filter_change:
            self.on_filter_change(value)

    def _on_share_click(self) -> None:
        if self.on_share:
            self.on_share()
