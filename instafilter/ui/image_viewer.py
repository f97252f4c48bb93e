"""Виджет просмотра: результат фильтра, вписанный в канву, и «до» по пробелу.

Принципы:
- SRP: отвечает только за представление и интеракции с изображением.
- Чистый код: чёткое разделение публичного API и внутренних обработчиков событий.
"""
from __future__ import annotations

from typing import Callable, Optional

import customtkinter as ctk
import tkinter as tk
from PIL import Image, ImageTk


class ImageViewer(ctk.CTkFrame):
    """Канва с результатом фильтра; удержание пробела показывает оригинал."""
    def __init__(self, master: ctk.CTk | tk.Misc, **kwargs) -> None:
        super().__init__(master, **kwargs)
        self.grid_rowconfigure(0, weight=1)
        self.grid_columnconfigure(0, weight=1)

        self._canvas = tk.Canvas(self, highlightthickness=0, bg=self._get_canvas_bg())
        self._canvas.grid(row=0, column=0, sticky="nsew")

        self._original_image: Optional[Image.Image] = None
        self._processed_image: Optional[Image.Image] = None
        self._tk_image: Optional[ImageTk.PhotoImage] = None
        self._hold_before_active: bool = False

        # клик по пустой канве открывает файл, как в пикере фото
        self.on_request_open: Optional[Callable[[], None]] = None

        self._canvas.bind("<Configure>", self._on_canvas_resize)
        self._canvas.bind("<ButtonPress-1>", self._on_click)

        # Hold space to preview "before"
        self._canvas.bind("<KeyPress-space>", self._on_space_down)
        self._canvas.bind("<KeyRelease-space>", self._on_space_up)

    # ---- Public API ----
    def set_image(self, image: Optional[Image.Image]) -> None:
        """Устанавливает исходное изображение (None очищает виджет)."""
        self._original_image = image
        self._processed_image = None
        self._render_image()

    def set_processed_image(self, image: Optional[Image.Image]) -> None:
        """Устанавливает обработанное изображение (может быть None) и перерисовывает виджет."""
        self._processed_image = image
        self._render_image()

    # ---- Internals ----
    def _on_canvas_resize(self, _event: tk.Event) -> None:
        self._render_image()

    def _on_click(self, _event: tk.Event) -> None:
        self._canvas.focus_set()
        if self._original_image is None and self.on_request_open:
            self.on_request_open()

    def _render_image(self) -> None:
        self._canvas.delete("all")
        canvas_w = max(1, int(self._canvas.winfo_width()))
        canvas_h = max(1, int(self._canvas.winfo_height()))

        if self._original_image is None:
            self._tk_image = None
            self._canvas.create_text(
                canvas_w // 2,
                canvas_h // 2,
                text="Нет изображения\nНажмите, чтобы открыть фото",
                justify="center",
                fill="#8a8a8a",
            )
            return

        show_after = self._processed_image is not None and not self._hold_before_active
        draw_img = self._processed_image if show_after else self._original_image

        img_w, img_h = draw_img.size
        scale = min(canvas_w / img_w, canvas_h / img_h) if img_w and img_h else 1.0
        scaled_w = max(1, int(img_w * scale))
        scaled_h = max(1, int(img_h * scale))
        resized = draw_img.resize((scaled_w, scaled_h), Image.Resampling.LANCZOS)

        self._tk_image = ImageTk.PhotoImage(resized)
        x = (canvas_w - scaled_w) // 2
        y = (canvas_h - scaled_h) // 2
        self._canvas.create_image(x, y, image=self._tk_image, anchor="nw")

    def _get_canvas_bg(self) -> str:
        # CTk does not expose canvas theme, so pick neutral
        return "#1f1f1f" if ctk.get_appearance_mode().lower() == "dark" else "#f2f2f2"

    def _on_space_down(self, _event: tk.Event) -> None:
        if not self._hold_before_active:
            self._hold_before_active = True
            self._render_image()

    def _on_space_up(self, _event: tk.Event) -> None:
        if self._hold_before_active:
            self._hold_before_active = False
            self._render_image()
