"""Контроллер приложения: связывает UI с пайплайном фильтрации.

SOLID:
- SRP: класс управляет связями между UI и пайплайном (без логики обработки изображений).
- DIP: зависит от пайплайна и сервисов как от ролей; UI только наблюдает за результатом.
Clean Code:
- Обработчики компактны; всё состояние фильтра живёт в `FilterPipeline`.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from tkinter import filedialog, TclError
from typing import Optional

import customtkinter as ctk

from instafilter.models.filter_catalog import find_by_title
from instafilter.models.filter_model import FilterParam
from instafilter.models.image_model import RenderedImage
from instafilter.services.filter_pipeline import FilterPipeline
from instafilter.services.image_service import ImageService
from instafilter.ui.bottom_bar import BottomBar
from instafilter.ui.image_viewer import ImageViewer
from instafilter.ui.sidebar import Sidebar
from instafilter.utils.logging import get_logger

logger = get_logger("controller")

_IMAGE_FILETYPES = (
    ("Images", "*.png *.jpg *.jpeg *.bmp *.gif *.tiff *.webp"),
    ("All files", "*.*"),
)


@dataclass
class AppController:
    """Связывает элементы UI с пайплайном.

    Ответственности:
    - Инициализация и бинд событий (UI -> контроллер).
    - Загрузка изображений через `ImageService` и передача их в пайплайн.
    - Смена фильтра и параметров; показ результата через подписку на пайплайн.
    - Экспорт («Поделиться») текущего результата.
    """
    viewer: ImageViewer
    sidebar: Sidebar
    bottom: BottomBar
    window: ctk.CTk
    pipeline: FilterPipeline = field(default_factory=FilterPipeline)

    _image_service: ImageService = field(default_factory=ImageService)

    def bind_events(self) -> None:
        """Регистрирует обработчики событий между UI-компонентами.

        Сохраняет слабую связность: компоненты UI ничего не знают друг о друге,
        общаются через контроллер.
        """
        self.sidebar.on_open_file = self._handle_open_file
        self.sidebar.on_parameter_change = self._handle_parameter_change
        self.viewer.on_request_open = self._handle_open_file

        self.bottom.on_filter_change = self._handle_filter_change
        self.bottom.on_share = self._handle_share

        self.pipeline.subscribe(self._handle_rendered)
        self._sync_filter_controls()

    def open_path(self, file_path: str | Path) -> bool:
        """Открывает файл и делает его источником пайплайна."""
        try:
            image_data = self._image_service.load_image(file_path)
        except (FileNotFoundError, ValueError) as exc:
            logger.warning("Cannot open %s: %s", file_path, exc)
            return False

        self.viewer.set_image(image_data.pil_image)
        if not self.pipeline.set_source(image_data):
            return False
        self.sidebar.set_image_info(image_data)
        self.bottom.set_image_selected(True)
        return True

    def select_filter(self, kind: str) -> None:
        self.pipeline.set_filter(kind)
        self._sync_filter_controls()

    # ---- Handlers ----
    def _handle_open_file(self) -> None:
        try:
            file_path = filedialog.askopenfilename(title="Выберите изображение", filetypes=_IMAGE_FILETYPES)
        except TclError:
            # Silent fail if dialog cannot open
            return

        if not file_path:
            return
        self.open_path(file_path)

    def _handle_filter_change(self, title: str) -> None:
        try:
            descriptor = find_by_title(title)
        except KeyError:
            logger.warning("Unknown filter selected: %s", title)
            return
        self.select_filter(descriptor.kind.value)

    def _handle_parameter_change(self, param: FilterParam, value: float) -> None:
        self.pipeline.set_parameter(param, value)

    def _handle_rendered(self, rendered: Optional[RenderedImage]) -> None:
        self.viewer.set_processed_image(rendered.pil_image if rendered is not None else None)

    def _handle_share(self) -> None:
        rendered = self.pipeline.rendered
        if rendered is None:
            return
        try:
            file_path = filedialog.asksaveasfilename(
                title="Сохранить изображение",
                defaultextension=".png",
                initialfile=f"instafilter-{rendered.descriptor.kind.value}.png",
                filetypes=(("PNG", "*.png"), ("JPEG", "*.jpg *.jpeg")),
            )
        except TclError:
            return

        if not file_path:
            return
        try:
            saved = self._image_service.save_image(rendered.pil_image, file_path)
        except (OSError, ValueError) as exc:
            logger.warning("Cannot save %s: %s", file_path, exc)
            return
        logger.info("Saved filtered image to %s", saved)

    # ---- Helpers ----
    def _sync_filter_controls(self) -> None:
        descriptor = self.pipeline.descriptor
        self.sidebar.set_filter(descriptor, self.pipeline.parameters)
        self.bottom.set_filter_title(descriptor.title)
