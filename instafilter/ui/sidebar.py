"""Боковая панель: открытие файла, информация, параметры активного фильтра.

Принципы:
- SRP: управляет только UI параметров, не содержит алгоритмов.
- ISP: события через `on_*`, состояние выставляет контроллер через `set_*`.
"""
from __future__ import annotations

from typing import Callable, Dict, Optional, Tuple

import customtkinter as ctk

from instafilter.models.filter_model import FilterDescriptor, FilterParam, FilterParameters
from instafilter.models.image_model import ImageData

_PARAM_LABELS: Dict[FilterParam, str] = {
    FilterParam.INTENSITY: "Интенсивность",
    FilterParam.RADIUS: "Радиус",
    FilterParam.SCALE: "Масштаб",
}

# шаги слайдеров: intensity 0..1 по 0.01, radius/scale по 1
_PARAM_STEPS: Dict[FilterParam, int] = {
    FilterParam.INTENSITY: 100,
    FilterParam.RADIUS: 200,
    FilterParam.SCALE: 100,
}


class Sidebar(ctk.CTkFrame):
    """Панель инструментов с блоками: файл, информация, параметры фильтра."""
    def __init__(self, master: ctk.CTk, **kwargs) -> None:
        super().__init__(master, width=280, **kwargs)

        self.grid_columnconfigure(0, weight=1)

        # Callbacks
        self.on_open_file: Optional[Callable[[], None]] = None
        self.on_parameter_change: Optional[Callable[[FilterParam, float], None]] = None

        # Controls
        self._title = ctk.CTkLabel(self, text="Инструменты", font=ctk.CTkFont(size=16, weight="bold"))
        self._title.grid(row=0, column=0, padx=8, pady=(8, 4), sticky="w")

        self._open_btn = ctk.CTkButton(self, text="Открыть изображение…", command=self._emit_open_file)
        self._open_btn.grid(row=1, column=0, padx=8, pady=(0, 12), sticky="ew")

        # Info section
        self._info_title = ctk.CTkLabel(self, text="Информация", font=ctk.CTkFont(size=16, weight="bold"))
        self._info_title.grid(row=2, column=0, padx=8, pady=(8, 4), sticky="w")

        self._path_val = ctk.StringVar(value="—")
        self._size_val = ctk.StringVar(value="—")
        self._dims_val = ctk.StringVar(value="—")
        self._mode_val = ctk.StringVar(value="—")

        self._info_path = ctk.CTkLabel(self, textvariable=self._path_val, wraplength=250, anchor="w", justify="left")
        self._info_size = ctk.CTkLabel(self, textvariable=self._size_val, anchor="w", justify="left")
        self._info_dims = ctk.CTkLabel(self, textvariable=self._dims_val, anchor="w", justify="left")
        self._info_mode = ctk.CTkLabel(self, textvariable=self._mode_val, anchor="w", justify="left")

        self._info_path.grid(row=3, column=0, padx=8, pady=(0, 2), sticky="ew")
        self._info_size.grid(row=4, column=0, padx=8, pady=(0, 2), sticky="ew")
        self._info_dims.grid(row=5, column=0, padx=8, pady=(0, 2), sticky="ew")
        self._info_mode.grid(row=6, column=0, padx=8, pady=(0, 10), sticky="ew")

        # Filter parameters
        self._filter_title = ctk.CTkLabel(self, text="Фильтр", font=ctk.CTkFont(size=16, weight="bold"))
        self._filter_title.grid(row=7, column=0, padx=8, pady=(8, 4), sticky="w")
        self._filter_name_val = ctk.StringVar(value="—")
        self._filter_name = ctk.CTkLabel(self, textvariable=self._filter_name_val, anchor="w", justify="left")
        self._filter_name.grid(row=8, column=0, padx=8, pady=(0, 6), sticky="ew")
        self._no_params = ctk.CTkLabel(self, text="Без параметров", anchor="w", text_color="gray")

        # по три строки на параметр: подпись, слайдер, значение
        self._param_widgets: Dict[FilterParam, Tuple[ctk.CTkLabel, ctk.CTkSlider, ctk.CTkLabel]] = {}
        self._param_vals: Dict[FilterParam, ctk.StringVar] = {}
        self._param_rows: Dict[FilterParam, int] = {}
        row = 10
        for param in FilterParam:
            lo, hi = param.bounds
            value_var = ctk.StringVar(value="—")
            label = ctk.CTkLabel(self, text=_PARAM_LABELS[param])
            slider = ctk.CTkSlider(
                self,
                from_=lo,
                to=hi,
                number_of_steps=_PARAM_STEPS[param],
                command=lambda value, p=param: self._on_param_slider(p, value),
            )
            value_label = ctk.CTkLabel(self, textvariable=value_var, width=48, anchor="w")
            self._param_widgets[param] = (label, slider, value_label)
            self._param_vals[param] = value_var
            self._param_rows[param] = row
            row += 3

        # filler
        self.grid_rowconfigure(99, weight=1)

    # ---- Public API ----
    def set_image_info(self, image_data: Optional[ImageData]) -> None:
        """Отображает метаданные загруженного изображения."""
        if image_data is None:
            for var in (self._path_val, self._size_val, self._dims_val, self._mode_val):
                var.set("—")
            return
        self._path_val.set(str(image_data.path) if image_data.path else "—")
        self._size_val.set(self._format_size(image_data.size_bytes))
        self._dims_val.set(f"{image_data.width} × {image_data.height} px")
        self._mode_val.set(image_data.mode)

    def set_filter(self, descriptor: FilterDescriptor, parameters: FilterParameters) -> None:
        """Показывает слайдеры только для параметров, которые принимает фильтр."""
        self._filter_name_val.set(descriptor.title)
        for param in FilterParam:
            label, slider, value_label = self._param_widgets[param]
            if descriptor.supports(param):
                row = self._param_rows[param]
                value = parameters.get(param)
                slider.set(value)
                self._param_vals[param].set(self._format_value(param, value))
                label.grid(row=row, column=0, padx=8, pady=(0, 2), sticky="w")
                slider.grid(row=row + 1, column=0, padx=8, pady=(0, 2), sticky="ew")
                value_label.grid(row=row + 2, column=0, padx=8, pady=(0, 6), sticky="w")
            else:
                label.grid_remove()
                slider.grid_remove()
                value_label.grid_remove()
        if descriptor.params:
            self._no_params.grid_remove()
        else:
            self._no_params.grid(row=9, column=0, padx=8, pady=(0, 6), sticky="w")

    # ---- Events ----
    def _emit_open_file(self) -> None:
        if self.on_open_file:
            self.on_open_file()

    def _on_param_slider(self, param: FilterParam, value: float) -> None:
        self._param_vals[param].set(self._format_value(param, value))
        if self.on_parameter_change:
            self.on_parameter_change(param, float(value))

    # ---- Helpers ----
    @staticmethod
    def _format_value(param: FilterParam, value: float) -> str:
        if param is FilterParam.INTENSITY:
            return f"{value:.2f}"
        return f"{int(round(value))}"

    def _format_size(self, size_bytes: Optional[int]) -> str:
        if size_bytes is None:
            return "—"
        thresholds = [("Б", 1024), ("КБ", 1024**2), ("МБ", 1024**3), ("ГБ", 1024**4)]
        for label, limit in thresholds:
            if size_bytes < limit:
                if label == "Б":
                    return f"{size_bytes} {label}"
                value = size_bytes / (limit // 1024)
                return f"{value:.1f} {label}"
        value = size_bytes / (1024**4)
        return f"{value:.1f} ГБ"
