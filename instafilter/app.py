import customtkinter as ctk

from instafilter.config import AppConfig
from instafilter.controllers.app_controller import AppController
from instafilter.models.filter_catalog import FILTER_CATALOG
from instafilter.services.filter_pipeline import FilterPipeline
from instafilter.ui.bottom_bar import BottomBar
from instafilter.ui.image_viewer import ImageViewer
from instafilter.ui.sidebar import Sidebar


class InstafilterApp(ctk.CTk):
    def __init__(self, config: AppConfig) -> None:
        super().__init__()
        ctk.set_appearance_mode("system")
        ctk.set_default_color_theme("blue")

        self.title("Instafilter")
        self.minsize(900, 600)

        # root layout: left viewer, right sidebar
        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(0, weight=1)
        self.grid_rowconfigure(1, weight=0)

        self._viewer = ImageViewer(self)
        self._viewer.grid(row=0, column=0, sticky="nsew", padx=(12, 6), pady=(12, 6))

        self._sidebar = Sidebar(self)
        self._sidebar.grid(row=0, column=1, sticky="ns", padx=(6, 12), pady=(12, 6))

        titles = [descriptor.title for descriptor in FILTER_CATALOG.values()]
        self._bottom = BottomBar(self, filter_titles=titles)
        self._bottom.grid(row=1, column=0, columnspan=2, sticky="ew", padx=12, pady=(0, 12))

        pipeline = FilterPipeline(
            descriptor=config.default_descriptor(),
            parameters=config.default_parameters(),
        )
        self.controller = AppController(
            viewer=self._viewer,
            sidebar=self._sidebar,
            bottom=self._bottom,
            window=self,
            pipeline=pipeline,
        )
        self.controller.bind_events()
