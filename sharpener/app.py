import customtkinter as ctk

from sharpener.config import AppConfig
from sharpener.controllers.app_controller import AppController
from sharpener.ui.image_viewer import ImageViewer
from sharpener.ui.sidebar import Sidebar
from sharpener.ui.bottom_bar import BottomBar


class SharpenerApp(ctk.CTk):
    def __init__(self, config: AppConfig) -> None:
        super().__init__()
        ctk.set_appearance_mode("system")
        ctk.set_default_color_theme("blue")

        self.title("Sharpener")
        self.minsize(960, 640)

        # root layout: left viewer, right sidebar, bottom bar
        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(0, weight=1)
        self.grid_rowconfigure(1, weight=0)

        self._viewer = ImageViewer(self)
        self._viewer.grid(row=0, column=0, sticky="nsew", padx=(12, 6), pady=(12, 6))

        self._sidebar = Sidebar(self, sharpen=config.sharpen, tone=config.tone)
        self._sidebar.grid(row=0, column=1, sticky="ns", padx=(6, 12), pady=(12, 6))

        self._bottom = BottomBar(self)
        self._bottom.grid(row=1, column=0, columnspan=2, sticky="ew", padx=12, pady=(0, 12))

        self._controller = AppController(
            viewer=self._viewer, sidebar=self._sidebar, bottom=self._bottom, window=self, config=config
        )
        self._controller.bind_events()
