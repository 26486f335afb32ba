"""CandidApp — main Textual application."""

from __future__ import annotations

from pathlib import Path

from textual.app import App
from textual.binding import Binding

from .state import AppState


class CandidApp(App):
    """candidkit TUI — compose and check canister call arguments."""

    TITLE = "CANDIDKIT"
    SUB_TITLE = "canister arguments"

    BINDINGS = [
        Binding("ctrl+q", "quit", "Quit", show=True),
        Binding("f10", "quit_app", "Quit", show=False),
    ]

    def __init__(self, candid_path: Path, config: str | None = None) -> None:
        super().__init__()
        self.app_state = AppState(candid_path=candid_path, config=config)

    def on_mount(self) -> None:
        from .screens.editor import EditorScreen

        self.push_screen(EditorScreen())

    def action_quit_app(self) -> None:
        self.exit()
