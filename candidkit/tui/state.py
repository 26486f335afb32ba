"""State container for the candidkit TUI."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..interface import MethodInfo, ParsedInterface


@dataclass
class EditorState:
    """The method being edited and its resolved argument types."""

    method: MethodInfo | None = None
    resolved_args: list[str] = field(default_factory=list)
    example: str = ""
    last_errors: list[str] = field(default_factory=list)


class AppState:
    """Central state container for the TUI application."""

    def __init__(self, candid_path: Path, config: str | None = None) -> None:
        self.candid_path = candid_path
        self.config = config
        self.source: str = ""
        self.interface: ParsedInterface | None = None
        self.settings: dict[str, dict[str, Any]] = {}
        self.editor: EditorState = EditorState()

    def select_method(self, method: MethodInfo, resolved_args: list[str], example: str) -> None:
        self.editor = EditorState(method=method, resolved_args=resolved_args, example=example)
