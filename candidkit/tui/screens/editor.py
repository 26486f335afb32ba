"""EditorScreen — method list, resolved types and a live-validated JSON editor."""

from __future__ import annotations

from rich.markup import escape
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import Screen
from textual.widgets import Button, Footer, OptionList, Static, TextArea
from textual.widgets.option_list import Option

from ..commands import cmd_encode, cmd_load, cmd_select_method, cmd_validate
from ..widgets.log_panel import LogPanel


class EditorScreen(Screen):
    """Single working screen of the TUI."""

    DEFAULT_CSS = """
    EditorScreen #editor-main {
        height: 1fr;
    }
    EditorScreen #editor-methods {
        width: 32;
        background: #0a0e17;
        border: solid #1a3a4a;
    }
    EditorScreen #editor-detail {
        width: 1fr;
        padding: 0 1;
    }
    EditorScreen #editor-signature {
        color: #00ffcc;
        height: auto;
    }
    EditorScreen #editor-types {
        color: #8892a4;
        height: auto;
        margin-bottom: 1;
    }
    EditorScreen #editor-json {
        height: 1fr;
        border: solid #1a3a4a;
    }
    EditorScreen #editor-status {
        height: auto;
        min-height: 1;
    }
    EditorScreen .form-row {
        height: auto;
    }
    """

    BINDINGS = [
        Binding("ctrl+r", "reset_example", "Reset Example"),
        Binding("ctrl+e", "encode", "Encode"),
    ]

    def compose(self) -> ComposeResult:
        with Horizontal(id="editor-main"):
            yield OptionList(id="editor-methods")
            with Vertical(id="editor-detail"):
                yield Static("[#8892a4]Select a method[/]", id="editor-signature")
                yield Static("", id="editor-types")
                yield TextArea("", id="editor-json")
                yield Static("", id="editor-status")
                with Horizontal(classes="form-row"):
                    yield Button("Reset Example", id="btn-reset")
                    yield Button("Encode", id="btn-encode", variant="primary")
        yield LogPanel(id="editor-log")
        yield Footer()

    def on_mount(self) -> None:
        state = self.app.app_state  # type: ignore[attr-defined]
        result = cmd_load(state.candid_path, state.config)
        log = self.query_one("#editor-log", LogPanel)
        if not result.success:
            log.log_error(result.message)
            return
        state.source = result.data["source"]
        state.interface = result.data["interface"]
        state.settings = result.data["settings"]
        log.log_success(result.message)
        methods = self.query_one("#editor-methods", OptionList)
        for m in state.interface.methods:
            methods.add_option(Option(f"{m.name}  ({m.kind.value})", id=m.name))
        methods.focus()

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        state = self.app.app_state  # type: ignore[attr-defined]
        if state.interface is None or event.option.id is None:
            return
        result = cmd_select_method(state.source, state.interface, event.option.id, state.settings)
        log = self.query_one("#editor-log", LogPanel)
        if not result.success:
            log.log_error(result.message)
            return
        state.select_method(result.data["method"], result.data["resolved"], result.data["example"])
        self.query_one("#editor-signature", Static).update(escape(result.message))
        self._show_types(result.data["resolved"])
        self.query_one("#editor-json", TextArea).load_text(result.data["example"])
        log.log_info(f"Selected {result.data['method'].name}")

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        state = self.app.app_state  # type: ignore[attr-defined]
        if state.editor.method is None:
            return
        result = cmd_validate(state.editor.resolved_args, event.text_area.text)
        state.editor.last_errors = result.errors
        status = self.query_one("#editor-status", Static)
        if result.success:
            status.update(f"[#39ff14]{result.message}[/]")
        else:
            lines = "\n".join(escape(e) for e in result.errors)
            status.update(f"[#ff3366]{lines}[/]")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "btn-reset":
            self.action_reset_example()
        elif event.button.id == "btn-encode":
            self.action_encode()

    def action_reset_example(self) -> None:
        state = self.app.app_state  # type: ignore[attr-defined]
        if state.editor.method is None:
            return
        self.query_one("#editor-json", TextArea).load_text(state.editor.example)

    def action_encode(self) -> None:
        state = self.app.app_state  # type: ignore[attr-defined]
        log = self.query_one("#editor-log", LogPanel)
        if state.editor.method is None:
            log.log_error("No method selected")
            return
        text = self.query_one("#editor-json", TextArea).text
        result = cmd_encode(state.editor.resolved_args, text)
        if result.success:
            log.log_candid(state.editor.method.name, result.message)
        else:
            log.log_problems(result.message, result.errors)

    def _show_types(self, resolved: list[str]) -> None:
        if not resolved:
            text = "[#555e6e](no arguments)[/]"
        else:
            text = "\n".join(f"[#8892a4]arg{i}:[/] {escape(t)}" for i, t in enumerate(resolved))
        self.query_one("#editor-types", Static).update(text)
