"""LogPanel — scrollable log of loads, validation problems and encoded calls."""

from __future__ import annotations

from rich.markup import escape
from textual.widgets import RichLog


class LogPanel(RichLog):
    """Color-coded log for the argument editor."""

    DEFAULT_CSS = """
    LogPanel {
        background: #0a0e17;
        border: solid #1a3a4a;
        padding: 0 1;
        min-height: 6;
        max-height: 30%;
    }
    LogPanel:focus {
        border: solid #00ffcc;
    }
    """

    def __init__(self, **kwargs) -> None:
        super().__init__(highlight=False, markup=True, wrap=True, **kwargs)

    def log_info(self, message: str) -> None:
        self.write(f"[#8892a4]{escape(message)}[/]")

    def log_success(self, message: str) -> None:
        self.write(f"[#39ff14]{escape(message)}[/]")

    def log_error(self, message: str) -> None:
        self.write(f"[#ff3366]{escape(message)}[/]")

    def log_problems(self, title: str, problems: list[str]) -> None:
        """One line per problem, the argument path highlighted."""
        self.log_error(title)
        for problem in problems:
            path, _, rest = problem.partition(" ")
            if rest and (path.startswith("(root)") or path.startswith("arg")):
                self.write(f"  [#ffaa00]{escape(path)}[/] {escape(rest)}")
            else:
                self.write(f"  {escape(problem)}")

    def log_candid(self, method: str, encoded: str) -> None:
        self.write(f"[#8892a4]{escape(method)}[/] [#00ffcc]{escape(encoded)}[/]")
