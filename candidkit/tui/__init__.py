"""candidkit TUI — interactive argument editor for canister methods."""

from __future__ import annotations

from pathlib import Path


def launch_tui(candid_path: Path, config: str | None = None) -> int:
    """Launch the candidkit TUI application."""
    from .app import CandidApp

    app = CandidApp(candid_path=candid_path, config=config)
    app.run()
    return 0
