from __future__ import annotations

from rich.text import Text

from rec_browser.core.navigator import FrameModel


def footer_text(model: FrameModel) -> Text:
    """One-line status: mode label and 1-based position within the view."""
    return Text.assemble(
        "  ",
        (f"[{model.mode}]", "bold"),
        "  ",
        f"{model.selection + 1}/{model.total}",
    )
