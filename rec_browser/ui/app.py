from __future__ import annotations

import logging
from typing import Optional

from rich.text import Text
from textual import events
from textual.app import App, ComposeResult
from textual.message import Message
from textual.widgets import DataTable, Static

from rec_browser.core.navigator import Command, FrameModel, Navigator
from rec_browser.ui.card import render_card
from rec_browser.ui.footer import footer_text
from rec_browser.ui.input import InputDispatcher

logger = logging.getLogger(__name__)

HEADER_STYLE = "yellow"
TIMELINE_HEADER = "timeline"


class RecordTable(DataTable, inherit_bindings=False):
    """
    DataTable that never moves its own cursor.

    Keys are left to the app's dispatcher, the mouse wheel is turned into
    `Wheel` messages and clicks are swallowed, so the highlighted row is
    always the navigator's selection.
    """

    class Wheel(Message):
        def __init__(self, event_name: str) -> None:
            super().__init__()
            self.event_name = event_name

    def on_mouse_scroll_down(self, event: events.MouseScrollDown) -> None:
        event.prevent_default()
        event.stop()
        self.post_message(self.Wheel("scroll_down"))

    def on_mouse_scroll_up(self, event: events.MouseScrollUp) -> None:
        event.prevent_default()
        event.stop()
        self.post_message(self.Wheel("scroll_up"))

    def on_click(self, event: events.Click) -> None:
        event.prevent_default()
        event.stop()


class RecordBrowserApp(App):
    """
    Terminal renderer for a Navigator.

    Keys and wheel events go through the InputDispatcher and become
    navigation commands; after each command the
    whole frame is redrawn from `Navigator.frame_model()`.
    """

    CSS = """
    #records {
        height: 1fr;
    }
    #card {
        height: auto;
        max-height: 60%;
        border-top: solid $accent;
    }
    #footer {
        height: 1;
        text-style: reverse;
    }
    """

    def __init__(self, navigator: Navigator, dispatcher: Optional[InputDispatcher] = None) -> None:
        super().__init__()
        self.navigator = navigator
        self.dispatcher = dispatcher or InputDispatcher()

    def compose(self) -> ComposeResult:
        yield RecordTable(id="records", cursor_type="row")
        yield Static(id="card")
        yield Static(id="footer")

    def on_mount(self) -> None:
        self.refresh_frame()

    # -------------------------------------------------------------------------
    # Input
    # -------------------------------------------------------------------------
    def on_key(self, event: events.Key) -> None:
        command = self.dispatcher.translate_key(event.key)
        if command is None:
            return
        event.prevent_default()
        event.stop()
        self.run_command(command)

    def on_record_table_wheel(self, message: RecordTable.Wheel) -> None:
        command = self.dispatcher.translate_mouse(message.event_name)
        if command is not None:
            self.run_command(command)

    def run_command(self, command: Command) -> None:
        if not self.navigator.dispatch(command):
            logger.info("Session ended", extra={"command": command.value})
            self.exit()
            return
        self.refresh_frame()

    # -------------------------------------------------------------------------
    # Drawing
    # -------------------------------------------------------------------------
    def refresh_frame(self) -> None:
        model = self.navigator.frame_model()
        self._draw_table(model)

        card = self.query_one("#card", Static)
        if model.detail_card is not None:
            card.update(render_card(model.detail_card))
            card.display = True
        else:
            card.update("")
            card.display = False

        self.query_one("#footer", Static).update(footer_text(model))

    def _draw_table(self, model: FrameModel) -> None:
        table = self.query_one(RecordTable)
        table.clear(columns=True)

        widths = model.widths or [None] * len(model.headers)
        for header, width in zip(model.headers, widths):
            table.add_column(Text(header, style=HEADER_STYLE), width=width)
        if model.has_timeline:
            table.add_column(Text(TIMELINE_HEADER, style=HEADER_STYLE))

        for row in model.rows:
            cells = [Text(cell.text, style=cell.color.hex) for cell in row.cells]
            if model.has_timeline:
                cells.append(Text(row.timeline or ""))
            table.add_row(*cells)

        if model.rows:
            table.move_cursor(row=model.selection)
