from __future__ import annotations

from typing import Dict, Mapping, Optional

from rec_browser.core.navigator import Command

DEFAULT_KEYMAP: Dict[str, Command] = {
    "up": Command.MOVE_UP,
    "w": Command.MOVE_UP,
    "down": Command.MOVE_DOWN,
    "s": Command.MOVE_DOWN,
    "enter": Command.FOCUS,
    "escape": Command.BACK,
    "q": Command.BACK,
    "ctrl+c": Command.QUIT,
}

DEFAULT_MOUSEMAP: Dict[str, Command] = {
    "scroll_up": Command.MOVE_UP,
    "scroll_down": Command.MOVE_DOWN,
}


class InputDispatcher:
    """
    Translates device event names into navigation commands.

    Key names follow Textual's naming ("up", "enter", "ctrl+c"); mouse events
    are "scroll_up" / "scroll_down". Unmapped events translate to None.
    """

    def __init__(
        self,
        keymap: Optional[Mapping[str, Command]] = None,
        mousemap: Optional[Mapping[str, Command]] = None,
    ) -> None:
        self._keymap: Dict[str, Command] = dict(DEFAULT_KEYMAP if keymap is None else keymap)
        self._mousemap: Dict[str, Command] = dict(DEFAULT_MOUSEMAP if mousemap is None else mousemap)

    def translate_key(self, key: str) -> Optional[Command]:
        return self._keymap.get(key)

    def translate_mouse(self, event_name: str) -> Optional[Command]:
        return self._mousemap.get(event_name)
