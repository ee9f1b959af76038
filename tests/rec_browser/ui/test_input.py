from rec_browser.core.navigator import Command
from rec_browser.ui.input import InputDispatcher


def test_default_keymap():
    dispatcher = InputDispatcher()

    assert dispatcher.translate_key("up") is Command.MOVE_UP
    assert dispatcher.translate_key("w") is Command.MOVE_UP
    assert dispatcher.translate_key("s") is Command.MOVE_DOWN
    assert dispatcher.translate_key("enter") is Command.FOCUS
    assert dispatcher.translate_key("escape") is Command.BACK
    assert dispatcher.translate_key("q") is Command.BACK
    assert dispatcher.translate_key("ctrl+c") is Command.QUIT
    assert dispatcher.translate_key("x") is None


def test_mouse_wheel_moves_selection():
    dispatcher = InputDispatcher()

    assert dispatcher.translate_mouse("scroll_up") is Command.MOVE_UP
    assert dispatcher.translate_mouse("scroll_down") is Command.MOVE_DOWN
    assert dispatcher.translate_mouse("click") is None


def test_custom_keymap_replaces_defaults():
    dispatcher = InputDispatcher(keymap={"j": Command.MOVE_DOWN})

    assert dispatcher.translate_key("j") is Command.MOVE_DOWN
    assert dispatcher.translate_key("down") is None
