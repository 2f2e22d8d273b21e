from __future__ import annotations

from . import base as _base

KeyAction = _base.KeyAction
PointerAction = _base.PointerAction
KeyEvent = _base.KeyEvent
PasteEvent = _base.PasteEvent
TextChangedEvent = _base.TextChangedEvent
PopupPointerEvent = _base.PopupPointerEvent
InputEvent = _base.InputEvent
EventSubscriber = _base.EventSubscriber
InputHandler = _base.InputHandler
