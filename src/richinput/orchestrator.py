from __future__ import annotations

import typing
from dataclasses import dataclass

from richinput import scanner as richinput_scanner
from richinput import splicer as richinput_splicer
from richinput.candidates import CandidateProvider
from richinput.input import base as input_base
from richinput.logger import logger
from richinput.models import (
    CLOSED_SPAN,
    Candidate,
    Emoji,
    InputBuffer,
    SelectionState,
    TriggerSpan,
)
from richinput.selection import SelectionMachine
from richinput.settings import InputSettings


StateSubscriber = typing.Callable[[SelectionState], None]
EditSubscriber = typing.Callable[[InputBuffer], None]

# Browser key names and terminal key names map onto the same bindings
KEY_ALIASES: typing.Final[dict[str, str]] = {
    "ArrowDown": "down",
    "ArrowUp": "up",
    "Enter": "enter",
    "Tab": "tab",
    "Escape": "escape",
    "Esc": "escape",
    "esc": "escape",
}


@dataclass(frozen=True)
class KeyBinding:
    key: str
    ctrl: bool = False
    alt: bool = False
    shift: bool = False


@dataclass(frozen=True)
class PasteResult:
    suppress_default: bool
    buffer: InputBuffer


def normalize_key(key: str) -> str:
    return KEY_ALIASES.get(key, key)


class RichTextInput:
    """Completion engine for one text input surface.

    The host reports every text change, key press and paste. Presenters
    subscribe to popup state changes, and the input surface subscribes to
    edits so it can write back text and cursor after a commit or a paste
    rewrite.
    """

    def __init__(
        self,
        settings: InputSettings | None = None,
        users: typing.Any = None,
        emojis: typing.Iterable[Emoji] | None = None,
    ) -> None:
        self._settings = settings if settings is not None else InputSettings()
        self._rules = richinput_scanner.rules_from_settings(self._settings)
        if emojis is None:
            self._provider = CandidateProvider(users=users)
        else:
            self._provider = CandidateProvider(users=users, emojis=emojis)
        self._selection = SelectionMachine()
        self._buffer = InputBuffer()
        self._span: TriggerSpan = CLOSED_SPAN
        self._state_subscribers: list[StateSubscriber] = []
        self._edit_subscribers: list[EditSubscriber] = []
        self._keymap = self._create_keymap()

    @property
    def settings(self) -> InputSettings:
        return self._settings

    @property
    def provider(self) -> CandidateProvider:
        return self._provider

    @property
    def buffer(self) -> InputBuffer:
        return self._buffer

    @property
    def span(self) -> TriggerSpan:
        return self._span

    @property
    def state(self) -> SelectionState:
        return self._selection.state

    @property
    def is_popup_open(self) -> bool:
        return self._selection.is_open

    def _create_keymap(self) -> dict[KeyBinding, typing.Callable[[], None]]:
        return {
            KeyBinding("down"): self.select_next,
            KeyBinding("up"): self.select_previous,
            KeyBinding("enter"): self.commit,
            KeyBinding("tab"): self.commit,
            KeyBinding("escape"): self.dismiss,
        }

    def set_users(self, users: typing.Any) -> None:
        self._provider.set_users(users)

    def subscribe_state(self, subscriber: StateSubscriber) -> None:
        self._state_subscribers.append(subscriber)

    def subscribe_edit(self, subscriber: EditSubscriber) -> None:
        self._edit_subscribers.append(subscriber)

    def attach(self, handler: input_base.InputHandler) -> None:
        handler.subscribe(self.handle_event)

    def detach(self, handler: input_base.InputHandler) -> None:
        handler.unsubscribe(self.handle_event)

    def handle_event(self, event: input_base.InputEvent) -> None:
        if isinstance(event, input_base.TextChangedEvent):
            self.handle_text_changed(event.text, event.cursor, event.selection_end)
        elif isinstance(event, input_base.KeyEvent):
            self.handle_key(event)
        elif isinstance(event, input_base.PasteEvent):
            self.handle_paste(event.text)
        elif isinstance(event, input_base.PopupPointerEvent):
            if event.action == "click":
                self.choose(event.index)
            else:
                self.hover(event.index)

    def handle_text_changed(
        self,
        text: str,
        cursor: int,
        selection_end: int | None = None,
    ) -> SelectionState:
        self._buffer = InputBuffer(
            text=text, cursor=cursor, selection_end=selection_end
        ).clamped()
        self._refresh()
        return self.state

    def handle_key(self, event: input_base.KeyEvent) -> bool:
        """Route a key to the open popup. Returns True when it was consumed."""
        if not self._selection.is_open:
            return False
        # Modifiers are ignored while the popup is open, Shift+Tab commits like Tab
        handler = self._keymap.get(KeyBinding(normalize_key(event.key)))
        if handler is None:
            return False
        if event.action == "down":
            handler()
        return True

    def handle_paste(self, text: str) -> PasteResult:
        if not self._settings.enable_auto_links:
            return PasteResult(suppress_default=False, buffer=self._buffer)
        processed = richinput_splicer.linkify_pasted_text(text)
        if processed == text:
            return PasteResult(suppress_default=False, buffer=self._buffer)
        self._buffer = richinput_splicer.insert_text_at_cursor(self._buffer, processed)
        logger.debug("paste rewritten", length=len(processed))
        self._publish_edit()
        self._refresh()
        return PasteResult(suppress_default=True, buffer=self._buffer)

    def select_next(self) -> None:
        self._selection.move_next()
        self._publish_state()

    def select_previous(self) -> None:
        self._selection.move_previous()
        self._publish_state()

    def hover(self, index: int) -> None:
        if not self._selection.is_open:
            return
        self._selection.select_index(index)
        self._publish_state()

    def choose(self, index: int) -> InputBuffer | None:
        if not self._selection.is_open:
            return None
        if index < 0 or index >= len(self._selection.candidates):
            return None
        self._selection.select_index(index)
        return self.commit()

    def dismiss(self) -> None:
        was_open = self._selection.is_open
        self._selection.escape()
        if was_open:
            self._publish_state()

    def commit(self) -> InputBuffer | None:
        if not self._selection.is_open:
            return None
        span = self._span
        candidate = self._selection.commit()
        self._span = CLOSED_SPAN
        result = self._apply(span, candidate)
        self._publish_state()
        return result

    def _apply(self, span: TriggerSpan, candidate: Candidate | None) -> InputBuffer | None:
        if candidate is None:
            return None
        result = richinput_splicer.splice_candidate(self._buffer.text, span, candidate)
        if result is None:
            return None
        self._buffer = result
        logger.debug("candidate inserted", kind=span.kind.value, cursor=result.cursor)
        self._publish_edit()
        return result

    def _refresh(self) -> None:
        buffer = self._buffer
        self._span = richinput_scanner.scan(buffer.text, buffer.cursor, self._rules)
        if self._span.is_open:
            self._selection.open(self._span.kind, self._provider.candidates_for(self._span))
        else:
            self._selection.close()
        self._publish_state()

    def _publish_state(self) -> None:
        state = self._selection.state
        for subscriber in list(self._state_subscribers):
            subscriber(state)

    def _publish_edit(self) -> None:
        buffer = self._buffer
        for subscriber in list(self._edit_subscribers):
            subscriber(buffer)
