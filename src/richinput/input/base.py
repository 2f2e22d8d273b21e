from __future__ import annotations

import asyncio
import inspect
import typing
from dataclasses import dataclass


KeyAction = typing.Literal["down", "up"]
PointerAction = typing.Literal["hover", "click"]


@dataclass(frozen=True)
class KeyEvent:
    action: KeyAction
    key: str
    ctrl: bool = False
    alt: bool = False
    shift: bool = False
    text: typing.Optional[str] = None


@dataclass(frozen=True)
class PasteEvent:
    text: str


@dataclass(frozen=True)
class TextChangedEvent:
    text: str
    cursor: int
    selection_end: typing.Optional[int] = None


@dataclass(frozen=True)
class PopupPointerEvent:
    # Index into the currently displayed candidate list
    action: PointerAction
    index: int


InputEvent = typing.Union[KeyEvent, PasteEvent, TextChangedEvent, PopupPointerEvent]
EventSubscriber = typing.Callable[[InputEvent], typing.Awaitable[None] | None]


class InputHandler:
    def __init__(self) -> None:
        self._subscribers: list[EventSubscriber] = []
        # Pending async deliveries, held until done so they are not collected early
        self._tasks: set[asyncio.Task[None]] = set()

    def subscribe(self, subscriber: EventSubscriber) -> None:
        if subscriber not in self._subscribers:
            self._subscribers.append(subscriber)

    def unsubscribe(self, subscriber: EventSubscriber) -> None:
        if subscriber in self._subscribers:
            self._subscribers.remove(subscriber)

    def clear_subscribers(self) -> None:
        self._subscribers.clear()

    def publish(self, event: InputEvent) -> None:
        if not self._subscribers:
            return
        for subscriber in list(self._subscribers):
            result = subscriber(event)
            if inspect.isawaitable(result):
                loop = asyncio.get_running_loop()
                task = loop.create_task(
                    typing.cast(typing.Coroutine[typing.Any, typing.Any, None], result)
                )
                self._tasks.add(task)
                task.add_done_callback(self._tasks.discard)
