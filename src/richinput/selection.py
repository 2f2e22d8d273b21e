from __future__ import annotations

import typing

from richinput.logger import logger
from richinput.models import (
    CLOSED_STATE,
    Candidate,
    SelectionState,
    TriggerKind,
)


class SelectionMachine:
    """Closed/Open popup state with a clamped selection index.

    There is a single active kind, so at most one popup is ever open.
    """

    def __init__(self) -> None:
        self._kind: TriggerKind = TriggerKind.NONE
        self._candidates: tuple[Candidate, ...] = ()
        self._selected_index: int = 0

    @property
    def is_open(self) -> bool:
        return self._kind is not TriggerKind.NONE and bool(self._candidates)

    @property
    def active_kind(self) -> TriggerKind:
        return self._kind if self.is_open else TriggerKind.NONE

    @property
    def candidates(self) -> tuple[Candidate, ...]:
        return self._candidates

    @property
    def selected_index(self) -> int | None:
        if not self.is_open:
            return None
        return self._selected_index

    @property
    def selected_candidate(self) -> Candidate | None:
        if not self.is_open:
            return None
        index = self._selected_index
        if index < 0 or index >= len(self._candidates):
            return None
        return self._candidates[index]

    @property
    def state(self) -> SelectionState:
        if not self.is_open:
            return CLOSED_STATE
        return SelectionState(
            active_kind=self._kind,
            candidates=self._candidates,
            selected_index=self._selected_index,
        )

    def open(self, kind: TriggerKind, candidates: typing.Iterable[Candidate]) -> None:
        items = tuple(candidates)
        if kind is TriggerKind.NONE or not items:
            self.close()
            return
        was_open = self.is_open
        self._kind = kind
        self._candidates = items
        self._selected_index = 0
        if not was_open:
            logger.debug("popup opened", kind=kind.value, count=len(items))

    def close(self) -> None:
        if self.is_open:
            logger.debug("popup closed", kind=self._kind.value)
        self._kind = TriggerKind.NONE
        self._candidates = ()
        self._selected_index = 0

    def move_next(self) -> None:
        if not self.is_open:
            return
        if self._selected_index >= len(self._candidates) - 1:
            return
        self._selected_index += 1

    def move_previous(self) -> None:
        if not self.is_open:
            return
        if self._selected_index == 0:
            return
        self._selected_index -= 1

    def select_index(self, index: int) -> None:
        if not self.is_open:
            return
        if index < 0:
            index = 0
        if index >= len(self._candidates):
            index = len(self._candidates) - 1
        self._selected_index = index

    def commit(self) -> Candidate | None:
        candidate = self.selected_candidate
        self.close()
        return candidate

    def escape(self) -> None:
        self.close()
