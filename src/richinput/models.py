from __future__ import annotations

import typing
from enum import Enum
from typing import Annotated, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class TriggerKind(str, Enum):
    MENTION = "mention"
    EMOJI = "emoji"
    NONE = "none"


class TriggerSpan(BaseModel):
    """
    The open, not yet committed trigger token ending at the cursor.

    For an open span ``start_offset + 1 + len(query)`` is the cursor offset
    the span was scanned at. A closed span has kind ``NONE`` and an empty query.
    """

    model_config = ConfigDict(frozen=True)

    kind: TriggerKind = TriggerKind.NONE
    start_offset: int = Field(default=0, ge=0)
    query: str = ""
    # Character that opened the span, e.g. "@"
    trigger: str = ""

    @property
    def is_open(self) -> bool:
        return self.kind is not TriggerKind.NONE

    @property
    def end_offset(self) -> int:
        return self.start_offset + 1 + len(self.query)


CLOSED_SPAN: typing.Final[TriggerSpan] = TriggerSpan()


class User(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: typing.Literal["user"] = Field(default="user")
    id: Union[int, str]
    name: str
    email: str = ""


class Emoji(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: typing.Literal["emoji"] = Field(default="emoji")
    name: str
    glyph: str


Candidate = Annotated[Union[User, Emoji], Field(discriminator="kind")]
CandidateList = list[Candidate]


class SelectionState(BaseModel):
    """Snapshot of the popup handed to presenters."""

    model_config = ConfigDict(frozen=True)

    active_kind: TriggerKind = TriggerKind.NONE
    candidates: tuple[Candidate, ...] = ()
    selected_index: int = 0

    @property
    def is_open(self) -> bool:
        return self.active_kind is not TriggerKind.NONE and bool(self.candidates)

    @property
    def selected(self) -> Optional[Candidate]:
        if not self.is_open:
            return None
        if self.selected_index < 0 or self.selected_index >= len(self.candidates):
            return None
        return self.candidates[self.selected_index]


CLOSED_STATE: typing.Final[SelectionState] = SelectionState()


class InputBuffer(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str = ""
    cursor: int = 0
    # End of the selected range starting at cursor; None means no selection
    selection_end: Optional[int] = None

    @classmethod
    def at_end(cls, text: str) -> "InputBuffer":
        return cls(text=text, cursor=len(text))

    def clamped(self) -> "InputBuffer":
        cursor = min(max(self.cursor, 0), len(self.text))
        end = self.selection_end
        if end is not None:
            end = min(max(end, cursor), len(self.text))
            if end == cursor:
                end = None
        if cursor == self.cursor and end == self.selection_end:
            return self
        return InputBuffer(text=self.text, cursor=cursor, selection_end=end)
