from __future__ import annotations

import typing

from rich import console as rich_console
from rich import segment as rich_segment
from rich import style as rich_style
from rich import text as rich_text

from richinput.models import CLOSED_STATE, Candidate, Emoji, SelectionState, User
from richinput.settings import InputSettings


Lines = list[list[rich_segment.Segment]]
DEFAULT_MAX_VISIBLE_ITEMS: typing.Final[int] = 5
SELECTED_STYLE: typing.Final[rich_style.Style] = rich_style.Style(reverse=True)
BADGE_STYLE: typing.Final[rich_style.Style] = rich_style.Style(bold=True)
DETAIL_STYLE: typing.Final[rich_style.Style] = rich_style.Style(dim=True)


def format_candidate(candidate: Candidate) -> rich_text.Text:
    text = rich_text.Text(no_wrap=True, overflow="ellipsis")
    if isinstance(candidate, User):
        initial = candidate.name[:1].upper() or "?"
        text.append(f"[{initial}]", style=BADGE_STYLE)
        text.append(" ")
        text.append(candidate.name)
        if candidate.email:
            text.append(" ")
            text.append(candidate.email, style=DETAIL_STYLE)
    elif isinstance(candidate, Emoji):
        text.append(candidate.glyph)
        text.append(" ")
        text.append(f":{candidate.name}:")
    return text


def _hint(total: int, visible: int, max_visible: int) -> str:
    if total <= max_visible:
        if total == 1:
            return "1 item"
        return f"{total} items"
    return f"Showing {visible} of {total} items"


class PopupRenderer:
    """Renders popup state as terminal lines.

    Subscribe an instance to ``RichTextInput.subscribe_state``; each call
    records the state, and ``render`` draws the current window of entries.
    """

    def __init__(
        self,
        console: rich_console.Console | None = None,
        max_visible_items: int = DEFAULT_MAX_VISIBLE_ITEMS,
    ) -> None:
        self._console = console if console is not None else rich_console.Console()
        self._max_visible_items = max(max_visible_items, 1)
        self._state: SelectionState = CLOSED_STATE
        self._view_offset: int = 0

    @classmethod
    def from_settings(
        cls,
        settings: InputSettings,
        console: rich_console.Console | None = None,
    ) -> "PopupRenderer":
        return cls(console=console, max_visible_items=settings.max_visible_items)

    def __call__(self, state: SelectionState) -> None:
        self.update(state)

    @property
    def state(self) -> SelectionState:
        return self._state

    @property
    def view_offset(self) -> int:
        return self._view_offset

    def update(self, state: SelectionState) -> None:
        if state.candidates != self._state.candidates:
            self._view_offset = 0
        self._state = state
        self._sync_view_offset()

    def render(self, options: rich_console.ConsoleOptions | None = None) -> Lines:
        state = self._state
        if not state.is_open:
            return []
        console = self._console
        if options is None:
            options = console.options
        width = options.max_width or console.width
        start = self._view_offset
        end = start + self._max_visible_items
        visible = state.candidates[start:end]
        lines: Lines = []
        for index, candidate in enumerate(visible):
            item_lines = console.render_lines(
                format_candidate(candidate),
                options=options,
                pad=False,
                new_lines=False,
            )
            is_selected = (start + index) == state.selected_index
            for line in item_lines:
                current_len = 0
                new_line: list[rich_segment.Segment] = []
                for segment in line:
                    current_len += segment.cell_length
                    if is_selected:
                        base_style = segment.style
                        if isinstance(base_style, rich_style.Style):
                            style = base_style + SELECTED_STYLE
                        else:
                            style = SELECTED_STYLE
                        new_line.append(rich_segment.Segment(segment.text, style=style))
                    else:
                        new_line.append(segment)
                pad = width - current_len
                if pad > 0:
                    pad_style = SELECTED_STYLE if is_selected else None
                    new_line.append(rich_segment.Segment(" " * pad, style=pad_style))
                lines.append(new_line)
        hint_text = rich_text.Text(
            _hint(len(state.candidates), len(visible), self._max_visible_items),
            style="dim",
        )
        hint_lines = console.render_lines(
            hint_text,
            options=options,
            pad=False,
            new_lines=False,
        )
        lines.extend(typing.cast(Lines, hint_lines))
        return lines

    def render_plain(self) -> list[str]:
        return [
            "".join(segment.text for segment in line).rstrip()
            for line in self.render()
        ]

    def _sync_view_offset(self) -> None:
        state = self._state
        if not state.is_open:
            self._view_offset = 0
            return
        max_offset = max(len(state.candidates) - self._max_visible_items, 0)
        if self._view_offset > max_offset:
            self._view_offset = max_offset
        selected = state.selected_index
        if selected < self._view_offset:
            self._view_offset = selected
        elif selected >= self._view_offset + self._max_visible_items:
            self._view_offset = selected - self._max_visible_items + 1
