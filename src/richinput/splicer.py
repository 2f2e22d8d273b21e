from __future__ import annotations

import re
import typing

from richinput.logger import logger
from richinput.models import Candidate, Emoji, InputBuffer, TriggerKind, TriggerSpan, User


# Angle brackets are outside the URL set and a URL already opened by "<" is
# skipped, so linkifying twice changes nothing.
URL_PATTERN: typing.Final[re.Pattern[str]] = re.compile(r"(?<!<)https?://[^\s<>]+")


TokenFormatter = typing.Callable[[Candidate], typing.Optional[str]]


def format_mention(candidate: Candidate) -> str | None:
    if not isinstance(candidate, User):
        return None
    return f"<@{candidate.id}|{candidate.name}>"


def format_emoji(candidate: Candidate) -> str | None:
    if not isinstance(candidate, Emoji):
        return None
    return f":{candidate.name}:"


TOKEN_FORMATTERS: typing.Final[dict[TriggerKind, TokenFormatter]] = {
    TriggerKind.MENTION: format_mention,
    TriggerKind.EMOJI: format_emoji,
}


def format_token(kind: TriggerKind, candidate: Candidate) -> str | None:
    formatter = TOKEN_FORMATTERS.get(kind)
    if formatter is None:
        return None
    return formatter(candidate)


def splice_candidate(
    text: str,
    span: TriggerSpan,
    candidate: Candidate,
) -> InputBuffer | None:
    """Replace the trigger span with the candidate's token.

    Returns None when the span does not describe ``text`` any more, e.g. it
    was scanned against an older version of the buffer.
    """
    if not span.is_open:
        return None
    start = span.start_offset
    end = span.end_offset
    if start < 0 or end > len(text):
        logger.warning(
            "splice span out of bounds",
            start=start,
            end=end,
            length=len(text),
        )
        return None
    if span.trigger and text[start:end] != span.trigger + span.query:
        logger.warning("splice span does not match text", start=start, end=end)
        return None

    token = format_token(span.kind, candidate)
    if token is None:
        logger.warning(
            "candidate does not match trigger kind",
            kind=span.kind.value,
            candidate=candidate.kind,
        )
        return None

    before = text[:start]
    after = text[end:]
    return InputBuffer(text=before + token + after, cursor=len(before) + len(token))


def linkify_pasted_text(text: str) -> str:
    return URL_PATTERN.sub(lambda m: f"<{m.group(0)}>", text)


def insert_text_at_cursor(buffer: InputBuffer, text: str) -> InputBuffer:
    buffer = buffer.clamped()
    start = buffer.cursor
    end = buffer.selection_end if buffer.selection_end is not None else start
    value = buffer.text
    return InputBuffer(
        text=value[:start] + text + value[end:],
        cursor=start + len(text),
    )
