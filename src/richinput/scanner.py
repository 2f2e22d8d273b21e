from __future__ import annotations

import re
import typing
from dataclasses import dataclass

from richinput.models import CLOSED_SPAN, TriggerKind, TriggerSpan
from richinput.settings import InputSettings

MENTION_QUERY_CHARS: typing.Final[str] = "a-zA-Z0-9_"
EMOJI_QUERY_CHARS: typing.Final[str] = "a-zA-Z0-9_+-"


@dataclass(frozen=True)
class TriggerRule:
    kind: TriggerKind
    trigger: str
    query_chars: str


def _compile_rule(trigger: str, query_chars: str) -> re.Pattern[str]:
    # \Z rather than $: a trailing newline must close the span
    return re.compile(re.escape(trigger) + "([" + query_chars + "]*)\\Z")


_PATTERN_CACHE: dict[tuple[str, str], re.Pattern[str]] = {}


def _rule_pattern(rule: TriggerRule) -> re.Pattern[str]:
    key = (rule.trigger, rule.query_chars)
    pattern = _PATTERN_CACHE.get(key)
    if pattern is None:
        pattern = _compile_rule(rule.trigger, rule.query_chars)
        _PATTERN_CACHE[key] = pattern
    return pattern


MENTION_RULE: typing.Final[TriggerRule] = TriggerRule(
    kind=TriggerKind.MENTION, trigger="@", query_chars=MENTION_QUERY_CHARS
)
EMOJI_RULE: typing.Final[TriggerRule] = TriggerRule(
    kind=TriggerKind.EMOJI, trigger=":", query_chars=EMOJI_QUERY_CHARS
)
# Checked in order; mention wins a tie
DEFAULT_RULES: typing.Final[tuple[TriggerRule, ...]] = (MENTION_RULE, EMOJI_RULE)


def rules_from_settings(settings: InputSettings) -> tuple[TriggerRule, ...]:
    rules: list[TriggerRule] = []
    if settings.enable_mentions:
        rules.append(
            TriggerRule(
                kind=TriggerKind.MENTION,
                trigger=settings.mention_trigger,
                query_chars=MENTION_QUERY_CHARS,
            )
        )
    if settings.enable_emojis:
        rules.append(
            TriggerRule(
                kind=TriggerKind.EMOJI,
                trigger=settings.emoji_trigger,
                query_chars=EMOJI_QUERY_CHARS,
            )
        )
    return tuple(rules)


def _clamp_cursor(text: str, cursor: int) -> int:
    if cursor < 0:
        return 0
    if cursor > len(text):
        return len(text)
    return cursor


def scan(
    text: str,
    cursor: int,
    rules: typing.Sequence[TriggerRule] = DEFAULT_RULES,
) -> TriggerSpan:
    """Return the trigger span the cursor is currently inside, if any.

    The span must run without interruption from the trigger character to the
    cursor: ``@ada`` with the cursor after ``a`` is open, ``@ada `` is not.
    """
    cursor = _clamp_cursor(text, cursor)
    prefix = text[:cursor]
    for rule in rules:
        match = _rule_pattern(rule).search(prefix)
        if match is None:
            continue
        return TriggerSpan(
            kind=rule.kind,
            start_offset=match.start(),
            query=match.group(1),
            trigger=rule.trigger,
        )
    return CLOSED_SPAN
