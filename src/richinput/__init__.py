from __future__ import annotations

from .candidates import EMOJI_CATALOG, CandidateProvider, filter_emojis, filter_users
from .models import (
    Candidate,
    Emoji,
    InputBuffer,
    SelectionState,
    TriggerKind,
    TriggerSpan,
    User,
)
from .orchestrator import PasteResult, RichTextInput
from .scanner import scan
from .selection import SelectionMachine
from .settings import InputSettings, SettingsError, load_settings
from .splicer import insert_text_at_cursor, linkify_pasted_text, splice_candidate

__all__ = [
    "EMOJI_CATALOG",
    "Candidate",
    "CandidateProvider",
    "Emoji",
    "InputBuffer",
    "InputSettings",
    "PasteResult",
    "RichTextInput",
    "SelectionMachine",
    "SelectionState",
    "SettingsError",
    "TriggerKind",
    "TriggerSpan",
    "User",
    "filter_emojis",
    "filter_users",
    "insert_text_at_cursor",
    "linkify_pasted_text",
    "load_settings",
    "scan",
    "splice_candidate",
]
