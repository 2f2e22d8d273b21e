from __future__ import annotations

from richinput import splicer as richinput_splicer
from richinput.models import Emoji, InputBuffer, TriggerKind, TriggerSpan, User


ADA = User(id=42, name="ada", email="ada@example.com")
FIRE = Emoji(name="fire", glyph="\U0001F525")


def _mention(start: int, query: str) -> TriggerSpan:
    return TriggerSpan(kind=TriggerKind.MENTION, start_offset=start, query=query, trigger="@")


def _emoji(start: int, query: str) -> TriggerSpan:
    return TriggerSpan(kind=TriggerKind.EMOJI, start_offset=start, query=query, trigger=":")


def test_splice_mention() -> None:
    result = richinput_splicer.splice_candidate("hello @ad", _mention(6, "ad"), ADA)
    assert result is not None
    assert result.text == "hello <@42|ada>"
    assert result.cursor == 15


def test_splice_emoji() -> None:
    result = richinput_splicer.splice_candidate("great :fi", _emoji(6, "fi"), FIRE)
    assert result is not None
    assert result.text == "great :fire:"
    assert result.cursor == 12


def test_splice_keeps_text_after_cursor() -> None:
    result = richinput_splicer.splice_candidate("hi @ad there", _mention(3, "ad"), ADA)
    assert result is not None
    assert result.text == "hi <@42|ada> there"
    assert result.cursor == len("hi <@42|ada>")


def test_splice_is_deterministic() -> None:
    span = _mention(6, "ad")
    first = richinput_splicer.splice_candidate("hello @ad", span, ADA)
    second = richinput_splicer.splice_candidate("hello @ad", span, ADA)
    assert first == second


def test_splice_out_of_bounds_is_noop() -> None:
    assert richinput_splicer.splice_candidate("hi", _mention(5, "ad"), ADA) is None
    assert richinput_splicer.splice_candidate("@a", _mention(0, "abc"), ADA) is None


def test_splice_stale_span_is_noop() -> None:
    span = _mention(6, "ad")
    assert richinput_splicer.splice_candidate("hello @xy", span, ADA) is None
    result = richinput_splicer.splice_candidate("hello @ad", span, ADA)
    assert result is not None
    # Offsets are only valid for the text they were scanned from
    assert richinput_splicer.splice_candidate(result.text, span, ADA) is None


def test_splice_rejects_closed_span_and_wrong_shape() -> None:
    assert richinput_splicer.splice_candidate("hello", TriggerSpan(), ADA) is None
    assert richinput_splicer.splice_candidate("hello @ad", _mention(6, "ad"), FIRE) is None
    assert richinput_splicer.splice_candidate("great :fi", _emoji(6, "fi"), ADA) is None


def test_format_token_table() -> None:
    assert richinput_splicer.format_token(TriggerKind.MENTION, User(id="u1", name="Bo")) == "<@u1|Bo>"
    assert richinput_splicer.format_token(TriggerKind.EMOJI, FIRE) == ":fire:"
    assert richinput_splicer.format_token(TriggerKind.NONE, FIRE) is None


def test_linkify_wraps_every_url() -> None:
    text = "see http://x.co/a and http://x.co/b"
    assert (
        richinput_splicer.linkify_pasted_text(text)
        == "see <http://x.co/a> and <http://x.co/b>"
    )


def test_linkify_is_idempotent() -> None:
    text = "docs: https://example.com/path?q=1\nmore http://a.b"
    once = richinput_splicer.linkify_pasted_text(text)
    assert once == "docs: <https://example.com/path?q=1>\nmore <http://a.b>"
    assert richinput_splicer.linkify_pasted_text(once) == once


def test_linkify_leaves_plain_text_unchanged() -> None:
    text = "no links here, just ftp://old and http:/broken"
    assert richinput_splicer.linkify_pasted_text(text) == text
    assert richinput_splicer.linkify_pasted_text("") == ""


def test_insert_text_at_cursor() -> None:
    buffer = InputBuffer(text="abcd", cursor=2)
    result = richinput_splicer.insert_text_at_cursor(buffer, "XY")
    assert result.text == "abXYcd"
    assert result.cursor == 4
    assert result.selection_end is None


def test_insert_text_replaces_selection() -> None:
    buffer = InputBuffer(text="abcdef", cursor=2, selection_end=4)
    result = richinput_splicer.insert_text_at_cursor(buffer, "XY")
    assert result.text == "abXYef"
    assert result.cursor == 4


def test_insert_text_clamps_cursor() -> None:
    buffer = InputBuffer(text="ab", cursor=10)
    result = richinput_splicer.insert_text_at_cursor(buffer, "!")
    assert result.text == "ab!"
    assert result.cursor == 3
