from __future__ import annotations

import asyncio

import pytest

from richinput.input import base as input_base


def test_publish_without_subscribers_is_noop() -> None:
    handler = input_base.InputHandler()
    handler.publish(input_base.PasteEvent(text="x"))


def test_sync_subscribers_run_inline_once() -> None:
    handler = input_base.InputHandler()
    received: list[input_base.InputEvent] = []
    handler.subscribe(received.append)
    handler.subscribe(received.append)
    event = input_base.KeyEvent(action="down", key="down")
    handler.publish(event)
    assert received == [event]
    handler.unsubscribe(received.append)
    handler.publish(event)
    assert received == [event]


@pytest.mark.asyncio
async def test_async_subscribers_are_scheduled() -> None:
    handler = input_base.InputHandler()
    received: list[input_base.InputEvent] = []

    async def subscriber(event: input_base.InputEvent) -> None:
        received.append(event)

    handler.subscribe(subscriber)
    event = input_base.TextChangedEvent(text="@a", cursor=2)
    handler.publish(event)
    assert received == []
    await asyncio.sleep(0)
    assert received == [event]
    handler.clear_subscribers()
    handler.publish(event)
    await asyncio.sleep(0)
    assert received == [event]


@pytest.mark.asyncio
async def test_pending_async_subscribers_are_held_until_done() -> None:
    handler = input_base.InputHandler()
    release = asyncio.Event()
    received: list[input_base.InputEvent] = []

    async def subscriber(event: input_base.InputEvent) -> None:
        await release.wait()
        received.append(event)

    handler.subscribe(subscriber)
    event = input_base.PasteEvent(text="x")
    handler.publish(event)
    assert len(handler._tasks) == 1
    release.set()
    for _ in range(3):
        await asyncio.sleep(0)
    assert received == [event]
    assert handler._tasks == set()
