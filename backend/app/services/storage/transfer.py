"""
transfer.py
- Purpose: Boundary contract between the upload session and a blob store.
- Owns: transfer event types and the TransferHandle event stream.
- Design: Adapters push events into the handle; the session consumes them
  with `async for`. A handle ends with exactly one terminal event.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import AsyncIterator, Protocol, Union


@dataclass(frozen=True)
class TransferProgress:
    bytes_transferred: int
    total_bytes: int

    @property
    def percent(self) -> int:
        if self.total_bytes <= 0:
            return 0
        # half-up rounding, clamped to [0, 100]
        pct = int(100 * self.bytes_transferred / self.total_bytes + 0.5)
        return max(0, min(100, pct))


@dataclass(frozen=True)
class TransferSucceeded:
    final_location: str


@dataclass(frozen=True)
class TransferFailed:
    error: str


TransferEvent = Union[TransferProgress, TransferSucceeded, TransferFailed]


class TransferHandle:
    """
    Ordered stream of transfer events for one upload.

    Producers call `progress()` any number of times, then `succeed()` or
    `fail()` once. Anything emitted after the terminal event is dropped.
    """

    def __init__(self) -> None:
        self._queue: asyncio.Queue[TransferEvent] = asyncio.Queue()
        self._closed = False
        self._task: asyncio.Task | None = None

    @property
    def closed(self) -> bool:
        return self._closed

    def progress(self, bytes_transferred: int, total_bytes: int) -> None:
        if not self._closed:
            self._queue.put_nowait(TransferProgress(bytes_transferred, total_bytes))

    def succeed(self, final_location: str) -> None:
        if not self._closed:
            self._closed = True
            self._queue.put_nowait(TransferSucceeded(final_location))

    def fail(self, error: str) -> None:
        if not self._closed:
            self._closed = True
            self._queue.put_nowait(TransferFailed(error))

    def attach(self, task: asyncio.Task) -> None:
        """Keep a reference to the producer task driving this handle."""
        self._task = task

    def abandon(self) -> None:
        """Stop listening. The remote store is not told about it."""
        # wakes a consumer blocked on the queue
        self.fail("Upload abandoned")
        if self._task is not None and not self._task.done():
            self._task.cancel()

    async def events(self) -> AsyncIterator[TransferEvent]:
        while True:
            event = await self._queue.get()
            yield event
            if isinstance(event, (TransferSucceeded, TransferFailed)):
                return

    def __aiter__(self) -> AsyncIterator[TransferEvent]:
        return self.events()


class BlobTransferService(Protocol):
    def begin_upload(self, data: bytes, destination_path: str, content_type: str) -> TransferHandle: ...

    async def resolve_reference(self, final_location: str) -> str: ...

    async def delete_reference(self, reference: str) -> None: ...
