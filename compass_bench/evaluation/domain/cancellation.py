"""CancellationToken — a run-scoped, one-way cancellation signal."""

import asyncio


class CancellationToken:
    """Cooperative cancellation for one run.

    Once cancel() is called no new iteration is dispatched; in-flight
    iterations get the configured grace period before they are cancelled.
    The signal cannot be reset.
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    async def wait(self) -> None:
        await self._event.wait()
