"""First-success combinator for racing equivalent requests."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Iterable
from typing import TypeVar

from streamflow_stations.domain.models.errors import AllMirrorsFailed, NoMirrorsConfigured

T = TypeVar("T")


async def first_success(awaitables: Iterable[Awaitable[T]]) -> T:
    """Return the result of the first awaitable that succeeds.

    Unlike ``asyncio.wait(..., return_when=FIRST_COMPLETED)`` a failure does
    not end the race: it only counts against the remaining candidates. When a
    winner is found every other candidate is cancelled.

    Raises:
        NoMirrorsConfigured: If there are no awaitables at all.
        AllMirrorsFailed: If every awaitable raised. Carries the errors in
            the order they happened.
    """
    tasks = [asyncio.ensure_future(aw) for aw in awaitables]
    if not tasks:
        raise NoMirrorsConfigured()

    errors: list[BaseException] = []
    try:
        for next_done in asyncio.as_completed(tasks):
            try:
                return await next_done
            except Exception as e:
                errors.append(e)
        raise AllMirrorsFailed(errors)
    finally:
        pending = [task for task in tasks if not task.done()]
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
