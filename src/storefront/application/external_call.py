"""Bounded calls to external collaborators.

Every supplier or gateway call is wrapped in a timeout; a timeout takes the
same failure path as a request error.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable
from typing import TypeVar

from storefront.domain.exceptions import ExternalServiceError

T = TypeVar("T")

DEFAULT_TIMEOUT = 15.0


async def bounded(
    awaitable: Awaitable[T],
    timeout: float = DEFAULT_TIMEOUT,
    error_cls: type[ExternalServiceError] = ExternalServiceError,
    what: str = "external call",
) -> T:
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout)
    except asyncio.TimeoutError as exc:
        raise error_cls(f"{what} timed out after {timeout:g}s") from exc
    except ExternalServiceError as exc:
        if isinstance(exc, error_cls):
            raise
        raise error_cls(str(exc)) from exc
