"""Single-retry helper for transient storage faults."""

from __future__ import annotations

import logging
from typing import Callable, TypeVar

from django.db import InterfaceError, OperationalError

from shared.domain.exceptions import TransientStorageFault

logger = logging.getLogger(__name__)

T = TypeVar("T")

TRANSIENT_DB_ERRORS = (OperationalError, InterfaceError)


def as_transient(exc: Exception) -> TransientStorageFault:
    """Wrap a driver-level connectivity error into the domain fault."""
    fault = TransientStorageFault()
    fault.__cause__ = exc
    return fault


def call_with_retry(func: Callable[..., T], *args, attempts: int = 2, label: str = "", **kwargs) -> T:
    """Call ``func`` retrying on transient storage faults only.

    Business rejections propagate on the first attempt. After the last
    attempt the fault is raised as ``TransientStorageFault``.
    """
    name = label or getattr(func, "__name__", "operation")
    for attempt in range(1, attempts + 1):
        try:
            return func(*args, **kwargs)
        except TRANSIENT_DB_ERRORS as exc:
            fault = as_transient(exc)
        except TransientStorageFault as exc:
            fault = exc
        if attempt < attempts:
            logger.warning("Transient storage fault in %s, retrying (attempt %d/%d)", name, attempt, attempts)
            continue
        logger.error("Transient storage fault in %s persisted after %d attempts", name, attempts)
        raise fault
    raise AssertionError("unreachable")
