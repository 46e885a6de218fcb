"""Reversible multi-step writes.

Each step is applied against the store and, once it succeeded, its undo is
remembered. If a later step fails, the recorded undos run newest-first and a
PersistenceError is raised so the caller sees the failure.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Callable, Iterator

from ..core.exceptions import DomainError, PersistenceError

logger = logging.getLogger(__name__)


class MutationLog:
    def __init__(self, name: str):
        self.name = name
        self._undo: list[tuple[str, Callable[[], object]]] = []

    def apply(self, description: str, do: Callable[[], object], undo: Callable[[], object]):
        result = do()
        if result is False:
            raise PersistenceError(f"{self.name}: {description} was not applied")
        self._undo.append((description, undo))
        return result

    def rollback(self) -> None:
        while self._undo:
            description, undo = self._undo.pop()
            try:
                undo()
                logger.warning("%s: rolled back %s", self.name, description)
            except Exception:
                logger.exception("%s: rollback of %s failed, store may be inconsistent", self.name, description)


@contextmanager
def reversible(name: str) -> Iterator[MutationLog]:
    log = MutationLog(name)
    try:
        yield log
    except DomainError:
        log.rollback()
        raise
    except Exception as exc:
        logger.exception("%s failed", name)
        log.rollback()
        raise PersistenceError(f"{name} failed: {exc}") from exc
