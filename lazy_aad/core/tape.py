# lazy_aad/core/tape.py
from __future__ import annotations
import itertools
import logging
from typing import List, NamedTuple, Optional
from contextlib import contextmanager

logger = logging.getLogger(__name__)

_tape_ids = itertools.count()


class Handle(NamedTuple):
    """Stable identity of a variable: which tape owns it and where."""
    tape_id: int
    index: int


class Tape:
    """
    An arena of Variables in creation order.

    Every Variable registers itself on construction and receives a Handle.
    Gradient maps are keyed by Handle, so identity never depends on values.
    The arena keeps every variable alive until `reset()`.
    """
    def __init__(self):
        self.tape_id = next(_tape_ids)
        self.variables: List = []
        self.version = 0

    def reset(self):
        # A fresh tape_id keeps handles of variables created before the reset unique
        self.variables.clear()
        self.tape_id = next(_tape_ids)
        self.bump_version()
        logger.debug("tape reset, new tape_id=%d", self.tape_id)

    def register(self, var) -> Handle:
        """Append `var` to the arena and return its handle."""
        self.variables.append(var)
        return Handle(self.tape_id, len(self.variables) - 1)

    def lookup(self, handle: Handle):
        if handle.tape_id != self.tape_id or not 0 <= handle.index < len(self.variables):
            raise KeyError(f"{handle!r} does not belong to tape {self.tape_id}")
        return self.variables[handle.index]

    def owns(self, handle: Handle) -> bool:
        return handle.tape_id == self.tape_id and 0 <= handle.index < len(self.variables)

    def bump_version(self):
        """Mark every cached evaluation over this tape as stale."""
        self.version += 1

    def __len__(self):
        return len(self.variables)

    def __repr__(self):
        return f"Tape(id={self.tape_id}, variables={len(self.variables)}, version={self.version})"


# Global default tape
global_tape = Tape()


@contextmanager
def use_tape(tape: Optional[Tape] = None):
    """
    Context manager to temporarily use a fresh (or given) tape:
        with use_tape() as t:
            x = Variable(1.0)   # registered on t
    """
    from . import tape as _tape_mod  # local import to rebind the module global
    prev = _tape_mod.global_tape
    try:
        _tape_mod.global_tape = tape if tape is not None else Tape()
        yield _tape_mod.global_tape
    finally:
        _tape_mod.global_tape = prev
