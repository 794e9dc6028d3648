# -*- coding: utf-8 -*-
"""Undo/Redo for mechanism edits.

Every edit made through the controller (parameters, curve type, free-hand
curve, anchor) is recorded as a ``Command`` holding the state before and
after. Consecutive commands sharing a ``merge_key`` collapse into one entry,
so dragging a spin box produces a single undo step.
"""

from __future__ import annotations

from typing import Any, Callable, Optional


class Command:
    """A reversible action built from two callables."""

    def __init__(
        self,
        do: Callable[[], None],
        undo: Callable[[], None],
        desc: str = "",
        merge_key: Optional[str] = None,
    ):
        self._do_cb = do
        self._undo_cb = undo
        self.desc = desc
        self.merge_key = merge_key

    def do(self):
        self._do_cb()

    def undo(self):
        self._undo_cb()

    def merge(self, newer: "Command") -> bool:
        """Absorb ``newer`` if both edit the same thing. Keeps our undo."""
        if self.merge_key is None or self.merge_key != newer.merge_key:
            return False
        self._do_cb = newer._do_cb
        return True


def state_command(apply_state: Callable[[Any], None], before: Any, after: Any,
                  desc: str = "", merge_key: Optional[str] = None) -> Command:
    """Command that switches between two captured states."""
    return Command(
        do=lambda: apply_state(after),
        undo=lambda: apply_state(before),
        desc=desc,
        merge_key=merge_key,
    )


class CommandStack:
    def __init__(self, on_change: Optional[Callable[[], None]] = None, limit: int = 200):
        self._undo: list[Command] = []
        self._redo: list[Command] = []
        self._on_change = on_change
        self.limit = max(1, int(limit))

    def clear(self):
        self._undo.clear()
        self._redo.clear()
        self._changed()

    def _changed(self):
        if self._on_change:
            self._on_change()

    def push(self, cmd: Command, execute: bool = True):
        if execute:
            cmd.do()
        if self._undo and not self._redo and self._undo[-1].merge(cmd):
            self._changed()
            return
        self._undo.append(cmd)
        if len(self._undo) > self.limit:
            del self._undo[0]
        self._redo.clear()
        self._changed()

    def can_undo(self) -> bool:
        return bool(self._undo)

    def can_redo(self) -> bool:
        return bool(self._redo)

    def undo(self):
        if not self._undo:
            return
        cmd = self._undo.pop()
        cmd.undo()
        self._redo.append(cmd)
        self._changed()

    def redo(self):
        if not self._redo:
            return
        cmd = self._redo.pop()
        cmd.do()
        self._undo.append(cmd)
        self._changed()

    def undo_text(self) -> str:
        return self._undo[-1].desc if self._undo else ""

    def redo_text(self) -> str:
        return self._redo[-1].desc if self._redo else ""

    def break_merge(self):
        """Force the next push to start a new undo entry."""
        if self._undo:
            self._undo[-1].merge_key = None
