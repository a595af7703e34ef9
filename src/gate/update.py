"""Confirmation gate in front of artifact persistence.

The gate only decides whether to call ``persist``; how a yes/no answer is
obtained is up to the injected ``Confirmer``.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Protocol, TextIO

if TYPE_CHECKING:
    from collections.abc import Callable

    from artifacts.models.artifacts.diff import DiffResult

YES_ANSWERS = frozenset({"y", "yes"})


class GateState(str, Enum):
    """States of a single update decision."""

    COMPUTED = "computed"
    PREVIEW_ONLY = "preview_only"
    AWAITING_CONFIRMATION = "awaiting_confirmation"
    CONFIRMED = "confirmed"
    ABORTED = "aborted"
    PERSISTED = "persisted"


class Confirmer(Protocol):
    def confirm(self, question: str) -> bool: ...


class AutoConfirmer:
    """Pre-authorized confirmation; always answers yes."""

    def confirm(self, question: str) -> bool:
        return True


class InteractiveConfirmer:
    """Asks on a text stream; only ``y`` or ``yes`` count as consent."""

    def __init__(
        self, stdin: TextIO | None = None, stdout: TextIO | None = None
    ) -> None:
        self._stdin = stdin if stdin is not None else sys.stdin
        self._stdout = stdout if stdout is not None else sys.stdout

    def confirm(self, question: str) -> bool:
        self._stdout.write(question)
        self._stdout.flush()
        answer = self._stdin.readline()
        return answer.strip().lower() in YES_ANSWERS


@dataclass(frozen=True)
class GateOutcome:
    state: GateState
    history: tuple[GateState, ...]

    @property
    def persisted(self) -> bool:
        return self.state is GateState.PERSISTED


def run_update_gate(
    diff: DiffResult,
    persist: Callable[[], None],
    *,
    confirmer: Confirmer,
    dry_run: bool = False,
    auto_confirm: bool = False,
    question: str = "Write changes? (y/N) ",
) -> GateOutcome:
    """Decide whether a computed, non-empty diff gets persisted.

    Preview mode never writes. Auto-confirmation persists without asking.
    Otherwise the confirmer is asked once and ``persist`` runs only on yes.
    """
    if not diff.has_changes:
        msg = "update gate requires a non-empty diff"
        raise ValueError(msg)

    history = [GateState.COMPUTED]

    def _finish(*states: GateState) -> GateOutcome:
        history.extend(states)
        return GateOutcome(state=history[-1], history=tuple(history))

    if dry_run:
        return _finish(GateState.PREVIEW_ONLY)

    if auto_confirm:
        persist()
        return _finish(GateState.PERSISTED)

    history.append(GateState.AWAITING_CONFIRMATION)
    if not confirmer.confirm(question):
        return _finish(GateState.ABORTED)

    history.append(GateState.CONFIRMED)
    persist()
    return _finish(GateState.PERSISTED)


__all__ = [
    "AutoConfirmer",
    "Confirmer",
    "GateOutcome",
    "GateState",
    "InteractiveConfirmer",
    "run_update_gate",
]
