"""Update gating for index artifacts."""

from gate.update import (
    AutoConfirmer,
    Confirmer,
    GateOutcome,
    GateState,
    InteractiveConfirmer,
    run_update_gate,
)

__all__ = [
    "AutoConfirmer",
    "Confirmer",
    "GateOutcome",
    "GateState",
    "InteractiveConfirmer",
    "run_update_gate",
]
