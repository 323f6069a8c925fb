"""Fetch lifecycle state machine.

Two independent operation classes, each ``Idle -> InProgress -> Success | Failure``:

- fetch (reads): also carries a sticky ``success_once`` flag that, once set,
  is never cleared.
- save (creates and updates).

Starting an operation clears that class's Success/Failure flags; settling
sets exactly one of them and clears InProgress.
"""

from __future__ import annotations

from dataclasses import dataclass

from modelize.contracts.enums import OperationClass


@dataclass(slots=True)
class LifecycleStates:
    """Mutable lifecycle flags of one record."""

    fetch_in_progress: bool = False
    fetch_success_once: bool = False
    fetch_success: bool = False
    fetch_failure: bool = False
    save_in_progress: bool = False
    save_success: bool = False
    save_failure: bool = False

    def start(self, operation: OperationClass) -> None:
        if operation is OperationClass.FETCH:
            self.fetch_in_progress = True
            self.fetch_success = False
            self.fetch_failure = False
        else:
            self.save_in_progress = True
            self.save_success = False
            self.save_failure = False

    def succeed(self, operation: OperationClass) -> None:
        if operation is OperationClass.FETCH:
            self.fetch_in_progress = False
            self.fetch_success = True
            self.fetch_success_once = True
        else:
            self.save_in_progress = False
            self.save_success = True

    def fail(self, operation: OperationClass) -> None:
        if operation is OperationClass.FETCH:
            self.fetch_in_progress = False
            self.fetch_failure = True
        else:
            self.save_in_progress = False
            self.save_failure = True
