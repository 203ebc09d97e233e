from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class PhaseFailure:
    phase_id: str
    message: str


@dataclass
class LaunchReport:
    """Outcome of one launch.

    ``problem`` is sticky: the first recorded failure turns it on and nothing
    turns it off again.
    """

    route: Optional[str] = None
    ran_phases: List[str] = field(default_factory=list)
    failures: List[PhaseFailure] = field(default_factory=list)

    @property
    def problem(self) -> bool:
        return bool(self.failures)

    @property
    def exit_code(self) -> int:
        return 1 if self.problem else 0

    def record_ran(self, phase_id: str) -> None:
        self.ran_phases.append(phase_id)

    def record_failure(self, phase_id: str, message: str) -> None:
        self.failures.append(PhaseFailure(phase_id=phase_id, message=message))

    def failed(self, phase_id: str) -> bool:
        return any(f.phase_id == phase_id for f in self.failures)
