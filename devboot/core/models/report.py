"""
ProvisionReport — the result aggregate threaded through every step.

Created empty at the start of a run and filled in by the dispatcher,
the config mutator and the post-install hooks. It replaces any
module-level accumulator: whoever runs a step receives the report
explicitly and appends to it.
"""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, Field

from devboot.core.models.outcome import UNCHANGED


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class StepResult(BaseModel):
    """Outcome of one provisioning step."""

    step: str
    phase: str  # tools, shell, bundle
    outcome: str
    detail: str = ""


class ProvisionReport(BaseModel):
    """Everything a run did, plus what is left for the user to do."""

    platform: str = ""
    started_at: str = Field(default_factory=_now_iso)
    steps: list[StepResult] = Field(default_factory=list)
    manual_steps: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    backup_dir: str | None = None

    def record(self, step: str, phase: str, outcome: str, detail: str = "") -> StepResult:
        """Append a step result and return it."""
        result = StepResult(step=step, phase=phase, outcome=str(outcome), detail=detail)
        self.steps.append(result)
        return result

    def add_manual_step(self, instruction: str) -> bool:
        """Queue a follow-up instruction; duplicates are dropped."""
        if instruction in self.manual_steps:
            return False
        self.manual_steps.append(instruction)
        return True

    def warn(self, message: str) -> None:
        self.warnings.append(message)

    def outcome_of(self, step: str) -> str | None:
        """Outcome of the most recent result for ``step``, if any."""
        for result in reversed(self.steps):
            if result.step == step:
                return result.outcome
        return None

    @property
    def changed(self) -> bool:
        """Whether any step mutated the host."""
        return any(r.outcome not in UNCHANGED for r in self.steps)

    def counts(self) -> dict[str, int]:
        totals: dict[str, int] = {}
        for r in self.steps:
            totals[r.outcome] = totals.get(r.outcome, 0) + 1
        return totals
