"""
Results — Typed outcomes of building items and of a whole pass

BuildResult replaces catch-all exception handling around each item:
every builder returns one, and the walker checks it at the call site.
IngestResult is the explicit accumulator threaded through the walk,
including folder recursion.

Design principles:
- Immutable per-item results (frozen dataclasses)
- A failure may still carry a persisted identity, so the caller can
  compensate (widget bound after insert)
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .records import PlacementRecord


@dataclass(frozen=True)
class BuildResult:
    """Outcome of one builder call."""
    success: bool
    record: Optional[PlacementRecord] = None
    reason: Optional[str] = None
    persisted_id: Optional[int] = None  # set on failure if a row was already written

    @property
    def failed(self) -> bool:
        return not self.success

    @property
    def identity(self) -> Optional[int]:
        return self.record.id if self.record is not None else None

    @classmethod
    def ok(cls, record: PlacementRecord) -> "BuildResult":
        return cls(success=True, record=record, persisted_id=record.id)

    @classmethod
    def failure(cls, reason: str, persisted_id: Optional[int] = None) -> "BuildResult":
        return cls(success=False, reason=reason, persisted_id=persisted_id)


@dataclass(frozen=True)
class ItemOutcome:
    """What happened to one item tag during a pass."""
    tag: str
    kind: str
    success: bool
    identity: Optional[int] = None
    container: Optional[int] = None
    reason: Optional[str] = None

    def summary(self) -> str:
        status = "✓" if self.success else "✗"
        detail = f"#{self.identity}" if self.success else (self.reason or "failed")
        return f"{status} <{self.tag}> {detail}"


@dataclass
class IngestResult:
    """
    Running tally of an ingestion pass.

    ``count`` only includes items placed at the walk's own level: a
    folder counts once, its children do not.
    """
    count: int = 0
    outcomes: List[ItemOutcome] = field(default_factory=list)
    aborted: bool = False
    abort_reason: Optional[str] = None

    def add(self, outcome: ItemOutcome, counted: bool = True) -> None:
        self.outcomes.append(outcome)
        if outcome.success and counted:
            self.count += 1

    def abort(self, reason: str) -> None:
        self.aborted = True
        self.abort_reason = reason

    @property
    def successes(self) -> List[ItemOutcome]:
        return [o for o in self.outcomes if o.success]

    @property
    def failures(self) -> List[ItemOutcome]:
        return [o for o in self.outcomes if not o.success]

    def summary(self) -> str:
        """One-line summary for display."""
        line = f"Placed {self.count} item(s), {len(self.failures)} failed"
        if self.aborted:
            line += f" (aborted: {self.abort_reason})"
        return line

    def to_dict(self) -> Dict[str, Any]:
        return {
            "count": self.count,
            "aborted": self.aborted,
            "abort_reason": self.abort_reason,
            "outcomes": [
                {
                    "tag": o.tag,
                    "kind": o.kind,
                    "success": o.success,
                    "identity": o.identity,
                    "container": o.container,
                    "reason": o.reason,
                }
                for o in self.outcomes
            ],
        }
