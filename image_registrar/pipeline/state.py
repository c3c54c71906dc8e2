"""
Typed step inputs, outputs and run state.

The step reads a StepInput once at entry, fills a fresh StepOutput (each key
written at most once) and observes PipelineState for cancellation and the
run outcome.
"""

import threading
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..cloud.base import ImageServiceBase
from ..configs import BuildConfig, RunOutcome, StepAction
from ..errors import ImageStepError
from .ui import ProgressSink


@dataclass
class PipelineState:
    """Run-wide state shared by all steps of one pipeline run"""
    outcome: RunOutcome = RunOutcome.CONTINUING
    cancel_event: threading.Event = field(default_factory=threading.Event)
    errors: List[str] = field(default_factory=list)

    def cancel(self) -> None:
        """Request cancellation; safe to call from a signal handler or another thread"""
        self.outcome = RunOutcome.CANCELLED
        self.cancel_event.set()

    def halt(self, error: Exception) -> None:
        self.errors.append(str(error))
        if self.outcome == RunOutcome.CONTINUING:
            self.outcome = RunOutcome.HALTED


@dataclass
class StepInput:
    config: BuildConfig
    service: ImageServiceBase
    # Device name -> snapshot id, written by the snapshot step
    snapshot_ids: Dict[str, str]
    ui: ProgressSink


@dataclass
class StepOutput:
    # Region -> image id
    amis: Dict[str, str] = field(default_factory=dict)
    # Region -> snapshot ids present on the registered image
    snapshots: Dict[str, List[str]] = field(default_factory=dict)
    intermediary_image: bool = False
    action: StepAction = StepAction.CONTINUE
    error: Optional[ImageStepError] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "amis": dict(self.amis),
            "snapshots": {region: list(ids) for region, ids in self.snapshots.items()},
            "intermediary_image": self.intermediary_image,
            "action": self.action.value,
        }
        if self.error is not None:
            result["error"] = str(self.error)
        return result
