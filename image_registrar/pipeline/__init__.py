"""
Pipeline Module

Run state, typed step inputs/outputs and the progress sink.
"""

from .state import PipelineState, StepInput, StepOutput
from .ui import LoguruSink, ProgressSink

__all__ = [
    "PipelineState",
    "StepInput",
    "StepOutput",
    "LoguruSink",
    "ProgressSink",
]
