"""Deregisters the image when the run is cancelled or halted"""

from typing import Optional

from loguru import logger

from ..cloud.base import ImageServiceBase
from ..configs import RunOutcome
from ..errors import ImageServiceError, RollbackWarning
from ..pipeline.state import PipelineState
from ..pipeline.ui import ProgressSink
from .registrar import ImageRegistrar

ROLLBACK_OUTCOMES = (RunOutcome.CANCELLED, RunOutcome.HALTED)


class RollbackCoordinator:
    def __init__(self, registrar: ImageRegistrar):
        self.registrar = registrar

    def cleanup(
        self,
        service: ImageServiceBase,
        ui: ProgressSink,
        state: PipelineState,
    ) -> Optional[RollbackWarning]:
        """
        Deregister the retained image if the run did not complete normally.

        Never raises for a failed deregister: the failure is reported once
        and returned, and the error that caused the unwind stays the one
        recorded on ``state``.
        """
        image = self.registrar.image
        if image is None:
            return None

        if state.outcome not in ROLLBACK_OUTCOMES:
            return None

        ui.say("Deregistering the AMI because cancellation or error...")
        try:
            service.deregister_image(image.image_id)
        except ImageServiceError as e:
            warning = RollbackWarning(image.image_id, str(e))
            ui.warn(str(warning))
            return warning

        logger.debug(f"deregistered {image.image_id}")
        return None
