"""
Register Image Step

Reconciles the device lists, registers the image and publishes the results;
``cleanup`` is the pipeline's unwind hook for this step.
"""

from typing import Callable, Optional

from loguru import logger

from ..configs import BuildConfig, StepAction
from ..errors import ImageStepError, RollbackWarning
from ..pipeline.state import PipelineState, StepInput, StepOutput
from ..utils.random_name import random_alphanumeric
from .devices import reconcile
from .registrar import ImageRegistrar, build_register_request
from .rollback import RollbackCoordinator


class StepRegisterImage:
    def __init__(self, config: BuildConfig, name_factory: Callable[[], str] = random_alphanumeric):
        self.config = config
        self.name_factory = name_factory
        self.registrar: Optional[ImageRegistrar] = None
        self.rollback: Optional[RollbackCoordinator] = None

    def run(self, inputs: StepInput, state: PipelineState) -> StepOutput:
        ui = inputs.ui
        service = inputs.service
        config = self.config

        with logger.contextualize(region=service.region_id):
            ui.say("Registering the AMI...")

            devices = reconcile(
                config.ami_devices(),
                config.launch_devices(),
                inputs.snapshot_ids,
                config.launch_omit_map(),
                config.ami_root_device,
            )
            request, intermediary = build_register_request(config, devices, self.name_factory)
            output = StepOutput(intermediary_image=intermediary)

            self.registrar = ImageRegistrar(service, ui)
            self.rollback = RollbackCoordinator(self.registrar)
            try:
                self.registrar.register(request, state.cancel_event, output)
            except ImageStepError as err:
                state.halt(err)
                ui.error(str(err))
                output.error = err
                output.action = StepAction.HALT

            return output

    def cleanup(self, inputs: StepInput, state: PipelineState) -> Optional[RollbackWarning]:
        if self.rollback is None:
            return None
        with logger.contextualize(region=inputs.service.region_id):
            return self.rollback.cleanup(inputs.service, inputs.ui, state)
