"""
Image Registrar

Drives register -> wait until available -> describe against an image
service and keeps the resulting Image for rollback.
"""

import threading
from enum import Enum
from typing import Callable, List, Optional, Tuple

from loguru import logger

from ..cloud.base import ImageServiceBase
from ..configs import BlockDeviceMapping, BuildConfig, Image, RegisterImageRequest
from ..errors import (
    AvailabilityFailure,
    AvailabilityTimeoutError,
    ImageServiceError,
    ImageStepError,
    MetadataFetchError,
    RegistrationError,
)
from ..pipeline.state import StepOutput
from ..pipeline.ui import ProgressSink
from ..utils.random_name import random_alphanumeric
from ..utils.wait_until import WaitUntilCancelledError, WaitUntilTimeoutError


class RegistrationState(str, Enum):
    IDLE = "idle"
    REGISTERING = "registering"
    WAITING_AVAILABLE = "waiting_available"
    DESCRIBING_METADATA = "describing_metadata"
    READY = "ready"
    FAILED = "failed"


def build_register_request(
    config: BuildConfig,
    devices: List[BlockDeviceMapping],
    name_factory: Callable[[], str] = random_alphanumeric,
) -> Tuple[RegisterImageRequest, bool]:
    """
    Build the create-image request for ``devices``.

    Returns the request and whether the image is an intermediary one. An
    encrypted boot volume, or a build that skips the build region, needs a
    later copy step, so the image is registered under a random placeholder
    name instead of ``ami_name``.
    """
    intermediary = config.is_intermediary
    name = name_factory() if intermediary else config.ami_name

    request = RegisterImageRequest(
        name=name,
        architecture=config.architecture,
        root_device_name=config.ami_root_device.device_name,
        virtualization_type=config.ami_virtualization_type,
        block_device_mappings=devices,
    )
    if config.sriov_support:
        request.sriov_net_support = "simple"
    if config.ena_support is True:
        request.ena_support = True
    if config.boot_mode:
        request.boot_mode = config.boot_mode
    return request, intermediary


class ImageRegistrar:
    """
    Registers one image and waits for it.

    ``state`` follows IDLE -> REGISTERING -> WAITING_AVAILABLE ->
    DESCRIBING_METADATA -> READY; any phase may end in FAILED. ``image`` is
    only set once the authoritative record has been fetched.
    """

    def __init__(self, service: ImageServiceBase, ui: ProgressSink):
        self.service = service
        self.ui = ui
        self.state = RegistrationState.IDLE
        self.image: Optional[Image] = None

    def _transition(self, state: RegistrationState) -> None:
        logger.debug(f"registrar: {self.state.value} -> {state.value}")
        self.state = state

    def _fail(self, error: ImageStepError) -> ImageStepError:
        self._transition(RegistrationState.FAILED)
        return error

    def register(
        self,
        request: RegisterImageRequest,
        cancel_event: threading.Event,
        output: StepOutput,
    ) -> Image:
        """
        Run the whole protocol, publishing into ``output`` as results arrive.

        The image id goes into ``output.amis`` as soon as the request is
        accepted so an aborted run can still find it; the snapshot inventory
        goes into ``output.snapshots`` once the record has been fetched.

        Raises:
            RegistrationError, AvailabilityFailure, AvailabilityTimeoutError,
            MetadataFetchError
        """
        if self.state != RegistrationState.IDLE:
            raise RuntimeError(f"registrar already used (state {self.state.value})")

        region = self.service.region_id

        self._transition(RegistrationState.REGISTERING)
        try:
            image_id = self.service.create_image(request)
        except ImageServiceError as e:
            raise self._fail(RegistrationError(str(e))) from e

        self.ui.say(f"AMI: {image_id}")
        output.amis[region] = image_id

        self._transition(RegistrationState.WAITING_AVAILABLE)
        self.ui.say("Waiting for AMI to become ready...")
        try:
            self.service.wait_until_available(image_id, cancel_event)
        except WaitUntilTimeoutError as e:
            raise self._fail(AvailabilityTimeoutError(str(e))) from e
        except (WaitUntilCancelledError, ImageServiceError) as e:
            raise self._fail(AvailabilityFailure(str(e))) from e

        self._transition(RegistrationState.DESCRIBING_METADATA)
        try:
            image = self.service.describe_image(image_id)
        except ImageServiceError as e:
            raise self._fail(MetadataFetchError(str(e))) from e

        self.image = image
        snapshot_ids = image.snapshot_ids()
        if snapshot_ids:
            output.snapshots[region] = snapshot_ids

        self._transition(RegistrationState.READY)
        return image
