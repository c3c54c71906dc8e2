"""
Image Registrar

Registers a bootable AMI from prepared EBS snapshots as one step of an image
build pipeline.

Features:
- Merge of image-default and launch-time block device mappings, with
  snapshot injection, omission and root device renaming
- Register -> wait until available -> describe protocol with cancellation
- Deregistration of the image when the run is cancelled or halted
- TOML/JSON build configuration validated with pydantic

Usage:
    from image_registrar import (
        AWSImageService, ConfigLoader, LoguruSink,
        PipelineState, StepInput, StepRegisterImage,
    )

    config = ConfigLoader.load_from_file("build.toml")
    service = AWSImageService("us-west-2", config.credentials, config.polling)
    inputs = StepInput(config, service, {"/dev/xvdf": "snap-0123"}, LoguruSink())
    state = PipelineState()

    step = StepRegisterImage(config)
    try:
        output = step.run(inputs, state)
    finally:
        step.cleanup(inputs, state)

CLI:
    image-registrar plan -c build.toml -s snapshots.json
    image-registrar register -c build.toml -s snapshots.json -o result.json
"""

__version__ = "0.1.0"

from .configs import (
    RunOutcome,
    StepAction,
    EbsBlockDevice,
    BlockDeviceMapping,
    BlockDeviceConfig,
    RootDeviceSpec,
    PollingConfig,
    CredentialsConfig,
    BuildConfig,
    Image,
    RegisterImageRequest,
    ConfigLoader,
)
from .errors import (
    ImageServiceError,
    ImageStepError,
    RegistrationError,
    AvailabilityFailure,
    AvailabilityTimeoutError,
    MetadataFetchError,
    RollbackWarning,
)
from .cloud import ImageServiceBase, AWSImageService
from .pipeline import PipelineState, StepInput, StepOutput, LoguruSink, ProgressSink
from .registration import (
    reconcile,
    ImageRegistrar,
    RegistrationState,
    build_register_request,
    RollbackCoordinator,
    StepRegisterImage,
)

__all__ = [
    "__version__",
    # Types
    "RunOutcome",
    "StepAction",
    "EbsBlockDevice",
    "BlockDeviceMapping",
    "BlockDeviceConfig",
    "RootDeviceSpec",
    "PollingConfig",
    "CredentialsConfig",
    "BuildConfig",
    "Image",
    "RegisterImageRequest",
    "ConfigLoader",
    # Errors
    "ImageServiceError",
    "ImageStepError",
    "RegistrationError",
    "AvailabilityFailure",
    "AvailabilityTimeoutError",
    "MetadataFetchError",
    "RollbackWarning",
    # Cloud
    "ImageServiceBase",
    "AWSImageService",
    # Pipeline
    "PipelineState",
    "StepInput",
    "StepOutput",
    "LoguruSink",
    "ProgressSink",
    # Registration
    "reconcile",
    "ImageRegistrar",
    "RegistrationState",
    "build_register_request",
    "RollbackCoordinator",
    "StepRegisterImage",
]
