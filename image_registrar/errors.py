"""
Error types for the image registration step.

Fatal errors carry the phase that failed and the provider message verbatim,
formatted the way they are shown to the user.
"""


class ImageServiceError(Exception):
    """A provider call (register/describe/deregister/poll) failed"""


class ImageStepError(Exception):
    """Base class for errors that halt the registration step"""

    phase: str = "processing AMI"

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"Error {self.phase}: {detail}")


class RegistrationError(ImageStepError):
    """The create-image request was rejected"""

    phase = "registering AMI"


class AvailabilityFailure(ImageStepError):
    """The image never became available, or the run was cancelled while waiting"""

    phase = "waiting for AMI"


class AvailabilityTimeoutError(AvailabilityFailure):
    """The image did not become available within the polling budget"""


class MetadataFetchError(ImageStepError):
    """The authoritative image record could not be fetched after the wait"""

    phase = "searching for AMI"


class RollbackWarning(UserWarning):
    """Deregistering the image during unwind failed; reported, never raised"""

    def __init__(self, image_id: str, detail: str):
        self.image_id = image_id
        self.detail = detail
        super().__init__(f"Error deregistering AMI, may still be around: {detail}")
