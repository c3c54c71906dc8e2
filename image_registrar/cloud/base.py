"""
Image Service Abstract Base Class

Defines the four provider operations the registration step depends on.
Implementations raise ImageServiceError carrying the provider's message
verbatim; the polling call may also raise WaitUntilTimeoutError or
WaitUntilCancelledError.
"""

import threading
from abc import ABC, abstractmethod

from ..configs import Image, RegisterImageRequest


class ImageServiceBase(ABC):
    """An image service bound to a single region"""

    def __init__(self, region_id: str):
        self.region_id = region_id

    @abstractmethod
    def create_image(self, request: RegisterImageRequest) -> str:
        """
        Submit a create-image request.

        Success only means the request was accepted; the image may still be
        pending.

        Returns:
            The new image ID
        """
        pass

    @abstractmethod
    def wait_until_available(self, image_id: str, cancel_event: threading.Event) -> None:
        """
        Block until the image is available.

        Must return promptly once ``cancel_event`` is set.

        Raises:
            WaitUntilTimeoutError: the polling budget ran out
            WaitUntilCancelledError: the run was cancelled
            ImageServiceError: the image failed or polling errored
        """
        pass

    @abstractmethod
    def describe_image(self, image_id: str) -> Image:
        """Fetch the authoritative current record of an image"""
        pass

    @abstractmethod
    def deregister_image(self, image_id: str) -> None:
        """Best-effort teardown of an image"""
        pass
