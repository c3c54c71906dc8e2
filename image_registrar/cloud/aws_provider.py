"""
AWS Image Service Implementation

Implements ImageServiceBase for EC2 AMIs using boto3.
"""

import threading
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from loguru import logger
from mypy_boto3_ec2.client import EC2Client

from ..configs import CredentialsConfig, Image, PollingConfig, RegisterImageRequest
from ..errors import ImageServiceError
from ..utils.wait_until import wait_until
from .base import ImageServiceBase


# Image states after which an image will never become available
AWS_IMAGE_FAILED_STATES = {"failed", "invalid", "error", "deregistered"}


class AWSImageService(ImageServiceBase):
    """
    EC2 AMI operations.

    The client is created lazily from a boto3 session unless one is passed
    in, so tests can hand over a stubbed client.
    """

    def __init__(
        self,
        region_id: str,
        credentials: Optional[CredentialsConfig] = None,
        polling: Optional[PollingConfig] = None,
        client: Optional[EC2Client] = None,
    ):
        super().__init__(region_id)
        self.credentials = credentials or CredentialsConfig()
        self.polling = polling or PollingConfig()
        self._ec2_client: Optional[EC2Client] = client

    def initialize_client(self) -> EC2Client:
        """Initialize boto3 EC2 client"""
        session = boto3.Session(
            aws_access_key_id=self.credentials.access_key_id,
            aws_secret_access_key=self.credentials.secret_access_key,
            aws_session_token=self.credentials.session_token,
            region_name=self.region_id,
        )
        self._ec2_client = session.client("ec2")
        return self._ec2_client

    @property
    def ec2_client(self) -> EC2Client:
        if self._ec2_client is None:
            return self.initialize_client()
        return self._ec2_client

    def create_image(self, request: RegisterImageRequest) -> str:
        try:
            response = self.ec2_client.register_image(**request.to_api_kwargs())
        except (ClientError, BotoCoreError) as e:
            raise ImageServiceError(str(e)) from e

        image_id = response.get("ImageId")
        if not image_id:
            raise ImageServiceError("register_image did not return an image id")
        return image_id

    def _image_state(self, image_id: str) -> Optional[str]:
        try:
            response = self.ec2_client.describe_images(ImageIds=[image_id])
        except ClientError as e:
            # A freshly registered image can briefly be unknown to describe calls
            if e.response.get("Error", {}).get("Code") == "InvalidAMIID.NotFound":
                return None
            raise ImageServiceError(str(e)) from e
        except BotoCoreError as e:
            raise ImageServiceError(str(e)) from e

        images = response.get("Images", [])
        if not images:
            return None
        return images[0].get("State")

    def wait_until_available(self, image_id: str, cancel_event: threading.Event) -> None:
        def chk() -> bool:
            state = self._image_state(image_id)
            logger.debug(f"image {image_id}: {state}")
            if state in AWS_IMAGE_FAILED_STATES:
                raise ImageServiceError(f"image {image_id} entered state {state}")
            return state == "available"

        wait_until(
            chk,
            retry_interval=self.polling.delay_seconds,
            max_attempts=self.polling.max_attempts,
            cancel_event=cancel_event,
        )

    def describe_image(self, image_id: str) -> Image:
        try:
            response = self.ec2_client.describe_images(ImageIds=[image_id])
        except (ClientError, BotoCoreError) as e:
            raise ImageServiceError(str(e)) from e

        images = response.get("Images", [])
        if not images:
            raise ImageServiceError(f"image {image_id} not found")
        return Image.from_api(dict(images[0]))

    def deregister_image(self, image_id: str) -> None:
        try:
            self.ec2_client.deregister_image(ImageId=image_id)
        except (ClientError, BotoCoreError) as e:
            raise ImageServiceError(str(e)) from e
