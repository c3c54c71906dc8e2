import threading
from typing import Any, Dict, List, Optional, Tuple

import pytest

from image_registrar.cloud.base import ImageServiceBase
from image_registrar.configs import BlockDeviceMapping, BuildConfig, Image, RegisterImageRequest
from image_registrar.configs.loader import ConfigLoader
from image_registrar.utils.wait_until import WaitUntilCancelledError


class FakeImageService(ImageServiceBase):
    """In-memory image service that records every call"""

    def __init__(self, region_id: str = "us-west-2"):
        super().__init__(region_id)
        self.calls: List[Tuple[str, Any]] = []
        self.requests: List[RegisterImageRequest] = []
        self.image_id = "ami-0123456789"
        self.image_mappings: List[Dict[str, Any]] = [
            {"DeviceName": "/dev/xvda", "Ebs": {"SnapshotId": "snap-root"}},
            {"DeviceName": "/dev/xvdb", "Ebs": {"SnapshotId": "snap-data"}},
            {"DeviceName": "/dev/sdc", "VirtualName": "ephemeral0"},
        ]
        self.create_error: Optional[Exception] = None
        self.wait_error: Optional[Exception] = None
        self.describe_error: Optional[Exception] = None
        self.deregister_error: Optional[Exception] = None

    def create_image(self, request: RegisterImageRequest) -> str:
        self.calls.append(("create_image", request.name))
        self.requests.append(request)
        if self.create_error is not None:
            raise self.create_error
        return self.image_id

    def wait_until_available(self, image_id: str, cancel_event: threading.Event) -> None:
        self.calls.append(("wait_until_available", image_id))
        if cancel_event.is_set():
            raise WaitUntilCancelledError("cancelled while waiting")
        if self.wait_error is not None:
            raise self.wait_error

    def describe_image(self, image_id: str) -> Image:
        self.calls.append(("describe_image", image_id))
        if self.describe_error is not None:
            raise self.describe_error
        return Image(
            image_id=image_id,
            name=self.requests[-1].name if self.requests else "",
            block_device_mappings=[BlockDeviceMapping.from_api(m) for m in self.image_mappings],
            state="available",
        )

    def deregister_image(self, image_id: str) -> None:
        self.calls.append(("deregister_image", image_id))
        if self.deregister_error is not None:
            raise self.deregister_error

    def call_names(self) -> List[str]:
        return [name for name, _ in self.calls]


class RecordingSink:
    def __init__(self):
        self.messages: List[str] = []
        self.warnings: List[str] = []
        self.errors: List[str] = []

    def say(self, message: str) -> None:
        self.messages.append(message)

    def warn(self, message: str) -> None:
        self.warnings.append(message)

    def error(self, message: str) -> None:
        self.errors.append(message)


def minimal_config_dict(**overrides) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "ami_name": "unit-test-image",
        "ami_virtualization_type": "hvm",
        "ami_root_device": {
            "source_device_name": "/dev/xvdf",
            "device_name": "/dev/xvda",
        },
        "ami_block_device_mappings": [
            {"device_name": "/dev/xvdb", "volume_size": 50, "volume_type": "gp3", "delete_on_termination": True},
        ],
        "launch_block_device_mappings": [
            {"device_name": "/dev/xvdf", "volume_size": 20, "volume_type": "gp3", "delete_on_termination": True},
            {"device_name": "/dev/xvdg", "volume_size": 10, "omit_from_artifact": True},
        ],
        "polling": {"delay_seconds": 0, "max_attempts": 1},
    }
    data.update(overrides)
    return data


@pytest.fixture
def fake_service() -> FakeImageService:
    return FakeImageService()


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def build_config() -> BuildConfig:
    return ConfigLoader.from_dict(minimal_config_dict())
