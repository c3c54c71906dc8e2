"""
Configuration and Record Type Definitions

Build configuration is validated with pydantic (it comes from user files);
block device mappings are pydantic models shaped like the EC2 API so they
round-trip through boto3 untouched; runtime records are plain dataclasses.
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class RunOutcome(str, Enum):
    """How the surrounding pipeline run is ending"""
    CONTINUING = "continuing"
    CANCELLED = "cancelled"
    HALTED = "halted"


class StepAction(str, Enum):
    """What the pipeline should do after a step returns"""
    CONTINUE = "continue"
    HALT = "halt"


# ==================== Block device mappings (EC2 API shape) ====================

class EbsBlockDevice(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    snapshot_id: Optional[str] = Field(default=None, alias="SnapshotId")
    encrypted: Optional[bool] = Field(default=None, alias="Encrypted")
    kms_key_id: Optional[str] = Field(default=None, alias="KmsKeyId")
    delete_on_termination: Optional[bool] = Field(default=None, alias="DeleteOnTermination")
    volume_size: Optional[int] = Field(default=None, alias="VolumeSize")
    volume_type: Optional[str] = Field(default=None, alias="VolumeType")
    iops: Optional[int] = Field(default=None, alias="Iops")
    throughput: Optional[int] = Field(default=None, alias="Throughput")


class BlockDeviceMapping(BaseModel):
    """
    One device of an image, keyed by ``device_name``.

    Attributes the provider returns that are not modelled here are kept as
    extras and written back unchanged by :meth:`to_api`.
    """
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    device_name: str = Field(alias="DeviceName")
    ebs: Optional[EbsBlockDevice] = Field(default=None, alias="Ebs")
    virtual_name: Optional[str] = Field(default=None, alias="VirtualName")
    no_device: Optional[str] = Field(default=None, alias="NoDevice")

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "BlockDeviceMapping":
        return cls.model_validate(data)

    def to_api(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)

    @property
    def snapshot_id(self) -> Optional[str]:
        return self.ebs.snapshot_id if self.ebs is not None else None


# ==================== Build configuration ====================

class BlockDeviceConfig(BaseModel):
    """A device entry as written in the build configuration file"""
    model_config = ConfigDict(extra="forbid")

    device_name: str
    snapshot_id: Optional[str] = None
    encrypted: Optional[bool] = None
    kms_key_id: Optional[str] = None
    delete_on_termination: bool = False
    volume_size: Optional[int] = None
    volume_type: Optional[str] = None
    iops: Optional[int] = None
    throughput: Optional[int] = None
    virtual_name: Optional[str] = None
    no_device: bool = False
    # Only meaningful for launch devices: keep the device off the final image
    omit_from_artifact: bool = False

    def to_mapping(self) -> BlockDeviceMapping:
        if self.no_device:
            return BlockDeviceMapping(device_name=self.device_name, no_device="")

        if self.virtual_name:
            if self.virtual_name.startswith("ephemeral"):
                return BlockDeviceMapping(device_name=self.device_name, virtual_name=self.virtual_name)
            return BlockDeviceMapping(device_name=self.device_name)

        ebs = EbsBlockDevice(
            delete_on_termination=self.delete_on_termination,
            volume_type=self.volume_type or None,
            volume_size=self.volume_size if self.volume_size else None,
            iops=self.iops,
            throughput=self.throughput,
            snapshot_id=self.snapshot_id or None,
            encrypted=self.encrypted,
            kms_key_id=self.kms_key_id or None,
        )
        return BlockDeviceMapping(device_name=self.device_name, ebs=ebs)


class RootDeviceSpec(BaseModel):
    """The launch device that becomes the image's root device, and its final name"""
    source_device_name: str
    device_name: str


class PollingConfig(BaseModel):
    delay_seconds: float = Field(default=15, ge=0)
    max_attempts: int = Field(default=40, ge=1)

    @property
    def timeout_seconds(self) -> float:
        return self.delay_seconds * self.max_attempts

    def with_env_overrides(self) -> "PollingConfig":
        """Apply AWS_POLL_DELAY_SECONDS / AWS_MAX_ATTEMPTS if set"""
        updates: Dict[str, Any] = {}
        delay = os.environ.get("AWS_POLL_DELAY_SECONDS")
        if delay:
            updates["delay_seconds"] = float(delay)
        attempts = os.environ.get("AWS_MAX_ATTEMPTS")
        if attempts:
            updates["max_attempts"] = int(attempts)
        if not updates:
            return self
        return PollingConfig.model_validate({**self.model_dump(), **updates})


class CredentialsConfig(BaseModel):
    access_key_id: Optional[str] = None
    secret_access_key: Optional[str] = None
    session_token: Optional[str] = None


class BuildConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    ami_name: str = Field(min_length=1)
    ami_virtualization_type: Literal["hvm", "paravirtual"] = "hvm"
    architecture: str = "x86_64"
    # Only an explicit true requests boot volume encryption
    encrypt_boot: Optional[bool] = None
    skip_build_region: bool = False
    ena_support: Optional[bool] = None
    sriov_support: bool = False
    boot_mode: Optional[Literal["legacy-bios", "uefi", "uefi-preferred"]] = None
    region: Optional[str] = None

    ami_root_device: RootDeviceSpec
    ami_block_device_mappings: List[BlockDeviceConfig] = []
    launch_block_device_mappings: List[BlockDeviceConfig] = []

    polling: PollingConfig = PollingConfig()
    credentials: CredentialsConfig = CredentialsConfig()

    @model_validator(mode="after")
    def check_root_device(self) -> "BuildConfig":
        source = self.ami_root_device.source_device_name
        found = False
        for device in self.launch_block_device_mappings:
            if device.device_name != source:
                continue
            found = True
            if device.omit_from_artifact:
                raise ValueError('You cannot set "omit_from_artifact": true for the root volume.')
        if not found:
            raise ValueError(
                f"ami_root_device: no launch volume with name '{source}' is found, "
                "specify it in launch_block_device_mappings"
            )
        return self

    @property
    def is_intermediary(self) -> bool:
        """The image is registered under a placeholder name and finalised by a later copy"""
        return self.encrypt_boot is True or self.skip_build_region

    def ami_devices(self) -> List[BlockDeviceMapping]:
        return [device.to_mapping() for device in self.ami_block_device_mappings]

    def launch_devices(self) -> List[BlockDeviceMapping]:
        return [device.to_mapping() for device in self.launch_block_device_mappings]

    def launch_omit_map(self) -> Dict[str, bool]:
        return {
            device.device_name: True
            for device in self.launch_block_device_mappings
            if device.omit_from_artifact
        }


# ==================== Runtime records ====================

@dataclass
class Image:
    """The authoritative image record returned by the provider"""
    image_id: str
    name: str
    block_device_mappings: List[BlockDeviceMapping] = field(default_factory=list)
    state: Optional[str] = None
    root_device_name: Optional[str] = None
    creation_date: Optional[str] = None

    def snapshot_ids(self) -> List[str]:
        return [
            mapping.snapshot_id
            for mapping in self.block_device_mappings
            if mapping.snapshot_id is not None
        ]

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Image":
        return cls(
            image_id=data["ImageId"],
            name=data.get("Name", ""),
            block_device_mappings=[
                BlockDeviceMapping.from_api(m) for m in data.get("BlockDeviceMappings", [])
            ],
            state=data.get("State"),
            root_device_name=data.get("RootDeviceName"),
            creation_date=data.get("CreationDate"),
        )


@dataclass
class RegisterImageRequest:
    """Everything sent with a create-image call; unset options are omitted"""
    name: str
    architecture: str
    root_device_name: str
    virtualization_type: str
    block_device_mappings: List[BlockDeviceMapping]
    ena_support: Optional[bool] = None
    sriov_net_support: Optional[str] = None
    boot_mode: Optional[str] = None

    def to_api_kwargs(self) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {
            "Name": self.name,
            "Architecture": self.architecture,
            "RootDeviceName": self.root_device_name,
            "VirtualizationType": self.virtualization_type,
            "BlockDeviceMappings": [m.to_api() for m in self.block_device_mappings],
        }
        if self.ena_support is not None:
            kwargs["EnaSupport"] = self.ena_support
        if self.sriov_net_support is not None:
            kwargs["SriovNetSupport"] = self.sriov_net_support
        if self.boot_mode is not None:
            kwargs["BootMode"] = self.boot_mode
        return kwargs
