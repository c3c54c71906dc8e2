"""
Configuration Module

Provides configuration types, runtime records and loading utilities.
"""

from .types import (
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
)

from .loader import ConfigLoader

__all__ = [
    # Enums
    "RunOutcome",
    "StepAction",
    # Device mappings
    "EbsBlockDevice",
    "BlockDeviceMapping",
    # Config types
    "BlockDeviceConfig",
    "RootDeviceSpec",
    "PollingConfig",
    "CredentialsConfig",
    "BuildConfig",
    # Runtime types
    "Image",
    "RegisterImageRequest",
    # Utilities
    "ConfigLoader",
]
