"""
Image Registration Module

Device mapping reconciliation, image registration and rollback.
"""

from .devices import reconcile
from .registrar import ImageRegistrar, RegistrationState, build_register_request
from .rollback import RollbackCoordinator
from .step import StepRegisterImage

__all__ = [
    "reconcile",
    "ImageRegistrar",
    "RegistrationState",
    "build_register_request",
    "RollbackCoordinator",
    "StepRegisterImage",
]
