"""
Cloud Module

The image service interface and its AWS implementation.
"""

from .base import ImageServiceBase
from .aws_provider import AWSImageService

__all__ = [
    "ImageServiceBase",
    "AWSImageService",
]
