"""Data models for captured images."""

from .image import CapturedImage, save_image
