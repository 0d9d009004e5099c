"""Utility helpers."""
from .addresses import host_from_address  # noqa: F401
