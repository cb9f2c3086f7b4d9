"""Typed DTOs crossing the public call boundary."""

from .call_options import CallOptions

__all__ = ["CallOptions"]
