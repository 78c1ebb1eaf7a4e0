"""Counters for social actions and notification delivery."""

from . import metrics, registry
from .registry import registry as default_registry

__all__ = ["default_registry", "metrics", "registry"]
