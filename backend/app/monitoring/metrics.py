"""Metric definitions for social actions and notification fan-out."""

from __future__ import annotations

from .registry import registry


social_actions_total = registry.counter(
    "social_actions_total",
    "Number of successfully applied social graph and engagement mutations.",
    label_names=("action",),
)

social_conflicts_total = registry.counter(
    "social_conflicts_total",
    "Mutations rejected because the like or follow edge already existed.",
    label_names=("action",),
)

notifications_emitted_total = registry.counter(
    "notifications_emitted_total",
    "Notifications written by the fan-out.",
    label_names=("type",),
)

notifications_failed_total = registry.counter(
    "notifications_failed_total",
    "Notifications that could not be written; the triggering mutation still succeeded.",
    label_names=("type",),
)
