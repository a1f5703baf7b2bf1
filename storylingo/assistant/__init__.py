"""AI assistant for the translation panel: triggering, reconciliation and sessions."""

from .reconcile import Reconciliation, reconcile
from .session import AssistantSession
from .timers import AsyncioScheduler, Debouncer
from .trigger import AssessmentTrigger, TriggerDecision

__all__ = [
    "Reconciliation",
    "reconcile",
    "AssistantSession",
    "AsyncioScheduler",
    "Debouncer",
    "AssessmentTrigger",
    "TriggerDecision",
]
