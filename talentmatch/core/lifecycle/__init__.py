"""
Application lifecycle for TalentMatch.

State machine governing how an application moves from submission to a
terminal outcome.
"""

from .application_lifecycle import ApplicationLifecycle, get_application_lifecycle

__all__ = [
    "ApplicationLifecycle",
    "get_application_lifecycle",
]
