"""Moderation component - post creation, review queue and publishing."""

from src.components.moderation.component import ModerationService
from src.components.moderation.ports import (
    AuthorLookupPort,
    ClockPort,
    PolicyPort,
    PostStorePort,
    RoleLookupPort,
)

__all__ = [
    # Component
    "ModerationService",
    # Ports
    "AuthorLookupPort",
    "ClockPort",
    "PolicyPort",
    "PostStorePort",
    "RoleLookupPort",
]
