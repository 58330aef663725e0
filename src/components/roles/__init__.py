"""Roles component - role records behind every authorization check."""

from src.components.roles.component import RoleService
from src.components.roles.ports import ClockPort, PolicyPort, RoleRecordStorePort

__all__ = [
    # Component
    "RoleService",
    # Ports
    "ClockPort",
    "PolicyPort",
    "RoleRecordStorePort",
]
