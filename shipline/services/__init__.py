"""
Service layer for shipline.

Contains logic that coordinates domain objects and infrastructure:
- TargetRunner: Dependency-ordered target execution
- Notifier: Team chat notifications
- resolve_secrets: One-shot secret parameter resolution
"""

from .runner import TargetRunner
from .notification_service import Notifier
from .secrets import resolve_secrets, key_vault_settings

__all__ = [
    'TargetRunner',
    'Notifier',
    'resolve_secrets',
    'key_vault_settings',
]
