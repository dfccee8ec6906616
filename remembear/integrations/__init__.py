"""
Notification Integrations

Pluggable sinks that receive triggered reminders.

Architecture:
    Integration (base)
        └── ConsoleIntegration - text stream output

Usage:
    from remembear.integrations import ConsoleIntegration, IntegrationManager

    manager = IntegrationManager([ConsoleIntegration()])
    result = manager.notify_all(reminder, [user], timestamp)
"""

from .base import Integration, IntegrationError
from .console import ConsoleIntegration, format_timestamp
from .manager import IntegrationManager, FanOutResult

__all__ = [
    # Base
    "Integration",
    "IntegrationError",
    # Console
    "ConsoleIntegration",
    "format_timestamp",
    # Manager
    "IntegrationManager",
    "FanOutResult",
]
