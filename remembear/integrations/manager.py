"""
Integration Manager

Keeps the configured integrations and fans notifications out to them.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Sequence

from .base import Integration
from .console import ConsoleIntegration
from ..config import Settings, get_logger, log_error
from ..reminders import Reminder
from ..users import User

logger = get_logger("integrations")

# user uid -> preference key -> value
UserPreferences = Mapping[int, Mapping[str, Any]]


@dataclass
class FanOutResult:
    """Result of notifying every configured integration."""
    successful: List[str] = field(default_factory=list)
    failed: Dict[str, Exception] = field(default_factory=dict)

    @property
    def all_success(self) -> bool:
        return len(self.failed) == 0 and len(self.successful) > 0

    @property
    def partial_success(self) -> bool:
        return len(self.successful) > 0 and len(self.failed) > 0

    @property
    def all_failed(self) -> bool:
        return len(self.successful) == 0 and len(self.failed) > 0

    def summary(self) -> str:
        """Human-readable summary."""
        if self.all_success:
            return f"Notified {len(self.successful)} integration(s)"
        elif self.partial_success:
            return f"Notified {len(self.successful)}, failed on {len(self.failed)}"
        elif self.all_failed:
            errors = [str(error) for error in self.failed.values()]
            return f"Failed on all {len(self.failed)} integration(s): {'; '.join(errors[:2])}"
        else:
            return "No integrations configured"


def _build_console(options: Mapping[str, Any], preferences: UserPreferences, **kwargs) -> Integration:
    colors = {
        int(uid): prefs["color"]
        for uid, prefs in preferences.items()
        if prefs.get("color")
    }
    return ConsoleIntegration(stream=kwargs.get("stream"), colors=colors)


# integration name -> factory(options, preferences, **kwargs)
FACTORIES: Dict[str, Callable[..., Integration]] = {
    ConsoleIntegration.name: _build_console,
}


class IntegrationManager:
    """
    Registry of notification integrations.

    Handles:
    - Integration registration from settings
    - Isolated fan-out: one failing integration never stops the others

    Usage:
        manager = IntegrationManager()
        manager.register(ConsoleIntegration())

        result = manager.notify_all(reminder, [user], timestamp)
        if result.failed:
            ...
    """

    def __init__(self, integrations: Sequence[Integration] = ()):
        self._integrations: Dict[str, Integration] = {}
        for integration in integrations:
            self.register(integration)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        preferences: Optional[Mapping[str, UserPreferences]] = None,
        **kwargs,
    ) -> "IntegrationManager":
        """
        Build the integrations enabled in settings.

        Args:
            settings: Application settings
            preferences: integration name -> per-user preferences
            **kwargs: Passed to factories (e.g. stream for console)

        Returns:
            IntegrationManager with enabled integrations registered
        """
        preferences = preferences or {}
        manager = cls()

        for name, options in settings.enabled_integrations().items():
            factory = FACTORIES.get(name)
            if factory is None:
                logger.warning(f"Unknown integration {name!r} is enabled, skipping")
                continue
            manager.register(factory(options, preferences.get(name, {}), **kwargs))
            logger.info(f"Integration enabled: {name}")

        return manager

    def register(self, integration: Integration) -> None:
        """Register an integration, replacing one with the same name."""
        self._integrations[integration.name] = integration

    def get(self, name: str) -> Optional[Integration]:
        """Get integration by name."""
        return self._integrations.get(name)

    def names(self) -> List[str]:
        return list(self._integrations)

    def __iter__(self) -> Iterator[Integration]:
        return iter(self._integrations.values())

    def __len__(self) -> int:
        return len(self._integrations)

    def __bool__(self) -> bool:
        return bool(self._integrations)

    def notify_all(
        self,
        reminder: Reminder,
        assignees: Sequence[User],
        timestamp: datetime,
    ) -> FanOutResult:
        """
        Notify every integration in registration order.

        Failures are logged and collected, never raised.

        Args:
            reminder: The reminder that fired
            assignees: Users on duty
            timestamp: Firing instant

        Returns:
            FanOutResult with per-integration outcome
        """
        result = FanOutResult()

        for name, integration in self._integrations.items():
            try:
                integration.notify(reminder, assignees, timestamp)
            except Exception as e:
                result.failed[name] = e
                log_error(
                    logger,
                    e,
                    context=f"integration {name}",
                    integration=name,
                    reminder_uid=reminder.uid,
                )
            else:
                result.successful.append(name)

        return result
