"""Notification dispatchers for mailform.

A dispatcher is a callable taking a NotificationDescriptor and performing the
delivery; it may raise, and the error propagates to whoever created the form.
Dispatchers are registered by name so settings can select one.

Usage:
    from mailform.delivery import dispatcher

    @dispatcher("smtp")
    def send_smtp(descriptor: NotificationDescriptor) -> None:
        ...
"""

import logging
from collections.abc import Callable

from mailform.delivery.types import NotificationDescriptor

logger = logging.getLogger(__name__)

# Dispatcher signature: (NotificationDescriptor) -> None
DispatchFn = Callable[[NotificationDescriptor], None]


class DispatcherRegistry:
    """Registry for notification dispatchers.

    Built-in dispatchers ("outbox", "log") are registered by
    register_builtin_dispatchers(); applications register their transport at
    startup or with the @dispatcher decorator.
    """

    _dispatchers: dict[str, DispatchFn] = {}

    @classmethod
    def register(cls, name: str, dispatch_fn: DispatchFn) -> None:
        """Register a dispatcher by name.

        Idempotent - re-registering the same name is a no-op.
        """
        if name in cls._dispatchers:
            return
        cls._dispatchers[name] = dispatch_fn

    @classmethod
    def get(cls, name: str) -> DispatchFn:
        """Get a registered dispatcher by name.

        Raises:
            ValueError: If dispatcher is not registered
        """
        if name not in cls._dispatchers:
            raise ValueError(
                f"Dispatcher '{name}' is not registered. "
                "Available dispatchers: " + ", ".join(cls.list_registered())
            )
        return cls._dispatchers[name]

    @classmethod
    def is_registered(cls, name: str) -> bool:
        return name in cls._dispatchers

    @classmethod
    def list_registered(cls) -> list[str]:
        return sorted(cls._dispatchers.keys())

    @classmethod
    def clear(cls) -> None:
        """Clear all registrations. Primarily for testing."""
        cls._dispatchers.clear()


def dispatcher(name: str) -> Callable[[DispatchFn], DispatchFn]:
    """Decorator to register a dispatcher function."""

    def decorator(fn: DispatchFn) -> DispatchFn:
        DispatcherRegistry.register(name, fn)
        return fn

    return decorator


class OutboxDispatcher:
    """Keeps delivered descriptors in memory instead of sending them."""

    def __init__(self) -> None:
        self.deliveries: list[NotificationDescriptor] = []

    def __call__(self, descriptor: NotificationDescriptor) -> None:
        self.deliveries.append(descriptor)

    def clear(self) -> None:
        self.deliveries.clear()


class LoggingDispatcher:
    """Writes descriptors to the log instead of sending them."""

    def __init__(self, level: int = logging.INFO):
        self.level = level

    def __call__(self, descriptor: NotificationDescriptor) -> None:
        logger.log(
            self.level,
            "Mail from %s: subject=%r to=%r template=%r fields=%s attachments=%s",
            descriptor.form_name,
            descriptor.subject,
            descriptor.recipients,
            descriptor.template,
            sorted(descriptor.body),
            [name for name, _ in descriptor.attachments],
        )


outbox = OutboxDispatcher()


def register_builtin_dispatchers() -> None:
    """Register the in-memory outbox and the logging dispatcher."""
    DispatcherRegistry.register("outbox", outbox)
    DispatcherRegistry.register("log", LoggingDispatcher())
