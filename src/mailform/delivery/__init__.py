"""Delivery lifecycle, descriptors and notification dispatchers."""

from mailform.delivery.dispatchers import (
    DispatcherRegistry,
    DispatchFn,
    LoggingDispatcher,
    OutboxDispatcher,
    dispatcher,
    outbox,
    register_builtin_dispatchers,
)
from mailform.delivery.lifecycle import DeliveryLifecycle, build_descriptor
from mailform.delivery.request import extract, lookup
from mailform.delivery.types import (
    DeliveryResult,
    DeliveryState,
    GateResult,
    NotificationDescriptor,
)

__all__ = [
    "DeliveryLifecycle",
    "DeliveryResult",
    "DeliveryState",
    "DispatchFn",
    "DispatcherRegistry",
    "GateResult",
    "LoggingDispatcher",
    "NotificationDescriptor",
    "OutboxDispatcher",
    "build_descriptor",
    "dispatcher",
    "extract",
    "lookup",
    "outbox",
    "register_builtin_dispatchers",
]
