# dental_core/common/events.py
from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Callable, Dict, List

from django.db import transaction

logger = logging.getLogger(__name__)

Handler = Callable[[Dict[str, Any]], None]

_registry: Dict[str, List[Handler]] = defaultdict(list)


def subscribe(event_name: str):
    """
    Decorator to register an event handler.
    Usage:
        @subscribe("prescription.filled")
        def handler(payload): ...
    """
    def _decorator(fn: Handler) -> Handler:
        _registry[event_name].append(fn)
        return fn
    return _decorator


def unsubscribe(event_name: str, fn: Handler) -> None:
    handlers = _registry.get(event_name, [])
    if fn in handlers:
        handlers.remove(fn)


def publish(event_name: str, payload: Dict[str, Any]) -> None:
    """
    Hand an event to the notification channel subscribers.
    Keep payloads ID-based (strings only) so they can cross a process boundary.
    A failing subscriber never breaks the core operation that published.
    """
    for handler in list(_registry.get(event_name, [])):
        try:
            handler(payload)
        except Exception:
            logger.exception("event handler failed for %s", event_name)


def publish_on_commit(event_name: str, payload: Dict[str, Any]) -> None:
    """
    Publish only once the surrounding transaction commits, so subscribers never
    see an event for a change that was rolled back.
    """
    transaction.on_commit(lambda: publish(event_name, payload))
