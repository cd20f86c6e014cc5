# casedesk/services/events.py

from __future__ import annotations

from collections import defaultdict
from typing import Any, Callable, DefaultDict, List

from casedesk.utils.logging import get_logger

logger = get_logger("events")

CASE_UPDATED = "caseUpdated"
CUSTOMER_UPDATED = "customerUpdated"
DOCUMENT_CREATED = "documentCreated"

EVENT_NAMES = (CASE_UPDATED, CUSTOMER_UPDATED, DOCUMENT_CREATED)

Handler = Callable[[Any], None]


class EventBus:
    """
    Fan-out síncrono de notificaciones con nombre.
    - los handlers corren en orden de registro
    - un evento sin suscriptores se pierde (no hay cola ni replay)
    """

    def __init__(self):
        self._handlers: DefaultDict[str, List[Handler]] = defaultdict(list)

    def subscribe(self, name: str, handler: Handler) -> Callable[[], None]:
        if name not in EVENT_NAMES:
            raise ValueError(f"Unknown event: {name}")
        self._handlers[name].append(handler)

        def unsubscribe():
            if handler in self._handlers[name]:
                self._handlers[name].remove(handler)

        return unsubscribe

    def publish(self, name: str, payload: Any = None) -> int:
        if name not in EVENT_NAMES:
            raise ValueError(f"Unknown event: {name}")
        # copia: un handler puede desuscribirse mientras recorremos
        handlers = list(self._handlers[name])
        for handler in handlers:
            handler(payload)
        logger.debug(f"Published {name} to {len(handlers)} handler(s)")
        return len(handlers)

    def subscriber_count(self, name: str) -> int:
        return len(self._handlers[name])
