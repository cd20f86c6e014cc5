# casedesk/services/workspace.py

from __future__ import annotations

import threading
import time
import uuid
from collections import OrderedDict
from typing import Any, Dict, Optional

from flask import current_app, session

from casedesk.services.case_browser import CaseBrowser
from casedesk.services.case_panel import CasePanel
from casedesk.services.customers import save_customer
from casedesk.services.documents import DocumentCreation
from casedesk.services.events import EventBus
from casedesk.services.gateway import DataGateway
from casedesk.services.window_manager import Panel, WindowManager
from casedesk.utils.logging import get_logger

logger = get_logger("workspace")

REGISTRY_KEY = "casedesk.workspaces"


class Workspace:
    """
    Todo lo que vive mientras dura la sesión de un usuario:
    bus de eventos, WindowManager, CaseBrowser y el estado de cada panel.
    """

    def __init__(self, gateway: DataGateway, settings: Optional[Dict[str, Any]] = None):
        settings = settings or {}
        self.gateway = gateway
        self.default_currency = settings.get("DEFAULT_CURRENCY", "EUR")
        self.changed_by = settings.get("STATUS_CHANGED_BY", "System User")
        self.change_reason = settings.get("STATUS_CHANGE_REASON", "Status updated via settings")

        self.bus = EventBus()
        self.windows = WindowManager(self.bus)
        self.browser = CaseBrowser(gateway, self.windows, self.bus)

        self._case_panels: Dict[str, CasePanel] = {}
        self._document_panels: Dict[str, DocumentCreation] = {}

    def panel(self, panel_id: str) -> Panel:
        panel = self.windows.get(panel_id)
        if panel is None:
            raise KeyError(panel_id)
        return panel

    def case_panel(self, panel_id: str) -> CasePanel:
        panel = self.panel(panel_id)
        if panel.kind != "case":
            raise KeyError(panel_id)
        if panel_id not in self._case_panels:
            self._case_panels[panel_id] = CasePanel(
                panel,
                self.gateway,
                self.windows,
                self.bus,
                default_currency=self.default_currency,
                changed_by=self.changed_by,
                change_reason=self.change_reason,
            )
        return self._case_panels[panel_id]

    def document_panel(self, panel_id: str) -> DocumentCreation:
        panel = self.panel(panel_id)
        if panel.kind != "document":
            raise KeyError(panel_id)
        if panel_id not in self._document_panels:
            self._document_panels[panel_id] = DocumentCreation(
                panel.payload, self.gateway, on_created=self.windows.handle_document_created,
            )
        return self._document_panels[panel_id]

    def save_customer_panel(self, panel_id: str, form_data: Dict[str, Any]) -> Dict[str, Any]:
        panel = self.panel(panel_id)
        if panel.kind != "customer":
            raise KeyError(panel_id)
        customer = save_customer(
            self.gateway,
            form_data,
            initial=panel.payload.get("customer"),
            is_edit=panel.payload.get("is_edit", False),
        )
        self.windows.handle_customer_saved(customer)
        self.close(panel_id)
        return customer

    def save_document_panel(self, panel_id: str) -> Dict[str, Any]:
        document = self.document_panel(panel_id).save()
        self.close(panel_id)
        return document

    def close(self, panel_id: str) -> bool:
        case_panel = self._case_panels.pop(panel_id, None)
        if case_panel:
            case_panel.detach()
        self._document_panels.pop(panel_id, None)
        return self.windows.close(panel_id)

    def close_all(self) -> None:
        for panel in list(self.windows.panels):
            self.close(panel.id)


class WorkspaceRegistry:
    """
    Workspaces en memoria del proceso, uno por sesión de navegador.
    Acotado: se descartan los inactivos más de `ttl_seconds` y, pasado
    `max_items`, los de acceso más antiguo.
    """

    def __init__(self, ttl_seconds: float = 3600, max_items: int = 500, clock=time.monotonic):
        self.ttl_seconds = ttl_seconds
        self.max_items = max_items
        self._clock = clock
        self._lock = threading.Lock()
        self._items: "OrderedDict[str, Workspace]" = OrderedDict()
        self._last_seen: Dict[str, float] = {}

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, workspace_id) -> bool:
        return workspace_id in self._items

    def get_or_create(self, workspace_id: Optional[str], gateway: DataGateway, settings=None):
        with self._lock:
            now = self._clock()
            self._evict_expired(now)

            if workspace_id and workspace_id in self._items:
                self._items.move_to_end(workspace_id)
                self._last_seen[workspace_id] = now
                return workspace_id, self._items[workspace_id]

            workspace_id = workspace_id or uuid.uuid4().hex
            ws = Workspace(gateway, settings)
            self._items[workspace_id] = ws
            self._last_seen[workspace_id] = now
            logger.info(f"Workspace created id={workspace_id}")

            while len(self._items) > self.max_items:
                oldest = next(iter(self._items))
                self._drop(oldest, reason="limit")
            return workspace_id, ws

    def _evict_expired(self, now: float) -> None:
        expired = [k for k, seen in self._last_seen.items() if now - seen > self.ttl_seconds]
        for k in expired:
            self._drop(k, reason="idle")

    def _drop(self, workspace_id: str, reason: str) -> None:
        ws = self._items.pop(workspace_id)
        self._last_seen.pop(workspace_id, None)
        ws.close_all()
        logger.info(f"Workspace evicted id={workspace_id} reason={reason}")


def current_workspace() -> Workspace:
    """Workspace de la sesión actual (se crea en la primera visita)."""
    registry: WorkspaceRegistry = current_app.extensions[REGISTRY_KEY]
    workspace_id, ws = registry.get_or_create(
        session.get("workspace_id"), DataGateway(), current_app.config,
    )
    session["workspace_id"] = workspace_id
    return ws
