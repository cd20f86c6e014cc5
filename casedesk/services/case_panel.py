# casedesk/services/case_panel.py

from __future__ import annotations

from typing import Any, Dict, Optional

from casedesk.services.documents import DocumentsView
from casedesk.services.events import EventBus
from casedesk.services.finance import FinanceLedgerView
from casedesk.services.gateway import DataGateway
from casedesk.services.record_views import (
    OverviewView, GoodsView, RouteView, SettingsView, HistoryView,
)
from casedesk.services.window_manager import Panel, WindowManager

SECTIONS = ("overview", "goods", "route", "finance", "documents", "history", "settings")


class CasePanel:
    """
    Contenedor con pestañas para un case. Cada vista reporta aquí el case
    actualizado; el panel sincroniza a las hermanas y lo reenvía al
    WindowManager (que parchea otros paneles y publica caseUpdated).
    """

    def __init__(
        self,
        panel: Panel,
        gateway: DataGateway,
        windows: WindowManager,
        bus: EventBus,
        default_currency: str = "EUR",
        changed_by: str = "System User",
        change_reason: str = "Status updated via settings",
    ):
        self.panel = panel
        self.windows = windows
        self.active_section = "overview"

        case = panel.payload
        self.overview = OverviewView(case, gateway, panels=windows, on_update=self.handle_update)
        self.goods = GoodsView(case, gateway, on_update=self.handle_update)
        self.route = RouteView(case, gateway, on_update=self.handle_update)
        self.settings = SettingsView(
            case, gateway, on_update=self.handle_update,
            changed_by=changed_by, change_reason=change_reason,
        )
        self.finance = FinanceLedgerView(case, gateway, default_currency=default_currency)
        self.documents = DocumentsView(case, gateway, bus=bus)
        self.history = HistoryView(case, gateway)

    @property
    def case(self) -> Dict[str, Any]:
        return self.panel.payload

    @property
    def views(self):
        return {
            "overview": self.overview,
            "goods": self.goods,
            "route": self.route,
            "finance": self.finance,
            "documents": self.documents,
            "history": self.history,
            "settings": self.settings,
        }

    def view(self, section: str):
        if section not in SECTIONS:
            raise ValueError(f"Unknown section: {section}")
        return self.views[section]

    def activate(self, section: str):
        view = self.view(section)
        self.active_section = section
        return view

    def handle_update(self, case: Dict[str, Any]) -> None:
        for view in self.views.values():
            view.sync(case)
        self.windows.handle_case_update(case)

    def update_field(self, section: str, field: str, value: Any) -> Optional[Dict[str, Any]]:
        view = self.view(section)
        if not hasattr(view, "update_field"):
            raise ValueError(f"Section {section} has no editable case fields")
        return view.update_field(field, value)

    def open_document_panel(self) -> Panel:
        return self.windows.open_document(self.case)

    def detach(self) -> None:
        self.documents.detach()
