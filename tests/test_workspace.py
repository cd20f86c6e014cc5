# tests/test_workspace.py

import pytest

from casedesk.services.events import CUSTOMER_UPDATED, DOCUMENT_CREATED
from casedesk.services.workspace import Workspace, WorkspaceRegistry, REGISTRY_KEY


def test_registry_reuses_workspace(gateway):
    registry = WorkspaceRegistry()

    ws_id, ws = registry.get_or_create(None, gateway)
    same_id, same = registry.get_or_create(ws_id, gateway)
    other_id, other = registry.get_or_create("unknown", gateway)

    assert same_id == ws_id and same is ws
    assert other_id == "unknown" and other is not ws


def test_settings_flow_into_views(gateway, make_case):
    ws = Workspace(gateway, {"DEFAULT_CURRENCY": "USD", "STATUS_CHANGED_BY": "Ops"})
    panel = ws.windows.open_case(make_case())

    cp = ws.case_panel(panel.id)
    assert ws.case_panel(panel.id) is cp
    assert cp.finance.add_row()["sales_currency"] == "USD"
    assert cp.settings.changed_by == "Ops"

    with pytest.raises(KeyError):
        ws.document_panel(panel.id)


def test_save_customer_panel_closes_and_notifies(gateway):
    ws = Workspace(gateway)
    saved = []
    ws.bus.subscribe(CUSTOMER_UPDATED, saved.append)

    panel = ws.windows.open_customer({"company_name": "Acme"})
    customer = ws.save_customer_panel(panel.id, {"company_name": "Acme Shipping & Co."})

    assert customer["customer_code"] == "ACMESHIPPI"
    assert saved == [customer]
    assert ws.windows.panels == []


def test_close_case_panel_detaches_listeners(gateway, make_case):
    ws = Workspace(gateway)
    panel = ws.windows.open_case(make_case())
    ws.case_panel(panel.id)
    assert ws.bus.subscriber_count(DOCUMENT_CREATED) == 1

    assert ws.close(panel.id) is True
    assert ws.bus.subscriber_count(DOCUMENT_CREATED) == 0
    with pytest.raises(KeyError):
        ws.case_panel(panel.id)


def test_registry_evicts_past_limit_least_recent_first(gateway):
    registry = WorkspaceRegistry(max_items=2)

    a, _ = registry.get_or_create("a", gateway)
    registry.get_or_create("b", gateway)
    registry.get_or_create("a", gateway)  # a vuelve a ser reciente
    registry.get_or_create("c", gateway)

    assert len(registry) == 2
    assert "a" in registry and "c" in registry
    assert "b" not in registry


def test_registry_evicts_idle_workspaces(gateway, make_case):
    now = [0.0]
    registry = WorkspaceRegistry(ttl_seconds=10, clock=lambda: now[0])

    _, idle = registry.get_or_create("idle", gateway)
    panel = idle.windows.open_case(make_case())
    idle.case_panel(panel.id)
    assert idle.bus.subscriber_count(DOCUMENT_CREATED) == 1

    now[0] = 5.0
    registry.get_or_create("busy", gateway)
    now[0] = 12.0
    registry.get_or_create("busy", gateway)

    assert "idle" not in registry
    assert "busy" in registry
    # al descartarlo se cierran sus paneles
    assert idle.windows.panels == []
    assert idle.bus.subscriber_count(DOCUMENT_CREATED) == 0


def test_cookieless_requests_stay_bounded(app):
    registry = app.extensions[REGISTRY_KEY]
    registry.max_items = 5

    for _ in range(20):
        assert app.test_client().get("/").status_code == 200

    assert len(registry) == 5
