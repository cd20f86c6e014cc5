# tests/conftest.py

from decimal import Decimal

import pytest

from casedesk import create_app
from casedesk.config import TestConfig
from casedesk.extensions import db
from casedesk.models import DocumentTemplate
from casedesk.models.case import CASE_RELATIONS
from casedesk.services.events import EventBus
from casedesk.services.gateway import DataGateway
from casedesk.services.window_manager import WindowManager


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def gateway(app):
    return DataGateway()


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def windows(bus):
    return WindowManager(bus)


@pytest.fixture
def make_case(gateway):
    counter = {"n": 0}

    def _make(**values):
        counter["n"] += 1
        data = {
            "case_number": f"CASE-TEST-{counter['n']}",
            "case_type": "booking",
            "direction": "export",
            "status": "draft",
        }
        data.update(values)
        return gateway.insert("cases", data, expand=CASE_RELATIONS).unwrap()

    return _make


@pytest.fixture
def master_data(gateway):
    """Puertos, servicios, proveedores, un cliente y una plantilla."""
    hamburg = gateway.insert("ports", {
        "port_code": "DEHAM", "port_name": "Hamburg", "city": "Hamburg", "country": "Germany",
    }).unwrap()
    shanghai = gateway.insert("ports", {
        "port_code": "CNSHA", "port_name": "Shanghai", "city": "Shanghai", "country": "China",
    }).unwrap()
    freight = gateway.insert("services", {
        "service_code": "OFR", "service_name": "Ocean Freight", "category": "freight",
        "unit": "per container", "default_purchase_price": Decimal("1200.00"),
        "default_sales_price": Decimal("1450.00"), "currency": "EUR",
    }).unwrap()
    trucking = gateway.insert("services", {
        "service_code": "TRK", "service_name": "Trucking", "category": "transport",
        "unit": "per container", "currency": "EUR",
    }).unwrap()
    carrier = gateway.insert("suppliers", {
        "supplier_code": "MAEU", "company_name": "Maersk Line", "category": "carrier",
    }).unwrap()
    customer = gateway.insert("customers", {
        "customer_code": "NORDSEEIMP", "company_name": "Nordsee Import GmbH", "city": "Bremen",
    }).unwrap()

    template = DocumentTemplate(
        template_name="Booking Confirmation",
        template_type="booking_confirmation",
        html_content="<h1>{{case_number}}</h1><p>{{customer_name}}: {{loading_port}} -> {{discharge_port}}</p>"
                     "<p>{{container_quantity}} x {{container_type}}</p><p>{{unknown_marker}}</p>",
    )
    db.session.add(template)
    db.session.commit()

    return {
        "hamburg": hamburg,
        "shanghai": shanghai,
        "freight": freight,
        "trucking": trucking,
        "carrier": carrier,
        "customer": customer,
        "template": template.to_dict(),
    }
