# tests/test_customers.py

import pytest

from casedesk.services.customers import generate_customer_code, save_customer
from casedesk.services.gateway import GatewayError
from casedesk.services.ports import derive_port_code, create_adhoc_port, UNKNOWN_COUNTRY


def test_customer_code_derivation():
    assert generate_customer_code("Acme Shipping & Co.") == "ACMESHIPPI"
    assert generate_customer_code("  a-b c ") == "ABC"
    assert generate_customer_code("Nordsee 24 GmbH") == "NORDSEE24G"


def test_port_code_derivation():
    assert derive_port_code("Rotterdam") == "ROTTE"
    assert derive_port_code("Port 7 of Spain") == "PORTO"
    assert derive_port_code("Ho") == "HO"


def test_save_new_customer(gateway):
    customer = save_customer(gateway, {"company_name": " Acme Shipping & Co. ", "city": "Genoa"})

    assert customer["company_name"] == "Acme Shipping & Co."
    assert customer["customer_code"] == "ACMESHIPPI"
    assert customer["city"] == "Genoa"


def test_edit_customer_keeps_code(gateway):
    created = save_customer(gateway, {"company_name": "Acme Shipping & Co."})

    edited = save_customer(
        gateway,
        {"company_name": "Totally Different Ltd", "city": "Hamburg"},
        initial=created,
        is_edit=True,
    )

    assert edited["id"] == created["id"]
    assert edited["company_name"] == "Totally Different Ltd"
    assert edited["customer_code"] == "ACMESHIPPI"


def test_company_name_required(gateway):
    with pytest.raises(ValueError) as exc:
        save_customer(gateway, {"company_name": "   "})
    assert str(exc.value) == "Company name is required"

    assert gateway.select("customers").unwrap() == []


def test_customer_code_is_immutable(gateway):
    created = save_customer(gateway, {"company_name": "Acme"})
    result = gateway.update("customers", created["id"], {"customer_code": "OTHER"})

    assert result.ok is False
    with pytest.raises(GatewayError) as exc:
        result.unwrap(action="saving customer")
    assert exc.value.user_message == "Error saving customer. Please try again."


def test_adhoc_port(gateway):
    port = create_adhoc_port(gateway, "Valencia")

    assert port["port_code"] == "VALEN"
    assert port["port_name"] == "Valencia"
    assert port["city"] == "Valencia"
    assert port["country"] == UNKNOWN_COUNTRY == "Unknown"

    with pytest.raises(ValueError):
        create_adhoc_port(gateway, " ")
