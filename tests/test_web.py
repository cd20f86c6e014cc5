# tests/test_web.py

from casedesk.extensions import db
from casedesk.models import Case, CaseDocument


def _new_case_panel(client):
    resp = client.post("/cases/new")
    assert resp.status_code == 302
    return resp.headers["Location"].rstrip("/").split("/panels/")[1].split("?")[0]


def test_home_and_health(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert b"New Case" in resp.data

    health = client.get("/health/").get_json()
    assert health == {"status": "healthy", "database": "ok"}

    assert client.get("/api/ping").get_json() == {"status": "ok"}


def test_new_case_panel_and_sections(client, master_data):
    panel_id = _new_case_panel(client)
    assert panel_id.startswith("case-")

    for section in ("overview", "goods", "route", "finance", "documents", "history", "settings"):
        resp = client.get(f"/panels/{panel_id}?section={section}")
        assert resp.status_code == 200, section

    assert client.get(f"/panels/{panel_id}?section=invoices").status_code == 404
    assert client.get("/panels/nope").status_code == 404

    panels = client.get("/api/panels").get_json()["panels"]
    assert [p["id"] for p in panels] == [panel_id]


def test_field_update_and_status_change(client, app):
    panel_id = _new_case_panel(client)

    client.post(f"/panels/{panel_id}/field", data={
        "section": "goods", "field": "container_quantity", "value": "3",
    })
    client.post(f"/panels/{panel_id}/field", data={
        "section": "settings", "field": "status", "value": "active",
    })

    case = db.session.execute(db.select(Case)).scalar_one()
    db.session.refresh(case)
    assert case.container_quantity == 3
    assert case.status == "active"

    # error de validación: se informa y no se escribe nada
    resp = client.post(f"/panels/{panel_id}/field", data={
        "section": "goods", "field": "container_type", "value": "Banana",
    }, follow_redirects=True)
    assert b"Invalid container type" in resp.data


def test_pick_creates_port_and_customer_panel(client, master_data):
    panel_id = _new_case_panel(client)

    resp = client.post(f"/panels/{panel_id}/pick", data={
        "target": "loading_port_id", "text": "Valencia",
    }, follow_redirects=True)
    assert b"has been created successfully!" in resp.data

    ports = client.get("/api/options/ports?q=valen").get_json()["options"]
    assert [p["label"] for p in ports] == ["Valencia"]

    resp = client.post(f"/panels/{panel_id}/pick", data={"target": "customer", "text": "Brand New Co"})
    assert resp.status_code == 302
    assert "/panels/customer-" in resp.headers["Location"]


def test_customer_panel_save(client):
    resp = client.post("/panels/customer/new", data={"company_name": "Acme Shipping & Co."})
    panel_id = resp.headers["Location"].split("/panels/")[1]

    resp = client.post(f"/panels/{panel_id}/customer/save", data={
        "company_name": "Acme Shipping & Co.", "city": "Genoa",
    }, follow_redirects=True)
    assert b"ACMESHIPPI" in resp.data

    options = client.get("/api/options/customers?q=acme").get_json()["options"]
    assert options[0]["label"] == "Acme Shipping & Co."
    # el panel se cerró al guardar
    assert client.get("/api/panels").get_json()["panels"] == []


def test_customer_panel_requires_name(client):
    resp = client.post("/panels/customer/new", data={})
    panel_id = resp.headers["Location"].split("/panels/")[1]

    resp = client.post(f"/panels/{panel_id}/customer/save", data={"company_name": ""})
    assert resp.status_code == 200
    assert b"Company name is required" in resp.data


def test_finance_flow_and_totals(client, master_data):
    panel_id = _new_case_panel(client)
    case_id = client.get("/api/panels").get_json()["panels"][0]["payload"]["id"]

    client.post(f"/panels/{panel_id}/finance/add")
    rows = client.get(f"/api/cases/{case_id}/finance/totals").get_json()
    assert rows["rows"] == 1

    row_id = db.session.execute(db.text("SELECT id FROM case_finance")).scalar_one()
    client.post(f"/panels/{panel_id}/finance/{row_id}/service", data={"option_id": master_data["freight"]["id"]})
    client.post(f"/panels/{panel_id}/finance/{row_id}", data={"field": "quantity", "value": "2"})

    totals = client.get(f"/api/cases/{case_id}/finance/totals").get_json()
    assert totals["total_purchase"] == "2400.00"
    assert totals["total_sales"] == "2900.00"
    assert totals["profit"] == "500.00"
    assert totals["margin"] == "17.24"

    # sin confirmar no se borra
    client.post(f"/panels/{panel_id}/finance/{row_id}/delete")
    assert client.get(f"/api/cases/{case_id}/finance/totals").get_json()["rows"] == 1
    client.post(f"/panels/{panel_id}/finance/{row_id}/delete", data={"confirm": "yes"})
    assert client.get(f"/api/cases/{case_id}/finance/totals").get_json()["rows"] == 0


def test_document_panel_save_and_download(client, master_data):
    panel_id = _new_case_panel(client)

    resp = client.post(f"/panels/{panel_id}/documents/new")
    doc_panel_id = resp.headers["Location"].split("/panels/")[1]
    assert doc_panel_id.startswith("document-")

    template_id = master_data["template"]["id"]
    resp = client.get(f"/panels/{doc_panel_id}?template_id={template_id}")
    assert resp.status_code == 200
    assert b"Booking Confirmation - CASE-" in resp.data

    resp = client.post(f"/panels/{doc_panel_id}/document/save", data={
        "template_id": template_id,
        "document_name": "Booking Confirmation",
        "html_content": "<h1>Edited</h1>",
    })
    assert resp.status_code == 302

    document = db.session.execute(db.select(CaseDocument)).scalar_one()
    assert document.html_content == "<h1>Edited</h1>"

    resp = client.get(f"/panels/{panel_id}/documents/{document.id}/download")
    assert resp.status_code == 200
    assert resp.data == b"<h1>Edited</h1>"
    assert "Booking_Confirmation.html" in resp.headers["Content-Disposition"]


def test_api_options_unknown_kind(client):
    assert client.get("/api/options/invoices").status_code == 404


def test_resubmitting_prefilled_picker_keeps_link(client, master_data):
    panel_id = _new_case_panel(client)
    hamburg_id = master_data["hamburg"]["id"]

    client.post(f"/panels/{panel_id}/pick", data={"target": "loading_port_id", "option_id": hamburg_id})
    case = db.session.execute(db.select(Case)).scalar_one()
    assert case.loading_port_id == hamburg_id

    # el formulario se reenvía tal cual: texto pre-cargado, sin option_id
    for text in ("Hamburg", " hamburg "):
        client.post(f"/panels/{panel_id}/pick", data={
            "target": "loading_port_id", "option_id": "", "text": text,
        })
        db.session.refresh(case)
        assert case.loading_port_id == hamburg_id

    ports = client.get("/api/options/ports").get_json()["options"]
    assert len(ports) == 2


def test_document_content_can_be_cleared(client, master_data):
    panel_id = _new_case_panel(client)
    doc_panel_id = client.post(f"/panels/{panel_id}/documents/new").headers["Location"].split("/panels/")[1]

    template_id = master_data["template"]["id"]
    client.get(f"/panels/{doc_panel_id}?template_id={template_id}")
    client.post(f"/panels/{doc_panel_id}/document/save", data={
        "template_id": template_id,
        "document_name": "Empty",
        "html_content": "",
    })

    document = db.session.execute(db.select(CaseDocument)).scalar_one()
    assert document.html_content == ""
