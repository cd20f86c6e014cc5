# scripts/seed_dev.py

from decimal import Decimal

from casedesk import create_app
from casedesk.extensions import db
from casedesk.models import Port, Service, Supplier, DocumentTemplate

PORTS = [
    ("DEHAM", "Hamburg", "Hamburg", "Germany", "Europe"),
    ("NLRTM", "Rotterdam", "Rotterdam", "Netherlands", "Europe"),
    ("CNSHA", "Shanghai", "Shanghai", "China", "Asia"),
    ("SGSIN", "Singapore", "Singapore", "Singapore", "Asia"),
    ("USNYC", "New York", "New York", "United States", "North America"),
]

SERVICES = [
    ("OFR", "Ocean Freight", "freight", "per container", Decimal("1200.00"), Decimal("1450.00")),
    ("THC", "Terminal Handling", "port", "per container", Decimal("180.00"), Decimal("220.00")),
    ("CUS", "Customs Clearance", "customs", "per shipment", Decimal("90.00"), Decimal("150.00")),
    ("TRK", "Trucking", "transport", "per container", None, None),
]

SUPPLIERS = [
    ("MAEU", "Maersk Line", "carrier"),
    ("HLAG", "Hapag-Lloyd", "carrier"),
    ("NTRK", "Nord Trucking GmbH", "trucking"),
]

TEMPLATES = [
    (
        "Booking Confirmation",
        "booking_confirmation",
        "<h1>Booking Confirmation {{case_number}}</h1>"
        "<p>Customer: {{customer_name}} (ref. {{customer_reference}})</p>"
        "<p>{{container_quantity}} x {{container_type}}: {{cargo_description}}, {{weight_kg}} kg</p>"
        "<p>{{loading_port}} &rarr; {{discharge_port}} on {{vessel_name}} ({{carrier}})</p>"
        "<p>Closing: {{standard_closing}} / CY {{cy_closing}} / VWM {{vwm_closing}}</p>"
        "<p>Date: {{current_date}}</p>",
    ),
    (
        "Transport Order",
        "transport_order",
        "<h1>Transport Order {{case_number}}</h1>"
        "<p>Pickup: {{pickup_date}} - Delivery: {{delivery_date}}</p>"
        "<p>{{container_quantity}} x {{container_type}} to {{loading_port}}</p>"
        "<p>Date: {{current_date}}</p>",
    ),
]

app = create_app()

with app.app_context():
    db.create_all()

    if not Port.query.first():
        for code, name, city, country, region in PORTS:
            db.session.add(Port(port_code=code, port_name=name, city=city, country=country, region=region))

    if not Service.query.first():
        for code, name, category, unit, buy, sell in SERVICES:
            db.session.add(Service(
                service_code=code, service_name=name, category=category, unit=unit,
                default_purchase_price=buy, default_sales_price=sell, currency="EUR",
            ))

    if not Supplier.query.first():
        for code, name, category in SUPPLIERS:
            db.session.add(Supplier(supplier_code=code, company_name=name, category=category))

    if not DocumentTemplate.query.first():
        for name, ttype, html in TEMPLATES:
            db.session.add(DocumentTemplate(template_name=name, template_type=ttype, html_content=html))

    db.session.commit()
    print("Seed OK:", Port.query.count(), "ports,", Service.query.count(), "services,",
          Supplier.query.count(), "suppliers,", DocumentTemplate.query.count(), "templates")
