# casedesk/models/case.py

from datetime import datetime
from sqlalchemy.orm import validates

from casedesk.extensions import db
from casedesk.models.base import RecordMixin, new_id


STATUS_OPTIONS = ["draft", "active", "completed", "cancelled", "on_hold", "archived"]
CASE_TYPES = ["quotation", "booking"]
CURRENCY_OPTIONS = ["EUR", "USD", "GBP", "JPY", "CNY", "SGD", "AED"]
CONTAINER_TYPES = [
    "20ft Standard",
    "40ft Standard",
    "40ft High Cube",
    "45ft High Cube",
    "20ft Reefer",
    "40ft Reefer",
    "LCL",
]
INCOTERMS = ["EXW", "FCA", "CPT", "CIP", "DAP", "DPU", "DDP", "FAS", "FOB", "CFR", "CIF"]

# relaciones que se expanden al leer/escribir un case
CASE_RELATIONS = ("customer", "loading_port", "discharge_port")


class Case(RecordMixin, db.Model):
    __tablename__ = "cases"

    # case_number se asigna al crear y no cambia nunca
    IMMUTABLE_FIELDS = RecordMixin.IMMUTABLE_FIELDS | {"case_number"}

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    case_number = db.Column(db.String(40), unique=True, nullable=False)

    case_type = db.Column(db.String(20), nullable=False, default="booking")  # quotation / booking
    direction = db.Column(db.String(20), nullable=False, default="export")
    status = db.Column(db.String(20), nullable=False, default="draft")

    customer_id = db.Column(db.String(36), db.ForeignKey("customers.id"), index=True)
    customer_reference = db.Column(db.String(120))

    # goods
    cargo_description = db.Column(db.Text)
    container_type = db.Column(db.String(40))
    container_quantity = db.Column(db.Integer)
    weight_kg = db.Column(db.Numeric(14, 2))
    volume_cbm = db.Column(db.Numeric(14, 2))

    # route
    loading_port_id = db.Column(db.String(36), db.ForeignKey("ports.id"))
    discharge_port_id = db.Column(db.String(36), db.ForeignKey("ports.id"))
    loading_terminal = db.Column(db.String(120))
    discharge_terminal = db.Column(db.String(120))
    vessel_name = db.Column(db.String(120))
    carrier = db.Column(db.String(120))
    voyage_number = db.Column(db.String(60))

    # fechas (todas opcionales)
    pickup_date = db.Column(db.Date)
    delivery_date = db.Column(db.Date)
    standard_closing = db.Column(db.Date)
    vwm_closing = db.Column(db.Date)
    cy_closing = db.Column(db.Date)
    dock_closing_carrier = db.Column(db.Date)
    dock_closing_customer = db.Column(db.Date)
    validity_from = db.Column(db.Date)
    validity_to = db.Column(db.Date)

    incoterms = db.Column(db.String(3))
    payment_terms = db.Column(db.String(120))
    notes = db.Column(db.Text)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    customer = db.relationship("Customer", foreign_keys=[customer_id])
    loading_port = db.relationship("Port", foreign_keys=[loading_port_id])
    discharge_port = db.relationship("Port", foreign_keys=[discharge_port_id])

    @validates("status")
    def _validate_status(self, key, value):
        if value not in STATUS_OPTIONS:
            raise ValueError(f"Invalid status: {value!r}")
        return value

    @validates("case_type")
    def _validate_case_type(self, key, value):
        if value not in CASE_TYPES:
            raise ValueError(f"Invalid case type: {value!r}")
        return value
