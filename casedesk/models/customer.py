# casedesk/models/customer.py

from datetime import datetime
from casedesk.extensions import db
from casedesk.models.base import RecordMixin, new_id


class Customer(RecordMixin, db.Model):
    __tablename__ = "customers"

    # customer_code se deriva una sola vez al crear
    IMMUTABLE_FIELDS = RecordMixin.IMMUTABLE_FIELDS | {"customer_code"}

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    customer_code = db.Column(db.String(10), nullable=False, index=True)
    company_name = db.Column(db.String(255), nullable=False)

    address_line1 = db.Column(db.String(255))
    address_line2 = db.Column(db.String(255))
    city = db.Column(db.String(120))
    postal_code = db.Column(db.String(30))
    country = db.Column(db.String(120))

    primary_contact_name = db.Column(db.String(255))
    primary_contact_email = db.Column(db.String(255))
    primary_contact_phone = db.Column(db.String(60))
    secondary_contact_name = db.Column(db.String(255))
    secondary_contact_email = db.Column(db.String(255))
    secondary_contact_phone = db.Column(db.String(60))

    website = db.Column(db.String(255))
    opening_hours = db.Column(db.String(120))
    internal_notes = db.Column(db.Text)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
