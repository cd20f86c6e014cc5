# casedesk/models/supplier.py

from datetime import datetime
from casedesk.extensions import db
from casedesk.models.base import RecordMixin, new_id


class Supplier(RecordMixin, db.Model):
    __tablename__ = "suppliers"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    supplier_code = db.Column(db.String(30), nullable=False, index=True)
    company_name = db.Column(db.String(255), nullable=False)
    category = db.Column(db.String(60), nullable=False)  # carrier / trucking / customs / ...

    address = db.Column(db.String(255))
    contact_person = db.Column(db.String(255))
    email = db.Column(db.String(255))
    phone = db.Column(db.String(60))
    website = db.Column(db.String(255))
    payment_terms = db.Column(db.String(120))
    notes = db.Column(db.Text)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
