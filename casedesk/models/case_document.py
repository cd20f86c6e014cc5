# casedesk/models/case_document.py

from datetime import datetime
from casedesk.extensions import db
from casedesk.models.base import RecordMixin, new_id


class CaseDocument(RecordMixin, db.Model):
    __tablename__ = "case_documents"

    # contenido ya renderizado; solo se crea o se borra
    UPDATABLE = False

    id = db.Column(db.String(36), primary_key=True, default=new_id)

    case_id = db.Column(
        db.String(36),
        db.ForeignKey("cases.id"),
        nullable=False,
        index=True,
    )

    document_name = db.Column(db.String(255), nullable=False)
    document_type = db.Column(db.String(60), nullable=False)  # transport_order / booking_confirmation / ...
    file_path = db.Column(db.String(500))
    html_content = db.Column(db.Text)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
