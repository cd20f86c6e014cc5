# casedesk/models/case_status_history.py

from datetime import datetime
from casedesk.extensions import db
from casedesk.models.base import RecordMixin, new_id


class CaseStatusHistory(RecordMixin, db.Model):
    __tablename__ = "case_status_history"

    # append-only
    UPDATABLE = False
    DELETABLE = False

    id = db.Column(db.String(36), primary_key=True, default=new_id)

    case_id = db.Column(
        db.String(36),
        db.ForeignKey("cases.id"),
        nullable=False,
        index=True,
    )

    old_status = db.Column(db.String(20))
    new_status = db.Column(db.String(20), nullable=False)
    changed_by = db.Column(db.String(120))
    change_reason = db.Column(db.Text)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
