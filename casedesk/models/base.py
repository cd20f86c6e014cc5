# casedesk/models/base.py

import uuid
from datetime import datetime, date


def new_id() -> str:
    return str(uuid.uuid4())


class RecordMixin:
    """
    Serialización a dict plano (lo que devuelve el gateway).
    Las relaciones solo se incluyen si se piden en `expand`.

    Flags que respeta el gateway:
      IMMUTABLE_FIELDS: columnas que nunca se actualizan
      UPDATABLE / DELETABLE / INSERTABLE: operaciones permitidas
    """

    IMMUTABLE_FIELDS = frozenset({"id", "created_at"})
    INSERTABLE = True
    UPDATABLE = True
    DELETABLE = True

    def to_dict(self, expand=()) -> dict:
        data = {}
        for col in self.__table__.columns:
            value = getattr(self, col.name)
            if isinstance(value, (datetime, date)):
                value = value.isoformat()
            data[col.name] = value

        for rel in expand:
            related = getattr(self, rel)
            data[rel] = related.to_dict() if related is not None else None

        return data
