# casedesk/services/gateway.py

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, List, Optional

import sqlalchemy as sa
from sqlalchemy.exc import SQLAlchemyError

from casedesk.extensions import db
from casedesk.models import (
    Case, Customer, Port, Supplier, Service,
    CaseFinance, CaseDocument, CaseStatusHistory, DocumentTemplate,
)
from casedesk.utils.dates import parse_date
from casedesk.utils.money import parse_money
from casedesk.utils.logging import get_logger

logger = get_logger("gateway")


TABLES = {
    "cases": Case,
    "customers": Customer,
    "ports": Port,
    "suppliers": Supplier,
    "services": Service,
    "case_finance": CaseFinance,
    "case_documents": CaseDocument,
    "case_status_history": CaseStatusHistory,
    "document_templates": DocumentTemplate,
}


class GatewayError(Exception):
    """
    Único tipo de fallo del sistema: la llamada al store falló
    (red, validación, registro inexistente, operación no permitida).
    """

    def __init__(self, message: str, table: Optional[str] = None, action: Optional[str] = None):
        super().__init__(message)
        self.table = table
        self.action = action

    @property
    def user_message(self) -> str:
        return f"Error {self.action or 'saving changes'}. Please try again."


@dataclass
class GatewayResult:
    data: Any = None
    error: Optional[GatewayError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self, action: Optional[str] = None):
        """
        Devuelve data o lanza el error. `action` nombra la acción fallida
        para el mensaje al usuario ("saving customer", "updating status").
        """
        if self.error is not None:
            if action:
                self.error.action = action
            logger.error(f"Gateway call failed action={action} table={self.error.table}: {self.error}")
            raise self.error
        return self.data


class DataGateway:
    """
    Contrato request/response sobre el store:
      select / get / insert / update / delete
    Cada llamada devuelve GatewayResult(data=...) o GatewayResult(error=...),
    nunca lanza. Las escrituras hacen commit propio.
    """

    def __init__(self, session=None):
        self.session = session if session is not None else db.session

    # ----------------------------
    # lectura
    # ----------------------------
    def select(
        self,
        table: str,
        filters: Optional[Dict[str, Any]] = None,
        expand: Iterable[str] = (),
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> GatewayResult:
        try:
            model = self._model(table)
            stmt = sa.select(model)
            for field, value in (filters or {}).items():
                stmt = stmt.where(self._column(model, field) == value)
            if order_by:
                col = self._column(model, order_by)
                stmt = stmt.order_by(col.desc() if descending else col.asc())
            rows = self.session.execute(stmt).scalars().all()
            return GatewayResult(data=[r.to_dict(expand=tuple(expand)) for r in rows])
        except (SQLAlchemyError, ValueError) as e:
            return self._fail(table, "select", e)

    def get(self, table: str, record_id: str, expand: Iterable[str] = ()) -> GatewayResult:
        try:
            model = self._model(table)
            record = self._load(model, table, record_id)
            return GatewayResult(data=record.to_dict(expand=tuple(expand)))
        except (SQLAlchemyError, ValueError) as e:
            return self._fail(table, "get", e)

    # ----------------------------
    # escritura
    # ----------------------------
    def insert(self, table: str, values: Dict[str, Any], expand: Iterable[str] = ()) -> GatewayResult:
        try:
            model = self._model(table)
            if not model.INSERTABLE:
                raise ValueError(f"{table} is read-only")
            record = model(**self._coerce(model, values))
            self.session.add(record)
            self.session.commit()
            logger.info(f"Inserted {table} id={record.id}")
            return GatewayResult(data=record.to_dict(expand=tuple(expand)))
        except (SQLAlchemyError, ValueError, TypeError) as e:
            return self._fail(table, "insert", e)

    def update(self, table: str, record_id: str, values: Dict[str, Any], expand: Iterable[str] = ()) -> GatewayResult:
        try:
            model = self._model(table)
            if not model.UPDATABLE:
                raise ValueError(f"{table} does not allow updates")
            blocked = set(values) & set(model.IMMUTABLE_FIELDS)
            if blocked:
                raise ValueError(f"{table}: immutable field(s) {sorted(blocked)}")

            record = self._load(model, table, record_id)
            for field, value in self._coerce(model, values).items():
                setattr(record, field, value)
            self.session.commit()
            logger.info(f"Updated {table} id={record_id} fields={sorted(values)}")
            return GatewayResult(data=record.to_dict(expand=tuple(expand)))
        except (SQLAlchemyError, ValueError) as e:
            return self._fail(table, "update", e)

    def delete(self, table: str, record_id: str) -> GatewayResult:
        try:
            model = self._model(table)
            if not model.DELETABLE:
                raise ValueError(f"{table} does not allow deletes")
            record = self._load(model, table, record_id)
            self.session.delete(record)
            self.session.commit()
            logger.info(f"Deleted {table} id={record_id}")
            return GatewayResult(data={"id": record_id})
        except (SQLAlchemyError, ValueError) as e:
            return self._fail(table, "delete", e)

    # ----------------------------
    # helpers
    # ----------------------------
    def _fail(self, table: str, op: str, e: Exception) -> GatewayResult:
        self.session.rollback()
        logger.warning(f"{op} {table} failed: {type(e).__name__}: {e}")
        return GatewayResult(error=GatewayError(str(e), table=table))

    @staticmethod
    def _model(table: str):
        model = TABLES.get(table)
        if model is None:
            raise ValueError(f"Unknown table: {table}")
        return model

    def _load(self, model, table: str, record_id: str):
        record = self.session.get(model, record_id)
        if record is None:
            raise ValueError(f"{table}: record not found id={record_id}")
        return record

    @staticmethod
    def _column(model, field: str):
        col = model.__table__.columns.get(field)
        if col is None:
            raise ValueError(f"{model.__tablename__}: unknown field {field!r}")
        return col

    def _coerce(self, model, values: Dict[str, Any]) -> Dict[str, Any]:
        """
        Castea los valores que llegan de formularios al tipo de la columna,
        como haría el store: '' en FKs/fechas/números -> NULL.
        """
        out: Dict[str, Any] = {}
        for field, value in values.items():
            col = self._column(model, field)
            out[field] = _coerce_value(col, value)
        return out


def _coerce_value(col, value):
    is_blank = value is None or (isinstance(value, str) and value.strip() == "")

    if col.foreign_keys:
        return None if is_blank else str(value)

    if isinstance(col.type, sa.Date) and not isinstance(col.type, sa.DateTime):
        return parse_date(value)

    if isinstance(col.type, sa.Integer):
        if is_blank:
            return None if col.nullable else 0
        try:
            return int(Decimal(str(value).strip()))
        except (InvalidOperation, ValueError):
            raise ValueError(f"{col.name}: not an integer: {value!r}")

    if isinstance(col.type, sa.Numeric):
        if is_blank:
            return None if col.nullable else Decimal("0")
        return parse_money(value)

    return value
