# casedesk/services/search_select.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional

from casedesk.utils.strings import contains_ci


@dataclass
class Option:
    id: str
    label: str
    subtitle: Optional[str] = None
    data: Any = None

    def to_dict(self) -> dict:
        return {"id": self.id, "label": self.label, "subtitle": self.subtitle}


ChangeHandler = Callable[[str, Optional[Option]], None]
CreateHandler = Callable[[str], None]


def filter_options(options: Iterable[Option], text: str) -> List[Option]:
    """Substring sin mayúsculas sobre label o subtitle (no fuzzy)."""
    return [
        o for o in options
        if contains_ci(o.label, text) or (o.subtitle and contains_ci(o.subtitle, text))
    ]


class SearchSelect:
    """
    Typeahead: elegir un candidato escribiendo, o crear uno nuevo
    cuando nada coincide. No hace I/O; los candidatos los da el caller.

    Estado: value, is_open, highlighted (-1 = ninguno), focused.
    on_change recibe (texto, opción) al elegir y (texto, None) al teclear.
    """

    def __init__(
        self,
        options: Iterable[Option] = (),
        value: str = "",
        on_change: Optional[ChangeHandler] = None,
        on_create: Optional[CreateHandler] = None,
    ):
        self.options: List[Option] = list(options)
        self.value = value or ""
        self.on_change = on_change
        self.on_create = on_create

        self.is_open = False
        self.focused = False
        self.highlighted = -1
        self.filtered: List[Option] = []
        self._refilter()

    def _refilter(self) -> None:
        self.filtered = filter_options(self.options, self.value)
        self.highlighted = -1

    def _emit(self, text: str, option: Optional[Option]) -> None:
        if self.on_change:
            self.on_change(text, option)

    # ----------------------------
    # entradas
    # ----------------------------
    def set_options(self, options: Iterable[Option]) -> None:
        self.options = list(options)
        self._refilter()

    def set_value(self, value: str) -> None:
        """Valor impuesto desde fuera (sin emitir cambio)."""
        self.value = value or ""
        self._refilter()

    def focus(self) -> None:
        self.focused = True
        self.is_open = True

    def type(self, text: str) -> None:
        self.value = text or ""
        self._refilter()
        self._emit(self.value, None)
        self.is_open = True

    def click_outside(self) -> None:
        self.is_open = False

    def click_option(self, option: Option) -> None:
        self.select(option)
        self.focused = True

    def select(self, option: Option) -> None:
        self.value = option.label
        self._refilter()
        self._emit(option.label, option)
        self.is_open = False

    def exact_match(self, text: str) -> Optional[Option]:
        """Único candidato cuyo label es el texto (sin mayúsculas ni espacios de borde)."""
        needle = (text or "").strip().lower()
        if not needle:
            return None
        matches = [o for o in self.options if o.label.strip().lower() == needle]
        return matches[0] if len(matches) == 1 else None

    def create_new(self) -> bool:
        if self.on_create and self.value:
            self.on_create(self.value)
            self.is_open = False
            return True
        return False

    def key(self, key: str) -> None:
        if not self.is_open:
            # cerrado: ArrowDown / Enter solo abren
            if key in ("ArrowDown", "Enter"):
                self.is_open = True
                return

        if key == "ArrowDown":
            if self.highlighted < len(self.filtered) - 1:
                self.highlighted += 1
        elif key == "ArrowUp":
            if self.highlighted > 0:
                self.highlighted -= 1
        elif key == "Enter":
            if 0 <= self.highlighted < len(self.filtered):
                self.select(self.filtered[self.highlighted])
            elif not self.filtered:
                self.create_new()
        elif key == "Escape":
            self.is_open = False
            self.focused = False

    @property
    def highlighted_option(self) -> Optional[Option]:
        if 0 <= self.highlighted < len(self.filtered):
            return self.filtered[self.highlighted]
        return None


# ----------------------------
# builders de candidatos
# ----------------------------
def customer_options(customers: Iterable[Dict[str, Any]]) -> List[Option]:
    return [
        Option(
            id=c["id"],
            label=c.get("company_name") or "",
            subtitle=f"{c.get('customer_code') or ''} • {c.get('city') or 'No city'}",
            data=c,
        )
        for c in customers
    ]


def port_options(ports: Iterable[Dict[str, Any]]) -> List[Option]:
    return [
        Option(
            id=p["id"],
            label=p.get("port_name") or "",
            subtitle=f"{p.get('port_code') or ''} • {p.get('country') or ''}",
            data=p,
        )
        for p in ports
    ]


def service_options(services: Iterable[Dict[str, Any]]) -> List[Option]:
    return [
        Option(
            id=s["id"],
            label=s.get("service_name") or "",
            subtitle=f"{s.get('category') or ''} • {s.get('unit') or ''}",
            data=s,
        )
        for s in services
    ]


def supplier_options(suppliers: Iterable[Dict[str, Any]]) -> List[Option]:
    return [
        Option(
            id=s["id"],
            label=s.get("company_name") or "",
            subtitle=f"{s.get('category') or ''} • {s.get('supplier_code') or ''}",
            data=s,
        )
        for s in suppliers
    ]
