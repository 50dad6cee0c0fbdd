"""Certificate template editor state.

Headless model of the drag-and-drop template designer: the element list
(last element drawn on top), the current selection, zoom, and a bounded
undo/redo history over elements and background.

Elements are never mutated in place; every change swaps in new
``CertificateElement`` instances, so history entries can share them.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Any

from culturaviva.contracts.certificate import (
    CertificateElement,
    CertificateTemplate,
    TemplateDimensions,
)
from culturaviva.contracts.enums import ElementType, TextAlign

logger = logging.getLogger(__name__)

HISTORY_LIMIT = 20
MIN_ZOOM = 0.2
MAX_ZOOM = 3.0
DEFAULT_ZOOM = 0.8
DEFAULT_NAME = "Novo Modelo"
DUPLICATE_OFFSET = 20

_DEFAULT_TEXT = {
    ElementType.TEXT: "Novo Texto",
    ElementType.QRCODE: "QR Code",
    ElementType.VARIABLE: "{{variavel}}",
}


@dataclass(frozen=True)
class _HistoryEntry:
    elements: tuple[CertificateElement, ...]
    background_url: str


def _new_id() -> str:
    return uuid.uuid4().hex[:12]


class TemplateEditor:
    """Editing session for one certificate template."""

    def __init__(self, template: CertificateTemplate | None = None) -> None:
        self.name = DEFAULT_NAME
        self.background_url = ""
        self.dimensions = TemplateDimensions()
        self.template_id: str | None = None
        self._elements: list[CertificateElement] = []
        self._selected: list[str] = []
        self._zoom = DEFAULT_ZOOM
        self._past: list[_HistoryEntry] = []
        self._future: list[_HistoryEntry] = []
        if template is not None:
            self.load_template(template)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def elements(self) -> list[CertificateElement]:
        return list(self._elements)

    @property
    def selected_ids(self) -> list[str]:
        return list(self._selected)

    @property
    def zoom(self) -> float:
        return self._zoom

    @property
    def can_undo(self) -> bool:
        return bool(self._past)

    @property
    def can_redo(self) -> bool:
        return bool(self._future)

    def get_element(self, element_id: str) -> CertificateElement | None:
        return next((el for el in self._elements if el.id == element_id), None)

    # ------------------------------------------------------------------
    # Document settings
    # ------------------------------------------------------------------

    def set_zoom(self, zoom: float) -> float:
        self._zoom = min(MAX_ZOOM, max(MIN_ZOOM, zoom))
        return self._zoom

    def set_background_url(self, url: str) -> None:
        self.save_snapshot()
        self.background_url = url

    # ------------------------------------------------------------------
    # Elements
    # ------------------------------------------------------------------

    def add_element(self, type: ElementType, text: str | None = None) -> CertificateElement:
        """Append a new element with editor defaults and select it."""
        type = ElementType(type)
        self.save_snapshot()
        is_qr = type == ElementType.QRCODE
        element = CertificateElement(
            id=_new_id(),
            type=type,
            x=50,
            y=50,
            width=100 if is_qr else None,
            height=100 if is_qr else None,
            text=text or _DEFAULT_TEXT.get(type),
            font_size=24 if type == ElementType.TEXT else 14,
            font_family="Helvetica",
            color="#000000",
            align=TextAlign.LEFT,
            rotate=0,
            opacity=1,
        )
        self._elements.append(element)
        self._selected = [element.id]
        return element

    def update_element(
        self, element_id: str, updates: dict[str, Any], *, record: bool = True
    ) -> CertificateElement | None:
        """Apply *updates* (field names) to one element.

        Locked elements keep their position unless the same update unlocks
        them. Pass ``record=False`` for intermediate drag steps after an
        explicit ``save_snapshot()``.
        """
        current = self.get_element(element_id)
        if current is None:
            return None
        updates = {k: v for k, v in updates.items() if k != "id"}
        if current.is_locked and updates.get("is_locked", True):
            updates.pop("x", None)
            updates.pop("y", None)
        if not updates:
            return current

        if record:
            self.save_snapshot()
        updated = CertificateElement.model_validate({**current.model_dump(), **updates})
        self._elements = [updated if el.id == element_id else el for el in self._elements]
        return updated

    def delete_selected(self) -> None:
        if not self._selected:
            return
        self.save_snapshot()
        selected = set(self._selected)
        self._elements = [el for el in self._elements if el.id not in selected]
        self._selected = []

    def duplicate_selected(self) -> list[CertificateElement]:
        """Copy every selected element, offset by 20/20; the copies become the selection."""
        originals = [el for el in self._elements if el.id in self._selected]
        if not originals:
            return []
        self.save_snapshot()
        copies = [
            el.model_copy(
                update={
                    "id": _new_id(),
                    "x": el.x + DUPLICATE_OFFSET,
                    "y": el.y + DUPLICATE_OFFSET,
                }
            )
            for el in originals
        ]
        self._elements.extend(copies)
        self._selected = [el.id for el in copies]
        return copies

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def set_selection(self, ids: list[str]) -> None:
        known = {el.id for el in self._elements}
        self._selected = [i for i in dict.fromkeys(ids) if i in known]

    def toggle_selection(self, element_id: str) -> None:
        if element_id in self._selected:
            self._selected.remove(element_id)
        elif self.get_element(element_id) is not None:
            self._selected.append(element_id)

    # ------------------------------------------------------------------
    # Layering
    # ------------------------------------------------------------------

    def bring_to_front(self) -> None:
        self._reorder(front=True)

    def send_to_back(self) -> None:
        self._reorder(front=False)

    def _reorder(self, front: bool) -> None:
        if not self._selected:
            return
        self.save_snapshot()
        selected = set(self._selected)
        moving = [el for el in self._elements if el.id in selected]
        others = [el for el in self._elements if el.id not in selected]
        self._elements = others + moving if front else moving + others

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def save_snapshot(self) -> None:
        """Record the current state; clears the redo stack."""
        self._past.append(self._entry())
        del self._past[:-HISTORY_LIMIT]
        self._future.clear()

    def undo(self) -> bool:
        if not self._past:
            return False
        self._future.insert(0, self._entry())
        self._restore(self._past.pop())
        return True

    def redo(self) -> bool:
        if not self._future:
            return False
        self._past.append(self._entry())
        self._restore(self._future.pop(0))
        return True

    def _entry(self) -> _HistoryEntry:
        return _HistoryEntry(tuple(self._elements), self.background_url)

    def _restore(self, entry: _HistoryEntry) -> None:
        self._elements = list(entry.elements)
        self.background_url = entry.background_url
        known = {el.id for el in self._elements}
        self._selected = [i for i in self._selected if i in known]

    # ------------------------------------------------------------------
    # Load / export
    # ------------------------------------------------------------------

    def load_template(self, template: CertificateTemplate) -> None:
        """Replace the editor content with *template*; history is reset."""
        self.template_id = template.id
        self.name = template.name
        self.background_url = template.background_url
        self.dimensions = template.dimensions
        self._elements = list(template.elements)
        self._selected = []
        self._past.clear()
        self._future.clear()
        logger.debug("Loaded template %r (%d elements)", template.name, len(template.elements))

    def to_template(self) -> CertificateTemplate:
        return CertificateTemplate(
            id=self.template_id,
            name=self.name,
            background_url=self.background_url,
            elements=list(self._elements),
            dimensions=self.dimensions,
        )
