"""Tests for the certificate template editor state."""

from __future__ import annotations

from culturaviva.contracts.certificate import CertificateElement, CertificateTemplate
from culturaviva.contracts.enums import ElementType
from culturaviva.services.certificates.template_editor import HISTORY_LIMIT, TemplateEditor


class TestDefaults:
    def test_new_editor(self):
        editor = TemplateEditor()
        assert editor.name == "Novo Modelo"
        assert editor.zoom == 0.8
        assert editor.elements == []
        assert not editor.can_undo
        assert not editor.can_redo

    def test_zoom_clamped(self):
        editor = TemplateEditor()
        assert editor.set_zoom(10) == 3.0
        assert editor.set_zoom(0.01) == 0.2
        assert editor.set_zoom(1.5) == 1.5


class TestAddElement:
    def test_text_defaults(self):
        editor = TemplateEditor()
        el = editor.add_element(ElementType.TEXT)
        assert el.text == "Novo Texto"
        assert el.font_size == 24
        assert (el.x, el.y) == (50, 50)
        assert el.width is None
        assert editor.selected_ids == [el.id]

    def test_qrcode_defaults(self):
        el = TemplateEditor().add_element(ElementType.QRCODE)
        assert el.text == "QR Code"
        assert (el.width, el.height) == (100, 100)
        assert el.font_size == 14

    def test_variable_defaults(self):
        el = TemplateEditor().add_element("variable")
        assert el.text == "{{variavel}}"

    def test_explicit_text(self):
        el = TemplateEditor().add_element(ElementType.VARIABLE, "{{nome_visitante}}")
        assert el.text == "{{nome_visitante}}"

    def test_ids_unique(self):
        editor = TemplateEditor()
        ids = {editor.add_element(ElementType.TEXT).id for _ in range(10)}
        assert len(ids) == 10


class TestEditing:
    def test_update_element(self):
        editor = TemplateEditor()
        el = editor.add_element(ElementType.TEXT)
        updated = editor.update_element(el.id, {"x": 120, "color": "#d4af37"})
        assert updated.x == 120
        assert updated.color == "#d4af37"
        assert editor.get_element(el.id).x == 120

    def test_locked_element_does_not_move(self):
        editor = TemplateEditor()
        el = editor.add_element(ElementType.TEXT)
        editor.update_element(el.id, {"is_locked": True})
        moved = editor.update_element(el.id, {"x": 300, "y": 300, "text": "Fixo"})
        assert (moved.x, moved.y) == (50, 50)
        assert moved.text == "Fixo"

    def test_unlock_and_move_together(self):
        editor = TemplateEditor()
        el = editor.add_element(ElementType.TEXT)
        editor.update_element(el.id, {"is_locked": True})
        moved = editor.update_element(el.id, {"is_locked": False, "x": 300})
        assert moved.x == 300

    def test_update_unknown(self):
        assert TemplateEditor().update_element("missing", {"x": 1}) is None

    def test_delete_selected(self):
        editor = TemplateEditor()
        a = editor.add_element(ElementType.TEXT)
        b = editor.add_element(ElementType.QRCODE)
        editor.set_selection([a.id])
        editor.delete_selected()
        assert [e.id for e in editor.elements] == [b.id]
        assert editor.selected_ids == []

    def test_duplicate_selected(self):
        editor = TemplateEditor()
        a = editor.add_element(ElementType.TEXT)
        b = editor.add_element(ElementType.QRCODE)
        editor.set_selection([a.id, b.id])
        copies = editor.duplicate_selected()

        assert len(editor.elements) == 4
        assert [(c.x, c.y) for c in copies] == [(70, 70), (70, 70)]
        assert {c.id for c in copies}.isdisjoint({a.id, b.id})
        assert editor.selected_ids == [c.id for c in copies]

    def test_toggle_selection(self):
        editor = TemplateEditor()
        a = editor.add_element(ElementType.TEXT)
        b = editor.add_element(ElementType.TEXT)
        editor.toggle_selection(a.id)
        assert editor.selected_ids == [b.id, a.id]
        editor.toggle_selection(b.id)
        assert editor.selected_ids == [a.id]
        editor.toggle_selection("ghost")
        assert editor.selected_ids == [a.id]


class TestLayering:
    def _three(self) -> tuple[TemplateEditor, list[str]]:
        editor = TemplateEditor()
        ids = [editor.add_element(ElementType.TEXT).id for _ in range(3)]
        return editor, ids

    def test_bring_to_front(self):
        editor, (a, b, c) = self._three()
        editor.set_selection([a])
        editor.bring_to_front()
        assert [e.id for e in editor.elements] == [b, c, a]

    def test_send_to_back(self):
        editor, (a, b, c) = self._three()
        editor.set_selection([c, b])
        editor.send_to_back()
        assert [e.id for e in editor.elements] == [b, c, a]

    def test_no_selection_is_noop(self):
        editor, ids = self._three()
        editor.set_selection([])
        history = editor.can_undo
        editor.bring_to_front()
        assert [e.id for e in editor.elements] == ids
        assert editor.can_undo == history


class TestHistory:
    def test_undo_redo(self):
        editor = TemplateEditor()
        a = editor.add_element(ElementType.TEXT)
        editor.update_element(a.id, {"x": 200})

        assert editor.undo()
        assert editor.get_element(a.id).x == 50
        assert editor.undo()
        assert editor.elements == []
        assert not editor.undo()

        assert editor.redo()
        assert editor.redo()
        assert editor.get_element(a.id).x == 200
        assert not editor.redo()

    def test_new_edit_clears_redo(self):
        editor = TemplateEditor()
        editor.add_element(ElementType.TEXT)
        editor.undo()
        assert editor.can_redo
        editor.add_element(ElementType.QRCODE)
        assert not editor.can_redo

    def test_background_is_undoable(self):
        editor = TemplateEditor()
        editor.set_background_url("https://cdn.test/bg.png")
        editor.undo()
        assert editor.background_url == ""

    def test_history_is_bounded(self):
        editor = TemplateEditor()
        for _ in range(HISTORY_LIMIT + 5):
            editor.add_element(ElementType.TEXT)
        undone = 0
        while editor.undo():
            undone += 1
        assert undone == HISTORY_LIMIT
        assert len(editor.elements) == 5


class TestLoadExport:
    def test_load_resets_history(self):
        editor = TemplateEditor()
        editor.add_element(ElementType.TEXT)
        template = CertificateTemplate(
            id="tpl-1",
            name="Oficina",
            background_url="https://cdn.test/bg.png",
            elements=[CertificateElement(id="e1", type=ElementType.TEXT, x=1, y=2, text="Oi")],
        )
        editor.load_template(template)
        assert editor.name == "Oficina"
        assert [e.id for e in editor.elements] == ["e1"]
        assert not editor.can_undo
        assert editor.selected_ids == []

    def test_to_template(self):
        editor = TemplateEditor()
        editor.name = "Roteiro"
        editor.add_element(ElementType.QRCODE)
        template = editor.to_template()
        assert template.name == "Roteiro"
        assert template.id is None
        assert len(template.elements) == 1
        assert template.dimensions.width == 842
