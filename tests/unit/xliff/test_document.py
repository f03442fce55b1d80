"""Unit tests for XLIFF documents and snapshot reconciliation."""

import pytest
from lxml import etree

from xliffsync.core.adapters import TranslationUnit, MalformedSourceError
from xliffsync.core.xliff import (
    XlfDocument,
    merge_snapshot,
    get_translations,
    STATE_NEW,
    STATE_NEEDS_REVIEW,
    STATE_TRANSLATED,
    XLIFF_NAMESPACE,
)

NS = {'x': XLIFF_NAMESPACE}


def units(*pairs):
    return [TranslationUnit(unit_id=unit_id, source=source) for unit_id, source in pairs]


def translate(path, unit_id, text, state=STATE_TRANSLATED):
    """Simulate a translator filling in one target."""
    document = XlfDocument.load(path)
    target = document.root.xpath(f"//x:trans-unit[@id='{unit_id}']/x:target", namespaces=NS)[0]
    target.text = text
    target.set('state', state)
    document.save()


@pytest.fixture
def xlf_path(tmp_path):
    return tmp_path / "xlf" / "Strings.de.xlf"


class TestCreate:
    """Test creating documents from a first snapshot."""

    def test_new_document_structure(self, xlf_path):
        result = merge_snapshot(xlf_path, "src/Strings.resx", "de", units(("A", "Apple"), ("B", "Banana")))

        assert result.created is True
        assert result.added == ["A", "B"]

        root = etree.parse(str(xlf_path)).getroot()
        file_node = root.find('x:file', NS)
        assert root.get('version') == '1.2'
        assert file_node.get('original') == "src/Strings.resx"
        assert file_node.get('source-language') == "en"
        assert file_node.get('target-language') == "de"
        assert root.find('x:file/x:body/x:group', NS).get('id') == "src/Strings.resx"

    def test_new_entries_have_empty_target(self, xlf_path):
        merge_snapshot(xlf_path, "src/Strings.resx", "de", units(("A", "Apple")))

        entry = XlfDocument.load(xlf_path).entries()[0]
        assert entry.source == "Apple"
        assert entry.target == ""
        assert entry.state == STATE_NEW

    def test_note_written(self, xlf_path):
        merge_snapshot(xlf_path, "s.resx", "de", [TranslationUnit("A", "Apple", note="Fruit")])
        assert XlfDocument.load(xlf_path).entries()[0].note == "Fruit"

    def test_xml_declaration(self, xlf_path):
        merge_snapshot(xlf_path, "s.resx", "de", units(("A", "Apple")))
        assert xlf_path.read_bytes().startswith(b'<?xml version="1.0" encoding="utf-8"?>')


class TestReconcile:
    """Test reconciling an existing document against a new snapshot."""

    def test_idempotent(self, xlf_path):
        snapshot = units(("A", "Apple"), ("B", "Banana"))
        merge_snapshot(xlf_path, "s.resx", "de", snapshot)
        first = xlf_path.read_bytes()

        result = merge_snapshot(xlf_path, "s.resx", "de", snapshot)

        assert result.changed is False
        assert result.unchanged == ["A", "B"]
        assert xlf_path.read_bytes() == first

    def test_translation_preserved_when_source_unchanged(self, xlf_path):
        merge_snapshot(xlf_path, "s.resx", "de", units(("A", "Apple")))
        translate(xlf_path, "A", "Apfel")

        merge_snapshot(xlf_path, "s.resx", "de", units(("A", "Apple"), ("B", "Banana")))

        entries = {entry.unit_id: entry for entry in XlfDocument.load(xlf_path).entries()}
        assert entries["A"].target == "Apfel"
        assert entries["A"].state == STATE_TRANSLATED
        assert entries["B"].state == STATE_NEW

    def test_changed_source_needs_review(self, xlf_path):
        merge_snapshot(xlf_path, "s.resx", "de", units(("A", "Apple")))
        translate(xlf_path, "A", "Apfel")

        result = merge_snapshot(xlf_path, "s.resx", "de", units(("A", "Green apple")))

        assert result.updated == ["A"]
        entry = XlfDocument.load(xlf_path).entries()[0]
        assert entry.source == "Green apple"
        assert entry.target == "Apfel"
        assert entry.state == STATE_NEEDS_REVIEW

    def test_stale_entries_pruned(self, xlf_path):
        merge_snapshot(xlf_path, "s.resx", "de", units(("A", "Apple"), ("B", "Banana")))

        result = merge_snapshot(xlf_path, "s.resx", "de", units(("B", "Banana")))

        assert result.removed == ["A"]
        assert [entry.unit_id for entry in XlfDocument.load(xlf_path).entries()] == ["B"]

    def test_existing_order_kept_and_new_entries_appended(self, xlf_path):
        merge_snapshot(xlf_path, "s.resx", "de", units(("B", "Banana"), ("A", "Apple")))

        merge_snapshot(xlf_path, "s.resx", "de", units(("C", "Cherry"), ("A", "Apple"), ("B", "Banana")))

        assert [entry.unit_id for entry in XlfDocument.load(xlf_path).entries()] == ["B", "A", "C"]

    def test_note_change_does_not_flag_review(self, xlf_path):
        merge_snapshot(xlf_path, "s.resx", "de", [TranslationUnit("A", "Apple", note="Old")])
        translate(xlf_path, "A", "Apfel")

        merge_snapshot(xlf_path, "s.resx", "de", [TranslationUnit("A", "Apple", note="New")])

        entry = XlfDocument.load(xlf_path).entries()[0]
        assert entry.note == "New"
        assert entry.state == STATE_TRANSLATED

    def test_empty_snapshot_prunes_everything(self, xlf_path):
        merge_snapshot(xlf_path, "s.resx", "de", units(("A", "Apple")))
        merge_snapshot(xlf_path, "s.resx", "de", [])
        assert XlfDocument.load(xlf_path).entries() == []

    def test_duplicate_document_entries_removed(self, xlf_path):
        merge_snapshot(xlf_path, "s.resx", "de", units(("A", "Apple")))
        document = XlfDocument.load(xlf_path)
        group = document.root.find('x:file/x:body/x:group', NS)
        group.append(etree.fromstring(
            f'<trans-unit xmlns="{XLIFF_NAMESPACE}" id="A"><source>Apple</source></trans-unit>'
        ))
        document.save()

        result = merge_snapshot(xlf_path, "s.resx", "de", units(("A", "Apple")))

        assert result.removed == ["A"]
        assert len(XlfDocument.load(xlf_path).entries()) == 1


class TestFailures:
    """Test that bad input never leaves a damaged document behind."""

    def test_duplicate_snapshot_ids(self, xlf_path):
        with pytest.raises(MalformedSourceError, match="Duplicate"):
            merge_snapshot(xlf_path, "s.resx", "de", units(("A", "x"), ("A", "y")))
        assert not xlf_path.exists()

    def test_invalid_characters_leave_document_unchanged(self, xlf_path):
        merge_snapshot(xlf_path, "s.resx", "de", units(("A", "Apple")))
        before = xlf_path.read_bytes()

        with pytest.raises(MalformedSourceError, match="not allowed"):
            merge_snapshot(xlf_path, "s.resx", "de", units(("A", "Apple\x01")))

        assert xlf_path.read_bytes() == before

    def test_lone_surrogate_rejected(self, xlf_path):
        with pytest.raises(MalformedSourceError, match="not allowed"):
            merge_snapshot(xlf_path, "s.resx", "de", units(("A", "Hi \ud83d")))
        assert not xlf_path.exists()

    def test_unparseable_document(self, xlf_path):
        xlf_path.parent.mkdir(parents=True)
        xlf_path.write_text("<xliff><file>", encoding='utf-8')

        with pytest.raises(MalformedSourceError):
            merge_snapshot(xlf_path, "s.resx", "de", units(("A", "Apple")))
        assert xlf_path.read_text(encoding='utf-8') == "<xliff><file>"

    def test_not_an_xliff_document(self, tmp_path):
        path = tmp_path / "other.xlf"
        path.write_text("<root/>", encoding='utf-8')

        with pytest.raises(MalformedSourceError, match="not an XLIFF"):
            XlfDocument.load(path)

    def test_no_temporary_files_left(self, xlf_path):
        merge_snapshot(xlf_path, "s.resx", "de", units(("A", "Apple")))
        assert [p.name for p in xlf_path.parent.iterdir()] == ["Strings.de.xlf"]


class TestGetTranslations:
    """Test reading translations back out of a document."""

    def test_fallback_to_source(self, xlf_path):
        merge_snapshot(xlf_path, "s.resx", "de", units(("A", "Apple"), ("B", "Banana")))
        translate(xlf_path, "A", "Apfel")

        assert get_translations(xlf_path) == {"A": "Apfel", "B": "Banana"}

    def test_without_fallback(self, xlf_path):
        merge_snapshot(xlf_path, "s.resx", "de", units(("A", "Apple"), ("B", "Banana")))
        translate(xlf_path, "A", "Apfel")

        assert get_translations(xlf_path, fallback_to_source=False) == {"A": "Apfel"}
