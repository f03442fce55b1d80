"""
XLIFF 1.2 translation-memory documents and the reconciliation that keeps
them in step with a snapshot.

One document exists per (artifact, target language):

    <xliff xmlns="urn:oasis:names:tc:xliff:document:1.2" version="1.2" ...>
      <file datatype="xml" source-language="en" target-language="de" original="src/Strings.resx">
        <body>
          <group id="src/Strings.resx">
            <trans-unit id="Greeting">
              <source>Hello</source>
              <target state="translated">Hallo</target>
              <note>Shown on start</note>
            </trans-unit>
          </group>
        </body>
      </file>
    </xliff>

Reconciling against a snapshot, by id:
- only in the snapshot   -> appended, empty target, state "new"
- same source text       -> untouched
- source text changed    -> source replaced, previous target kept, state "needs-review-translation"
- only in the document   -> removed
"""

import logging
import re
from collections import OrderedDict
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from lxml import etree

from xliffsync.core.adapters.exceptions import MalformedSourceError
from xliffsync.core.adapters.translation_unit import TranslationUnit
from xliffsync.core.adapters.xml_helpers import local_name, element_text, replace_element_text
from xliffsync.utils.file_utils import atomic_write_bytes

logger = logging.getLogger(__name__)

XLIFF_NAMESPACE = "urn:oasis:names:tc:xliff:document:1.2"
XSI_NAMESPACE = "http://www.w3.org/2001/XMLSchema-instance"
XLIFF_SCHEMA_LOCATION = f"{XLIFF_NAMESPACE} xliff-core-1.2-transitional.xsd"

STATE_NEW = "new"
STATE_NEEDS_REVIEW = "needs-review-translation"
STATE_TRANSLATED = "translated"

XML_DECLARATION = b'<?xml version="1.0" encoding="utf-8"?>\n'

# Characters lxml refuses in text and attribute values
_INVALID_XML_CHARS = re.compile(r'[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]')


@dataclass
class XlfEntry:
    """A trans-unit as read from a document."""
    unit_id: str
    source: str
    target: Optional[str] = None
    state: Optional[str] = None
    note: str = ""


@dataclass
class MergeResult:
    """
    What a reconciliation changed.

    Attributes:
        added: Ids appended with state "new"
        updated: Ids whose source changed (now "needs-review-translation")
        removed: Ids pruned from the document
        unchanged: Ids left as they were
        created: Whether the document was created by this merge
    """
    added: List[str] = field(default_factory=list)
    updated: List[str] = field(default_factory=list)
    removed: List[str] = field(default_factory=list)
    unchanged: List[str] = field(default_factory=list)
    created: bool = False

    @property
    def changed(self) -> bool:
        return bool(self.added or self.updated or self.removed)

    def __str__(self) -> str:
        return (
            f"{len(self.added)} added, {len(self.updated)} updated, "
            f"{len(self.removed)} removed, {len(self.unchanged)} unchanged"
        )


class XlfDocument:
    """An XLIFF document held in memory as an lxml tree."""

    def __init__(self, path: Union[str, Path], tree: etree._ElementTree):
        self.path = Path(path)
        self.tree = tree

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def create(
        cls,
        path: Union[str, Path],
        original_id: str,
        target_language: Optional[str],
        source_language: str = "en"
    ) -> 'XlfDocument':
        """
        Build an empty document for one artifact.

        Args:
            path: Where the document will be saved
            original_id: Repository-relative artifact path (file "original" and group id)
            target_language: Target language, or None for a neutral document
            source_language: Source language of the artifact

        Returns:
            New, unsaved document
        """
        root = etree.Element(
            f"{{{XLIFF_NAMESPACE}}}xliff",
            nsmap={None: XLIFF_NAMESPACE, 'xsi': XSI_NAMESPACE}
        )
        root.set('version', '1.2')
        root.set(f"{{{XSI_NAMESPACE}}}schemaLocation", XLIFF_SCHEMA_LOCATION)

        file_node = etree.SubElement(root, f"{{{XLIFF_NAMESPACE}}}file")
        file_node.set('datatype', 'xml')
        file_node.set('source-language', source_language)
        if target_language is not None:
            file_node.set('target-language', target_language)
        file_node.set('original', original_id)

        body = etree.SubElement(file_node, f"{{{XLIFF_NAMESPACE}}}body")
        group = etree.SubElement(body, f"{{{XLIFF_NAMESPACE}}}group")
        group.set('id', original_id)

        return cls(path, root.getroottree())

    @classmethod
    def load(cls, path: Union[str, Path]) -> 'XlfDocument':
        """
        Load a document from disk.

        Raises:
            MalformedSourceError: If the file is not a well-formed XLIFF document
        """
        parser = etree.XMLParser(remove_blank_text=True, resolve_entities=False)
        try:
            tree = etree.parse(str(path), parser)
        except etree.XMLSyntaxError as e:
            raise MalformedSourceError(
                f"Cannot parse {Path(path).name}",
                path=str(path),
                original_error=e
            ) from e

        if local_name(tree.getroot()) != 'xliff':
            raise MalformedSourceError(
                f"{Path(path).name} is not an XLIFF document",
                path=str(path),
                context={'root': local_name(tree.getroot())}
            )
        return cls(path, tree)

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    @property
    def root(self) -> etree._Element:
        return self.tree.getroot()

    @property
    def namespace(self) -> Optional[str]:
        return etree.QName(self.root).namespace

    def _tag(self, name: str) -> str:
        return f"{{{self.namespace}}}{name}" if self.namespace else name

    def file_nodes(self) -> List[etree._Element]:
        return list(self.root.iter(self._tag('file')))

    @property
    def original_id(self) -> Optional[str]:
        files = self.file_nodes()
        return files[0].get('original') if files else None

    @property
    def target_language(self) -> Optional[str]:
        files = self.file_nodes()
        return files[0].get('target-language') if files else None

    def _container(self) -> etree._Element:
        """The element new trans-units are appended to."""
        groups = list(self.root.iter(self._tag('group')))
        original_id = self.original_id
        for group in groups:
            if group.get('id') == original_id:
                return group
        if groups:
            return groups[0]

        bodies = list(self.root.iter(self._tag('body')))
        if bodies:
            return bodies[0]

        files = self.file_nodes()
        if not files:
            raise MalformedSourceError(
                f"{self.path.name} has no <file> element",
                path=str(self.path)
            )
        return etree.SubElement(files[0], self._tag('body'))

    def _trans_units(self) -> List[etree._Element]:
        return list(self.root.iter(self._tag('trans-unit')))

    def entries(self) -> List[XlfEntry]:
        """All trans-units in document order."""
        result = []
        for trans_unit in self._trans_units():
            source = trans_unit.find(self._tag('source'))
            target = trans_unit.find(self._tag('target'))
            note = trans_unit.find(self._tag('note'))
            result.append(XlfEntry(
                unit_id=trans_unit.get('id'),
                source=element_text(source) if source is not None else "",
                target=element_text(target) if target is not None else None,
                state=target.get('state') if target is not None else None,
                note=element_text(note) if note is not None else ""
            ))
        return result

    def get_translations(self, fallback_to_source: bool = True) -> Dict[str, str]:
        """
        Map each id to its target text.

        Args:
            fallback_to_source: Use the source text where the target is
                missing or empty; otherwise such ids are left out

        Returns:
            id -> text mapping
        """
        translations = {}
        for entry in self.entries():
            if entry.target:
                translations[entry.unit_id] = entry.target
            elif fallback_to_source:
                translations[entry.unit_id] = entry.source
        return translations

    # ------------------------------------------------------------------
    # Reconciliation
    # ------------------------------------------------------------------

    def _validate_units(self, units: Iterable[TranslationUnit]) -> 'OrderedDict[str, TranslationUnit]':
        incoming = OrderedDict()
        for unit in units:
            if not isinstance(unit.unit_id, str) or not unit.unit_id:
                raise MalformedSourceError(
                    "Translation unit has an empty id",
                    path=str(self.path),
                    context={'source': repr(unit.source)[:80]}
                )
            if unit.unit_id in incoming:
                raise MalformedSourceError(
                    f"Duplicate translation unit id '{unit.unit_id}'",
                    path=str(self.path),
                    context={'unit_id': unit.unit_id}
                )
            for label, value in (('id', unit.unit_id), ('source', unit.source), ('note', unit.note)):
                if not isinstance(value, str):
                    raise MalformedSourceError(
                        f"Translation unit {label} is not text",
                        path=str(self.path),
                        context={'unit_id': unit.unit_id}
                    )
                if _INVALID_XML_CHARS.search(value):
                    raise MalformedSourceError(
                        f"Translation unit {label} contains characters not allowed in XML",
                        path=str(self.path),
                        context={'unit_id': unit.unit_id}
                    )
            incoming[unit.unit_id] = unit
        return incoming

    def _new_trans_unit(self, unit: TranslationUnit, state: str) -> etree._Element:
        trans_unit = etree.Element(self._tag('trans-unit'))
        trans_unit.set('id', unit.unit_id)
        etree.SubElement(trans_unit, self._tag('source')).text = unit.source
        etree.SubElement(trans_unit, self._tag('target')).set('state', state)
        if unit.note:
            etree.SubElement(trans_unit, self._tag('note')).text = unit.note
        return trans_unit

    def _sync_note(self, trans_unit: etree._Element, note_text: str):
        note = trans_unit.find(self._tag('note'))
        if note_text:
            if note is None:
                note = etree.SubElement(trans_unit, self._tag('note'))
            if element_text(note) != note_text:
                replace_element_text(note, note_text)
        elif note is not None:
            trans_unit.remove(note)

    def update(
        self,
        units: Iterable[TranslationUnit],
        updated_state: str = STATE_NEEDS_REVIEW,
        added_state: str = STATE_NEW
    ) -> MergeResult:
        """
        Reconcile the document against a snapshot.

        Pre-existing entries keep their position; new entries are appended
        in snapshot order. The whole snapshot is validated before the tree
        is touched.

        Args:
            units: The snapshot's units
            updated_state: State for entries whose source changed
            added_state: State for new entries

        Returns:
            MergeResult describing the changes

        Raises:
            MalformedSourceError: If a unit cannot be stored in the document
        """
        incoming = self._validate_units(units)
        result = MergeResult()

        existing = OrderedDict()
        for trans_unit in self._trans_units():
            unit_id = trans_unit.get('id')
            if unit_id is None:
                raise MalformedSourceError(
                    f"{self.path.name} contains a trans-unit without an id",
                    path=str(self.path),
                    context={'line': trans_unit.sourceline}
                )
            # Later duplicates of an id are stale as well
            if unit_id not in incoming or unit_id in existing:
                trans_unit.getparent().remove(trans_unit)
                result.removed.append(unit_id)
                continue
            existing[unit_id] = trans_unit

        container = self._container()

        for unit_id, unit in incoming.items():
            trans_unit = existing.get(unit_id)

            if trans_unit is None:
                container.append(self._new_trans_unit(unit, added_state))
                result.added.append(unit_id)
                continue

            source = trans_unit.find(self._tag('source'))
            stored_source = element_text(source) if source is not None else None

            if stored_source != unit.source:
                if source is None:
                    source = etree.Element(self._tag('source'))
                    trans_unit.insert(0, source)
                replace_element_text(source, unit.source)

                target = trans_unit.find(self._tag('target'))
                if target is None:
                    target = etree.Element(self._tag('target'))
                    source.addnext(target)
                target.set('state', updated_state)
                result.updated.append(unit_id)
            else:
                result.unchanged.append(unit_id)

            self._sync_note(trans_unit, unit.note)

        logger.debug(f"Merged into {self.path.name}: {result}")
        return result

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def to_bytes(self) -> bytes:
        return XML_DECLARATION + etree.tostring(self.root, encoding='utf-8', pretty_print=True)

    def save(self, path: Optional[Union[str, Path]] = None) -> Path:
        """Write the document atomically (to ``path`` or where it was loaded from)."""
        return atomic_write_bytes(path or self.path, self.to_bytes())

    def __repr__(self) -> str:
        return f"XlfDocument(path={self.path.name}, target={self.target_language})"


def merge_snapshot(
    xlf_path: Union[str, Path],
    original_id: str,
    target_language: str,
    units: Iterable[TranslationUnit],
    source_language: str = "en",
    updated_state: str = STATE_NEEDS_REVIEW,
    added_state: str = STATE_NEW
) -> MergeResult:
    """
    Create or load the document for one artifact/language, reconcile it and save it.

    If reconciliation fails, a document created by this call is removed
    again; a pre-existing document is left exactly as it was.

    Args:
        xlf_path: Document path
        original_id: Repository-relative artifact path
        target_language: Target language of the document
        units: Snapshot units
        source_language: Source language of the artifact
        updated_state: State for entries whose source changed
        added_state: State for new entries

    Returns:
        MergeResult of the reconciliation

    Raises:
        MalformedSourceError: If the document or the snapshot is malformed
    """
    xlf_path = Path(xlf_path)
    created = not xlf_path.exists()

    try:
        if created:
            document = XlfDocument.create(xlf_path, original_id, target_language, source_language)
        else:
            document = XlfDocument.load(xlf_path)
        result = document.update(units, updated_state=updated_state, added_state=added_state)
        document.save()
    except MalformedSourceError:
        if created and xlf_path.exists():
            xlf_path.unlink()
        raise

    result.created = created
    return result


def get_translations(xlf_path: Union[str, Path], fallback_to_source: bool = True) -> Dict[str, str]:
    """Read the id -> target text mapping of a document on disk."""
    return XlfDocument.load(xlf_path).get_translations(fallback_to_source=fallback_to_source)
