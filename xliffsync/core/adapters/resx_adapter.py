"""
RESX format adapter.

.resx files are key/value resource tables:

    <data name="Greeting" xml:space="preserve">
      <value>Hello</value>
      <comment>Shown on start</comment>
    </data>

The resource key is the unit id. Entries that the translation memory cannot
represent (typed or binary payloads, designer metadata, empty values) are
never extracted.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Mapping, Optional, Union

from lxml import etree

from .exceptions import MalformedSourceError, MissingTranslationError
from .translation_unit import TranslationUnit
from .xml_helpers import XmlSource, load_xml, write_xml, element_text

logger = logging.getLogger(__name__)

DESIGNER_KEY_PREFIX = ">>"
DESIGNER_KEY_SUFFIXES = (".LayoutSettings",)

EXCLUDED_NON_STRING = "non-string"
EXCLUDED_DESIGNER = "designer"
EXCLUDED_EMPTY = "empty"


@dataclass
class ResourceEntry:
    """
    One <data> node of a resource file.

    Attributes:
        name: The resource key
        value: Text of the <value> child, None if absent
        comment: Text of the <comment> child
        type_name: The declared value type, if any
        mimetype: The declared serialization mimetype, if any
        element: The underlying <data> element
    """
    name: str
    value: Optional[str]
    comment: str
    type_name: Optional[str]
    mimetype: Optional[str]
    element: etree._Element

    def to_unit(self) -> TranslationUnit:
        return TranslationUnit(unit_id=self.name, source=self.value or "", note=self.comment)


def exclusion_reason(entry: ResourceEntry) -> Optional[str]:
    """
    Decide whether a resource entry stays out of the snapshot.

    Args:
        entry: Resource entry to check

    Returns:
        The reason it is excluded, or None if it is translatable
    """
    if entry.type_name is not None or entry.mimetype is not None:
        return EXCLUDED_NON_STRING
    if entry.name.startswith(DESIGNER_KEY_PREFIX) or entry.name.endswith(DESIGNER_KEY_SUFFIXES):
        return EXCLUDED_DESIGNER
    if entry.value is None or not entry.value.strip():
        return EXCLUDED_EMPTY
    return None


def is_translatable_entry(entry: ResourceEntry) -> bool:
    return exclusion_reason(entry) is None


class ResxAdapter:
    """
    Adapter for .resx resource files.

    Extractable and injectable. Injection rewrites the <value> of every
    translatable entry and leaves everything else untouched.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    @property
    def format_name(self) -> str:
        return "resx"

    @property
    def original_path(self) -> Path:
        return self.path

    @property
    def document_name(self) -> str:
        # The .resx extension is implicit in document names
        return self.path.stem

    def iter_entries(self, source: Optional[XmlSource] = None) -> Iterator[ResourceEntry]:
        """
        Yield every <data> entry, translatable or not.

        Args:
            source: Already-parsed file; parsed from disk when omitted

        Raises:
            MalformedSourceError: If the file cannot be parsed or an entry has no name
        """
        if source is None:
            source = load_xml(self.path)

        for data in source.root.iter('data'):
            name = data.get('name')
            if name is None:
                raise MalformedSourceError(
                    "Resource entry without a name",
                    path=str(self.path),
                    context={'line': data.sourceline}
                )

            value_element = data.find('value')
            comment_element = data.find('comment')

            yield ResourceEntry(
                name=name,
                value=element_text(value_element) if value_element is not None else None,
                comment=element_text(comment_element) if comment_element is not None else "",
                type_name=data.get('type'),
                mimetype=data.get('mimetype'),
                element=data
            )

    def extract(self) -> Iterator[TranslationUnit]:
        for entry in self.iter_entries():
            if is_translatable_entry(entry):
                yield entry.to_unit()

    def localized_path(self, directory: Path, language: str) -> Path:
        return Path(directory) / f"{self.path.stem}.{language}.resx"

    def inject(self, output_path: Union[str, Path], translations: Mapping[str, str]) -> Path:
        source = load_xml(self.path)

        replacements = []
        for entry in self.iter_entries(source):
            if not is_translatable_entry(entry):
                continue
            if entry.name not in translations:
                raise MissingTranslationError(
                    f"No translation for '{entry.name}' in {self.path.name}",
                    unit_id=entry.name
                )
            replacements.append((entry.element.find('value'), translations[entry.name]))

        for value_element, text in replacements:
            source.set_text(value_element, text)

        logger.debug(f"Writing {len(replacements)} translated resources to {output_path}")
        return write_xml(source, output_path)

    def __repr__(self) -> str:
        return f"ResxAdapter(path={self.path.name})"
