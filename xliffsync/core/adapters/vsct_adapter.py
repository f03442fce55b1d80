"""
VSCT (command table) format adapter.

Each command owner (button, menu, group...) carries a <Strings> block:

    <Button guid="guidCmdSet" id="cmdFoo">
      <Strings>
        <CanonicalName>Foo</CanonicalName>
        <ButtonText>Do Foo</ButtonText>
      </Strings>
    </Button>

Every string child becomes a unit with id "<owner id>|<child name>", except
CanonicalName, which is the command's invariant name. Localized alternatives
go in LocCanonicalName, which is extracted like any other string.
"""

from pathlib import Path
from typing import Iterator, List, Mapping, Tuple, Union

from lxml import etree

from .exceptions import MalformedSourceError, MissingTranslationError
from .translation_unit import TranslationUnit
from .xml_helpers import XmlSource, load_xml, write_xml, local_name, element_text

VSCT_NAMESPACE = "http://schemas.microsoft.com/VisualStudio/2005-10-18/CommandTable"
STRINGS_TAG = f"{{{VSCT_NAMESPACE}}}Strings"
CANONICAL_NAME_TAG = f"{{{VSCT_NAMESPACE}}}CanonicalName"


class VsctAdapter:
    """Adapter for Visual Studio command table (.vsct) files."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    @property
    def format_name(self) -> str:
        return "vsct"

    @property
    def original_path(self) -> Path:
        return self.path

    @property
    def document_name(self) -> str:
        # Keep the extension so Foo.vsct and Foo.resx never share documents
        return self.path.name

    def _string_elements(self, source: XmlSource) -> List[Tuple[str, etree._Element]]:
        elements = []
        for strings in source.root.iter(STRINGS_TAG):
            owner = strings.getparent()
            owner_id = owner.get('id') if owner is not None else None
            if owner_id is None:
                raise MalformedSourceError(
                    "<Strings> block without an owning id",
                    path=str(self.path),
                    context={'line': strings.sourceline}
                )

            for child in strings.iterchildren(tag=etree.Element):
                if child.tag == CANONICAL_NAME_TAG:
                    continue
                elements.append((f"{owner_id}|{local_name(child)}", child))
        return elements

    def extract(self) -> Iterator[TranslationUnit]:
        source = load_xml(self.path)
        for unit_id, element in self._string_elements(source):
            yield TranslationUnit(unit_id=unit_id, source=element_text(element))

    def localized_path(self, directory: Path, language: str) -> Path:
        return Path(directory) / f"{self.path.stem}.{language}.vsct"

    def inject(self, output_path: Union[str, Path], translations: Mapping[str, str]) -> Path:
        source = load_xml(self.path)
        elements = self._string_elements(source)

        for unit_id, _ in elements:
            if unit_id not in translations:
                raise MissingTranslationError(
                    f"No translation for '{unit_id}' in {self.path.name}",
                    unit_id=unit_id
                )

        for unit_id, element in elements:
            source.set_text(element, translations[unit_id])

        return write_xml(source, output_path)

    def __repr__(self) -> str:
        return f"VsctAdapter(path={self.path.name})"
