"""
XAML (declarative UI rule) format adapter.

Only DisplayName and Description attributes are translatable. Ids are built
from the owning element and its Name attribute:

    <StringProperty Name="Foo" DisplayName="Foo"/>    -> StringProperty|Foo|DisplayName
    <EnumProperty Name="Foo">
      <EnumValue Name="Bar" DisplayName="Bar"/>       -> EnumValue|Foo.Bar|DisplayName
    </EnumProperty>

Enumeration values are qualified by their owner because the same value name
commonly appears under several properties.
"""

from pathlib import Path
from typing import Iterator, List, Mapping, Tuple, Union

from lxml import etree

from .exceptions import MalformedSourceError, MissingTranslationError
from .translation_unit import TranslationUnit
from .xml_helpers import XmlSource, load_xml, write_xml, local_name

TRANSLATABLE_ATTRIBUTES = ("DisplayName", "Description")
ENUM_VALUE_ELEMENT = "EnumValue"


class XamlAdapter:
    """Adapter for XAML property-page rule files."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    @property
    def format_name(self) -> str:
        return "xaml"

    @property
    def original_path(self) -> Path:
        return self.path

    @property
    def document_name(self) -> str:
        return self.path.name

    def _attributed_name(self, element: etree._Element) -> str:
        name = element.get('Name')
        if name is None:
            raise MalformedSourceError(
                f"<{local_name(element)}> has translatable attributes but no Name",
                path=str(self.path),
                context={'line': element.sourceline}
            )
        return name

    def generate_id(self, element: etree._Element, attribute_name: str) -> str:
        """
        Build the unit id for one attribute of ``element``.

        Args:
            element: Element carrying the attribute
            attribute_name: Local name of the attribute

        Returns:
            The unit id
        """
        element_name = local_name(element)

        if element_name == ENUM_VALUE_ELEMENT:
            owner = element.getparent()
            if owner is None:
                raise MalformedSourceError(
                    "EnumValue without an owning element",
                    path=str(self.path),
                    context={'line': element.sourceline}
                )
            return f"{element_name}|{self._attributed_name(owner)}.{self._attributed_name(element)}|{attribute_name}"

        return f"{element_name}|{self._attributed_name(element)}|{attribute_name}"

    def _translatable_attributes(self, source: XmlSource) -> List[Tuple[str, etree._Element, str]]:
        found = []
        for element in source.root.iter(tag=etree.Element):
            for attribute in element.attrib:
                attribute_name = local_name(attribute)
                if attribute_name not in TRANSLATABLE_ATTRIBUTES:
                    continue
                found.append((self.generate_id(element, attribute_name), element, attribute))
        return found

    def extract(self) -> Iterator[TranslationUnit]:
        source = load_xml(self.path)
        for unit_id, element, attribute in self._translatable_attributes(source):
            yield TranslationUnit(unit_id=unit_id, source=element.get(attribute))

    def localized_path(self, directory: Path, language: str) -> Path:
        return Path(directory) / language / self.path.name

    def inject(self, output_path: Union[str, Path], translations: Mapping[str, str]) -> Path:
        source = load_xml(self.path)
        attributes = self._translatable_attributes(source)

        for unit_id, _, _ in attributes:
            if unit_id not in translations:
                raise MissingTranslationError(
                    f"No translation for '{unit_id}' in {self.path.name}",
                    unit_id=unit_id
                )

        for unit_id, element, attribute in attributes:
            source.set_attribute(element, attribute, translations[unit_id])

        return write_xml(source, output_path)

    def __repr__(self) -> str:
        return f"XamlAdapter(path={self.path.name})"
