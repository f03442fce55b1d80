"""
XML helper utilities shared by the markup adapters

Artifacts are parsed with lxml for navigation, but localized copies are not
re-serialized from the tree. Each translated position is located in the raw
file text and only that span is replaced, so quoting, entity references,
empty-element syntax, line endings and everything else outside translated
positions stay exactly as they were in the source.
"""
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from lxml import etree

from .exceptions import MalformedSourceError

_DECLARATION_PATTERN = re.compile(rb'^(?:\xef\xbb\xbf)?\s*<\?xml[^>]*\?>')
_ENCODING_PATTERN = re.compile(rb'encoding\s*=\s*["\']([A-Za-z0-9._-]+)["\']')

# Markup tokens of a well-formed document. Comments, CDATA sections,
# processing instructions and the doctype are matched only to be stepped over.
_MARKUP_PATTERN = re.compile(
    r'''
      (?P<comment><!--.*?-->)
    | (?P<cdata><!\[CDATA\[.*?\]\]>)
    | (?P<pi><\?.*?\?>)
    | (?P<doctype><!DOCTYPE(?:[^\[>]|\[.*?\])*>)
    | (?P<end></[^\s>]+\s*>)
    | (?P<start>
        <(?P<name>[^\s/>!?]+)
        (?P<attrs>(?:\s+[^\s=/>]+\s*=\s*(?:"[^"]*"|'[^']*'))*)
        \s*(?P<empty>/?)>
      )
    ''',
    re.VERBOSE | re.DOTALL
)

_ATTRIBUTE_PATTERN = re.compile(r'''([^\s=/>]+)\s*=\s*(?:"([^"]*)"|'([^']*)')''')


@dataclass
class ElementSpan:
    """Location of one element in the raw file text.

    Attributes:
        name: Tag name as written (with prefix, if any)
        start: Offset of the opening '<'
        open_end: Offset just past the start tag
        close_start: Offset of the end tag, None for an empty-element tag
        attributes: Raw attribute name -> (value start, value end, quote char)
    """
    name: str
    start: int
    open_end: int
    close_start: Optional[int] = None
    attributes: Dict[str, Tuple[int, int, str]] = field(default_factory=dict)


def scan_elements(text: str) -> List[ElementSpan]:
    """
    Locate every element of a well-formed document, in document order.

    Args:
        text: Decoded file content

    Returns:
        One ElementSpan per element, in the order lxml iterates them
    """
    spans = []
    open_elements = []

    for match in _MARKUP_PATTERN.finditer(text):
        if match.group('start') is not None:
            span = ElementSpan(name=match.group('name'), start=match.start(), open_end=match.end())
            attrs_offset = match.start('attrs')
            for attribute in _ATTRIBUTE_PATTERN.finditer(match.group('attrs')):
                group = 2 if attribute.group(2) is not None else 3
                span.attributes[attribute.group(1)] = (
                    attrs_offset + attribute.start(group),
                    attrs_offset + attribute.end(group),
                    '"' if group == 2 else "'"
                )
            spans.append(span)
            if not match.group('empty'):
                open_elements.append(span)
        elif match.group('end') is not None and open_elements:
            open_elements.pop().close_start = match.start()

    return spans


def _detect_encoding(data: bytes) -> str:
    if data.startswith(b'\xff\xfe'):
        return 'utf-16-le'
    if data.startswith(b'\xfe\xff'):
        return 'utf-16-be'
    declaration = _DECLARATION_PATTERN.match(data)
    if declaration:
        encoding_match = _ENCODING_PATTERN.search(declaration.group(0))
        if encoding_match:
            return encoding_match.group(1).decode('ascii')
    return 'utf-8'


class XmlSource:
    """A parsed XML file plus the raw text that localized copies are written from.

    Attributes:
        tree: The parsed element tree
        text: Decoded file content (a byte-order mark is kept as U+FEFF)
        encoding: Codec the file is written back with
        newline: Line ending used by the file
    """

    def __init__(self, tree: etree._ElementTree, text: str, encoding: str, spans: List[ElementSpan]):
        self.tree = tree
        self.text = text
        self.encoding = encoding
        self.newline = '\r\n' if '\r\n' in text else '\n'
        self._elements = list(tree.getroot().iter(tag=etree.Element))
        self._spans = dict(zip(self._elements, spans))
        self._edits: List[Tuple[int, int, str]] = []

    @property
    def root(self) -> etree._Element:
        return self.tree.getroot()

    def _escape_text(self, value: str) -> str:
        value = value.replace('&', '&amp;').replace('<', '&lt;').replace('>', '&gt;')
        value = value.replace('\r\n', '\n').replace('\r', '&#13;')
        return value.replace('\n', self.newline)

    @staticmethod
    def _escape_attribute(value: str, quote: str) -> str:
        value = value.replace('&', '&amp;').replace('<', '&lt;').replace('>', '&gt;')
        value = value.replace(quote, '&quot;' if quote == '"' else '&apos;')
        return value.replace('\r', '&#13;').replace('\n', '&#10;').replace('\t', '&#9;')

    def set_text(self, element: etree._Element, text: str):
        """Replace the content of ``element`` with plain ``text``.

        Unchanged content is left as written, entity references included.
        """
        if element_text(element) == text:
            return

        span = self._spans[element]
        content = self._escape_text(text)
        if span.close_start is None:
            # <name .../> becomes <name ...>text</name>
            slash = self.text.rindex('/', span.start, span.open_end)
            self._edits.append((slash, span.open_end, f">{content}</{span.name}>"))
        else:
            self._edits.append((span.open_end, span.close_start, content))

    def set_attribute(self, element: etree._Element, attribute: str, value: str):
        """Replace the value of one attribute, keeping its quote style.

        Args:
            element: Element carrying the attribute
            attribute: Attribute key as lxml reports it ("{ns}name" or "name")
            value: New value
        """
        if element.get(attribute) == value:
            return

        span = self._spans[element]
        start, end, quote = span.attributes[self._raw_attribute_name(span, attribute)]
        self._edits.append((start, end, self._escape_attribute(value, quote)))

    def _raw_attribute_name(self, span: ElementSpan, attribute: str) -> str:
        if not attribute.startswith('{'):
            if attribute in span.attributes:
                return attribute
        else:
            attribute_local = local_name(attribute)
            for raw_name in span.attributes:
                prefix, _, raw_local = raw_name.rpartition(':')
                if prefix and prefix != 'xmlns' and raw_local == attribute_local:
                    return raw_name
        raise MalformedSourceError(
            f"Cannot locate attribute {attribute} on <{span.name}>",
            context={'offset': span.start}
        )

    def to_bytes(self) -> bytes:
        """The file content with all replacements applied."""
        pieces = []
        position = 0
        for start, end, replacement in sorted(self._edits):
            pieces.append(self.text[position:start])
            pieces.append(replacement)
            position = end
        pieces.append(self.text[position:])
        return ''.join(pieces).encode(self.encoding, 'xmlcharrefreplace')


def local_name(node: Union[etree._Element, str]) -> str:
    """Return the tag or attribute name without its namespace."""
    return etree.QName(node).localname


def load_xml(path: Union[str, Path]) -> XmlSource:
    """
    Parse an XML file and locate its elements in the raw text.

    Args:
        path: File to parse

    Returns:
        XmlSource for the file

    Raises:
        MalformedSourceError: If the file is not well-formed XML
    """
    data = Path(path).read_bytes()

    parser = etree.XMLParser(resolve_entities=False, remove_blank_text=False)
    try:
        root = etree.fromstring(data, parser)
    except etree.XMLSyntaxError as e:
        raise MalformedSourceError(
            f"Cannot parse {Path(path).name}",
            path=str(path),
            original_error=e
        ) from e

    encoding = _detect_encoding(data)
    try:
        text = data.decode(encoding)
    except (UnicodeDecodeError, LookupError) as e:
        raise MalformedSourceError(
            f"Cannot decode {Path(path).name} as {encoding}",
            path=str(path),
            original_error=e
        ) from e

    tree = root.getroottree()
    spans = scan_elements(text)
    element_count = sum(1 for _ in root.iter(tag=etree.Element))
    if len(spans) != element_count:
        raise MalformedSourceError(
            f"Cannot locate the elements of {Path(path).name}",
            path=str(path),
            context={'parsed': element_count, 'located': len(spans)}
        )

    return XmlSource(tree, text, encoding, spans)


def write_xml(source: XmlSource, output_path: Union[str, Path]) -> Path:
    """
    Write an XmlSource to a new file, creating parent directories.

    Args:
        source: Parsed document with its replacements
        output_path: Destination path

    Returns:
        The destination path
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(source.to_bytes())
    return output_path


def element_text(element: etree._Element) -> str:
    """Concatenated text content of an element and its descendants."""
    return etree.tostring(element, method='text', encoding='unicode', with_tail=False)


def replace_element_text(element: etree._Element, text: str):
    """Replace all content of ``element`` with plain ``text``."""
    for child in list(element):
        element.remove(child)
    element.text = text
