"""
C# embedded string-literal adapter.

Reads classes of localizable constants such as

    internal class LocalizableStrings
    {
        public const string AppFullName = ".NET Command Line Tools";
        public const string UsageText = @"Usage: ""dotnet"" [options]";
    }

Each variable declared with a string literal initializer becomes a unit
whose id is the variable name and whose text is the literal's value.
Extraction only: these files are meant to be replaced by .resx resources,
so their documents are named as if they already were.
"""

import logging
import re
import sys
from pathlib import Path
from typing import Iterator, Union

from .exceptions import MalformedSourceError
from .translation_unit import TranslationUnit

logger = logging.getLogger(__name__)

# Declarations (and further declarators of the same statement), comments and
# stray literals are matched together so that comment text and the contents
# of unrelated strings are skipped as a whole.
_TOKEN_PATTERN = re.compile(
    r'''
      (?P<declaration>
        \b(?:string|String|var)\s+
        (?P<name>@?[A-Za-z_][A-Za-z0-9_]*)\s*=\s*
        (?P<literal>@"(?:[^"]|"")*"|"(?:[^"\\\r\n]|\\.)*")
        (?=\s*[;,])
      )
    | (?P<declarator>
        ,\s*(?P<next_name>@?[A-Za-z_][A-Za-z0-9_]*)\s*=\s*
        (?P<next_literal>@"(?:[^"]|"")*"|"(?:[^"\\\r\n]|\\.)*")
        (?=\s*[;,])
      )
    | (?P<line_comment>//[^\r\n]*)
    | (?P<block_comment>/\*.*?\*/)
    | (?P<verbatim>@"(?:[^"]|"")*")
    | (?P<regular>"(?:[^"\\\r\n]|\\.)*")
    | (?P<char>'(?:[^'\\\r\n]|\\.)+')
    ''',
    re.VERBOSE | re.DOTALL
)

_SIMPLE_ESCAPES = {
    "'": "'",
    '"': '"',
    '\\': '\\',
    '0': '\0',
    'a': '\a',
    'b': '\b',
    'f': '\f',
    'n': '\n',
    'r': '\r',
    't': '\t',
    'v': '\v',
}

_ESCAPE_PATTERN = re.compile(r'\\(u[0-9A-Fa-f]{4}|U[0-9A-Fa-f]{8}|x[0-9A-Fa-f]{1,4}|.)', re.DOTALL)


def _unescape_regular(body: str, path: Path) -> str:
    def replace(match):
        escape = match.group(1)
        if escape[0] in 'uUx' and len(escape) > 1:
            code_point = int(escape[1:], 16)
            if code_point > sys.maxunicode:
                raise MalformedSourceError(
                    f"Escape sequence '\\{escape}' is outside the Unicode range",
                    path=str(path)
                )
            return chr(code_point)
        if escape in _SIMPLE_ESCAPES:
            return _SIMPLE_ESCAPES[escape]
        raise MalformedSourceError(
            f"Unrecognized escape sequence '\\{escape}'",
            path=str(path)
        )

    value = _ESCAPE_PATTERN.sub(replace, body)

    # \uXXXX escapes are UTF-16 code units; pair up surrogates into code points
    try:
        return value.encode('utf-16-le', 'surrogatepass').decode('utf-16-le')
    except UnicodeDecodeError as e:
        raise MalformedSourceError(
            "String literal contains an unpaired surrogate escape",
            path=str(path),
            original_error=e
        ) from e


def literal_value(literal: str, path: Path) -> str:
    """
    Return the value of a C# string literal token.

    Args:
        literal: The literal including its quotes (and @ prefix if verbatim)
        path: Source file, for error reporting

    Returns:
        The string value with quotes stripped and escapes resolved
    """
    if literal.startswith('@'):
        return literal[2:-1].replace('""', '"')
    return _unescape_regular(literal[1:-1], path)


class CSharpAdapter:
    """Adapter for *LocalizableStrings.cs constant classes (extraction only)."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    @property
    def format_name(self) -> str:
        return "cs"

    @property
    def original_path(self) -> Path:
        return self.path.with_suffix('.resx')

    @property
    def document_name(self) -> str:
        return self.path.stem

    def extract(self) -> Iterator[TranslationUnit]:
        try:
            text = self.path.read_text(encoding='utf-8-sig')
        except UnicodeDecodeError as e:
            raise MalformedSourceError(
                f"Cannot decode {self.path.name}",
                path=str(self.path),
                original_error=e
            ) from e

        count = 0
        # End offset of the previous declarator while inside a declaration list
        chain_end = None
        for match in _TOKEN_PATTERN.finditer(text):
            if match.group('declaration') is not None:
                name, literal = match.group('name'), match.group('literal')
            elif (
                match.group('declarator') is not None
                and chain_end is not None
                and not text[chain_end:match.start()].strip()
            ):
                name, literal = match.group('next_name'), match.group('next_literal')
            else:
                chain_end = None
                continue

            chain_end = match.end()
            count += 1
            yield TranslationUnit(
                unit_id=name.lstrip('@'),
                source=literal_value(literal, self.path)
            )

        logger.debug(f"{self.path.name}: {count} string declarations")

    def __repr__(self) -> str:
        return f"CSharpAdapter(path={self.path.name})"
