"""
Translation unit abstraction.

A TranslationUnit is one translatable string plus the id that joins it to
its translation-memory entry across runs. Each format derives ids
differently:
- RESX: the resource key
- VSCT: "<owner id>|<string element name>"
- XAML: "<element>|<Name attribute>|<attribute>"
- C#: the declared variable name
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class TranslationUnit:
    """
    Represents a single translatable string.

    Attributes:
        unit_id: Stable identifier, unique within one source artifact
        source: The source-language text
        note: Optional comment for translators
    """
    unit_id: str
    source: str
    note: str = ""

    def __repr__(self) -> str:
        source_preview = self.source[:50] + "..." if len(self.source) > 50 else self.source
        return f"TranslationUnit(id={self.unit_id}, source='{source_preview}')"
