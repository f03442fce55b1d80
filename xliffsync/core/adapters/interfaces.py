"""
Capability interfaces for format adapters.

Every format can be read (IExtractable); structured-markup formats can also
be written back (IInjectable). Adapters implement the protocols directly
instead of sharing a base class, so each id scheme stays self-contained.
"""

from pathlib import Path
from typing import Iterator, Mapping, Protocol, runtime_checkable

from .translation_unit import TranslationUnit


@runtime_checkable
class IExtractable(Protocol):
    """Interface for adapters that can extract translation units."""

    path: Path

    @property
    def format_name(self) -> str:
        """Short format identifier (e.g. "resx")."""
        ...

    @property
    def original_path(self) -> Path:
        """Path recorded as the document's "original" attribute."""
        ...

    @property
    def document_name(self) -> str:
        """Base name for the artifact's translation-memory documents."""
        ...

    def extract(self) -> Iterator[TranslationUnit]:
        """Yield translation units in document order.

        Each call re-reads the artifact, so the sequence can be restarted.

        Raises:
            MalformedSourceError: If the artifact cannot be parsed
        """
        ...


@runtime_checkable
class IInjectable(IExtractable, Protocol):
    """Interface for adapters that can write translations back."""

    def localized_path(self, directory: Path, language: str) -> Path:
        """Where the localized copy for ``language`` goes under ``directory``."""
        ...

    def inject(self, output_path: Path, translations: Mapping[str, str]) -> Path:
        """Write a translated copy of the artifact to ``output_path``.

        The original artifact is never modified.

        Args:
            output_path: Destination file
            translations: id -> translated text; must cover every extracted id

        Returns:
            The written path

        Raises:
            MissingTranslationError: If an extracted id has no translation
        """
        ...
