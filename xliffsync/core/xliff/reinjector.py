"""
Two-way mode: write the translations held in language documents back into
localized copies of the source artifact.

Incomplete documents do not block output: an entry without target text is
written with its source text, so every language gets a usable artifact.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Union

from xliffsync.core.adapters.interfaces import IInjectable
from .document import get_translations

logger = logging.getLogger(__name__)


@dataclass
class ReinjectionResult:
    """
    Outcome of reinjecting one artifact.

    Attributes:
        written: Localized artifacts written, in language order
        missing_documents: Languages that had no document yet
    """
    written: List[Path] = field(default_factory=list)
    missing_documents: List[str] = field(default_factory=list)


class TwoWayReinjector:
    """Drives an injectable adapter from the documents of its artifact."""

    def __init__(self, languages: Sequence[str], fallback_to_source: bool = True):
        """
        Args:
            languages: Languages to reinject, in order
            fallback_to_source: Use source text for entries without a target
        """
        self.languages = list(languages)
        self.fallback_to_source = fallback_to_source

    def document_path(self, xlf_directory: Path, adapter: IInjectable, language: str) -> Path:
        return Path(xlf_directory) / f"{adapter.document_name}.{language}.xlf"

    def reinject_language(
        self,
        adapter: IInjectable,
        xlf_path: Union[str, Path],
        output_directory: Union[str, Path],
        language: str
    ) -> Path:
        """
        Write the localized copy for one language.

        Args:
            adapter: Adapter of the source artifact
            xlf_path: The language document
            output_directory: Directory mirroring the artifact's location
            language: Target language

        Returns:
            Path of the localized artifact

        Raises:
            MissingTranslationError: If the document lacks an id the artifact has
            MalformedSourceError: If the document cannot be parsed
        """
        translations = get_translations(xlf_path, fallback_to_source=self.fallback_to_source)
        output_path = adapter.localized_path(Path(output_directory), language)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        written = adapter.inject(output_path, translations)
        logger.debug(f"Reinjected {len(translations)} strings into {written}")
        return written

    def reinject(
        self,
        adapter: IInjectable,
        xlf_directory: Union[str, Path],
        output_directory: Union[str, Path],
        languages: Optional[Sequence[str]] = None
    ) -> ReinjectionResult:
        """
        Write localized copies for every language that has a document.

        Args:
            adapter: Adapter of the source artifact
            xlf_directory: Directory holding the artifact's documents
            output_directory: Directory mirroring the artifact's location
            languages: Overrides the reinjector's languages

        Returns:
            ReinjectionResult listing what was written
        """
        result = ReinjectionResult()

        for language in (languages if languages is not None else self.languages):
            xlf_path = self.document_path(Path(xlf_directory), adapter, language)
            if not xlf_path.exists():
                logger.debug(f"No {language} document for {adapter.path.name}")
                result.missing_documents.append(language)
                continue
            result.written.append(
                self.reinject_language(adapter, xlf_path, output_directory, language)
            )

        return result
