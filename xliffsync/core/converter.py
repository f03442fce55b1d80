"""
Conversion of source artifacts into XLIFF translation memory.

For every artifact: snapshot -> merge into one document per language ->
neutral template from the first merged language -> (two-way mode)
localized copies from the documents. Artifacts and languages are processed
one at a time in a fixed order. A malformed artifact or document is reported
and skipped; it never stops the run.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

from xliffsync.config import ConverterConfig, XAML_RULES_DIRECTORY
from xliffsync.core.adapters import (
    IExtractable,
    IInjectable,
    ResxAdapter,
    VsctAdapter,
    XamlAdapter,
    CSharpAdapter,
    MalformedSourceError,
    MissingTranslationError,
    UnsupportedFormatError,
)
from xliffsync.core.xliff import build_snapshot, merge_snapshot, make_neutral, TwoWayReinjector
from xliffsync.utils.file_utils import make_original_file_id, is_neutral_file, mirrored_directory
from xliffsync.utils.unified_logger import UnifiedLogger, LogType, get_logger

logger = logging.getLogger(__name__)

ADAPTERS_BY_SUFFIX = {
    '.resx': ResxAdapter,
    '.vsct': VsctAdapter,
    '.xaml': XamlAdapter,
    '.cs': CSharpAdapter,
}

TWO_WAY_STEP = "two-way"

STATUS_CONVERTED = "converted"
STATUS_SKIPPED = "skipped"
STATUS_FAILED = "failed"


@dataclass
class ArtifactResult:
    """
    Outcome of converting one artifact.

    Attributes:
        artifact: The source artifact
        format_name: Adapter format identifier
        status: "converted", "skipped" (no strings) or "failed"
        documents: Language documents written
        neutral: Neutral template written, if any
        localized: Localized artifacts written in two-way mode
        failures: (language or "two-way", error message) pairs
    """
    artifact: Path
    format_name: str
    status: str = STATUS_SKIPPED
    documents: List[Path] = field(default_factory=list)
    neutral: Optional[Path] = None
    localized: List[Path] = field(default_factory=list)
    failures: List[Tuple[str, str]] = field(default_factory=list)


@dataclass
class ConversionReport:
    """Results of a conversion pass."""
    artifacts: List[ArtifactResult] = field(default_factory=list)

    def _with_status(self, status: str) -> List[ArtifactResult]:
        return [result for result in self.artifacts if result.status == status]

    @property
    def converted(self) -> List[ArtifactResult]:
        return self._with_status(STATUS_CONVERTED)

    @property
    def skipped(self) -> List[ArtifactResult]:
        return self._with_status(STATUS_SKIPPED)

    @property
    def failed(self) -> List[ArtifactResult]:
        return self._with_status(STATUS_FAILED)

    @property
    def failure_count(self) -> int:
        return sum(len(result.failures) for result in self.artifacts)

    @property
    def documents_written(self) -> int:
        return sum(len(result.documents) for result in self.artifacts)

    @property
    def localized_written(self) -> int:
        return sum(len(result.localized) for result in self.artifacts)

    def summary(self) -> str:
        return (
            f"{len(self.converted)} artifacts converted, {len(self.skipped)} without strings, "
            f"{len(self.failed)} failed; {self.documents_written} documents and "
            f"{self.localized_written} localized files written"
        )


def adapter_for(path: Union[str, Path]) -> IExtractable:
    """
    Create the adapter for a file based on its extension.

    Raises:
        UnsupportedFormatError: If no adapter handles the extension
    """
    path = Path(path)
    adapter_class = ADAPTERS_BY_SUFFIX.get(path.suffix.lower())
    if adapter_class is None:
        raise UnsupportedFormatError(
            f"No adapter for {path.name}",
            file_type=path.suffix
        )
    return adapter_class(path)


class Converter:
    """Runs conversion passes for one configuration."""

    def __init__(self, config: ConverterConfig, run_logger: Optional[UnifiedLogger] = None):
        """
        Args:
            config: Run-wide settings
            run_logger: Logger for user-facing output (defaults to the global logger)
        """
        self.config = config
        self.run_logger = run_logger or get_logger()
        self.reinjector = TwoWayReinjector(config.languages)

    # ------------------------------------------------------------------
    # Discovery
    # ------------------------------------------------------------------

    def discover_artifacts(self, directory: Union[str, Path]) -> List[IExtractable]:
        """
        Source artifacts directly inside ``directory``.

        Neutral .resx and .vsct files, every *LocalizableStrings.cs, and
        .xaml rule files when the directory is a Rules directory.
        """
        directory = Path(directory)
        languages = self.config.languages
        found: List[IExtractable] = []

        for path in sorted(directory.glob('*.resx')):
            if is_neutral_file(path, languages):
                found.append(ResxAdapter(path))

        for path in sorted(directory.glob('*.vsct')):
            if is_neutral_file(path, languages):
                found.append(VsctAdapter(path))

        for path in sorted(directory.glob('*LocalizableStrings.cs')):
            found.append(CSharpAdapter(path))

        if directory.name == XAML_RULES_DIRECTORY:
            for path in sorted(directory.glob('*.xaml')):
                found.append(XamlAdapter(path))

        return [adapter for adapter in found if adapter.path.is_file()]

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------

    def run(self, files: Optional[Sequence[Union[str, Path]]] = None) -> ConversionReport:
        """
        Convert everything under the configured root directory.

        Args:
            files: Convert only these artifacts instead of walking the root

        Returns:
            ConversionReport of the pass
        """
        self.run_logger.info("Conversion Started", LogType.CONVERSION_START, {
            'root': str(self.config.root_directory),
            'languages': self.config.languages,
            'two_way': self.config.two_way
        })

        if files:
            report = ConversionReport([self.convert_file(path) for path in files])
        else:
            report = self.convert_directory(self.config.root_directory)

        self.run_logger.info(report.summary(), LogType.CONVERSION_END, {
            'converted': len(report.converted),
            'skipped': len(report.skipped),
            'failed': len(report.failed),
            'failures': report.failure_count
        })
        return report

    def convert_directory(
        self,
        directory: Union[str, Path],
        report: Optional[ConversionReport] = None
    ) -> ConversionReport:
        """
        Convert the artifacts of ``directory`` and, recursively, its subdirectories.

        Args:
            directory: Directory to convert
            report: Report to append to (a new one when omitted)

        Returns:
            The report
        """
        directory = Path(directory)
        if report is None:
            report = ConversionReport()

        if directory.name in self.config.skipped_directories:
            logger.debug(f"Skipping directory {directory}")
            return report

        for adapter in self.discover_artifacts(directory):
            report.artifacts.append(self.convert_artifact(adapter))

        for subdirectory in sorted(p for p in directory.iterdir() if p.is_dir()):
            self.convert_directory(subdirectory, report)

        return report

    def convert_file(self, path: Union[str, Path]) -> ArtifactResult:
        """Convert a single artifact, choosing the adapter by extension."""
        return self.convert_artifact(adapter_for(path))

    def _document_path(self, xlf_directory: Path, adapter: IExtractable, language: Optional[str]) -> Path:
        if language is None:
            return xlf_directory / f"{adapter.document_name}.xlf"
        return xlf_directory / f"{adapter.document_name}.{language}.xlf"

    def convert_artifact(self, adapter: IExtractable) -> ArtifactResult:
        """
        Reconcile one artifact against all of its language documents.

        Args:
            adapter: Adapter of the artifact

        Returns:
            ArtifactResult for the artifact

        Raises:
            PathInvariantError: If the artifact is outside the root directory
        """
        result = ArtifactResult(artifact=adapter.path, format_name=adapter.format_name)

        try:
            snapshot = build_snapshot(adapter)
        except MalformedSourceError as e:
            self.run_logger.warning(
                f"Skipping {adapter.path}: {e.message}",
                LogType.ARTIFACT,
                {'artifact': str(adapter.path), 'details': str(e)}
            )
            result.status = STATUS_FAILED
            result.failures.append(("*", str(e)))
            return result

        if not snapshot.has_strings:
            logger.debug(f"{adapter.path} has no translatable strings")
            result.status = STATUS_SKIPPED
            return result

        original_id = make_original_file_id(adapter.original_path, self.config.root_directory)
        xlf_directory = adapter.path.parent / self.config.xlf_directory_name
        merged_languages = []

        for language in self.config.languages:
            xlf_path = self._document_path(xlf_directory, adapter, language)
            try:
                merge = merge_snapshot(
                    xlf_path,
                    original_id,
                    language,
                    snapshot.units,
                    source_language=self.config.source_language
                )
            except MalformedSourceError as e:
                self.run_logger.warning(
                    f"Could not update {language} translations of {original_id}: {e.message}",
                    LogType.ARTIFACT,
                    {'artifact': original_id, 'language': language, 'details': str(e)}
                )
                result.failures.append((language, str(e)))
                continue

            result.documents.append(xlf_path)
            merged_languages.append(language)
            logger.debug(f"{xlf_path.name}: {merge}")

            if result.neutral is None:
                result.neutral = make_neutral(xlf_path, self._document_path(xlf_directory, adapter, None))

        result.status = STATUS_CONVERTED if result.documents else STATUS_FAILED

        if result.documents:
            self.run_logger.info(
                f"{original_id}: {len(snapshot)} strings, {len(result.documents)} documents",
                LogType.FILE_OPERATION,
                {'artifact': original_id, 'units': len(snapshot), 'documents': len(result.documents)}
            )

        if self.config.two_way and isinstance(adapter, IInjectable) and merged_languages:
            self._reinject(adapter, xlf_directory, original_id, merged_languages, result)

        return result

    def _reinject(
        self,
        adapter: IInjectable,
        xlf_directory: Path,
        original_id: str,
        languages: List[str],
        result: ArtifactResult
    ):
        # Only documents reconciled in this pass are trusted to match the artifact
        output_directory = mirrored_directory(
            adapter.path,
            self.config.root_directory,
            self.config.output_directory
        )
        try:
            reinjection = self.reinjector.reinject(adapter, xlf_directory, output_directory, languages)
        except (MissingTranslationError, MalformedSourceError) as e:
            self.run_logger.error(
                f"Two-way update failed for {original_id}",
                LogType.ERROR_DETAIL,
                {'artifact': original_id, 'details': str(e)}
            )
            result.failures.append((TWO_WAY_STEP, str(e)))
            return

        result.localized.extend(reinjection.written)
        for path in reinjection.written:
            logger.debug(f"Wrote localized artifact {path}")
