"""
Centralized configuration

Defaults come from the environment (optionally a .env file in the working
directory). A run is driven by an explicit ConverterConfig value that is
passed to every entry point.
"""
import os
import logging
from pathlib import Path
from dataclasses import dataclass, field
from typing import List, Optional, Tuple
from dotenv import load_dotenv

from xliffsync.core.adapters.exceptions import ConfigurationError

_config_logger = logging.getLogger('config')

_env_file = Path.cwd() / '.env'
_dotenv_result = load_dotenv(_env_file)

# Languages every artifact is reconciled against, in processing order.
# The first one processed also seeds the neutral template.
DEFAULT_LANGUAGES: Tuple[str, ...] = (
    "cs",
    "de",
    "es",
    "fr",
    "it",
    "ja",
    "ko",
    "pl",
    "pt-BR",
    "ru",
    "tr",
    "zh-Hans",
    "zh-Hant",
)


def _parse_language_list(value: str) -> List[str]:
    return [part.strip() for part in value.split(',') if part.strip()]


XLIFF_LANGUAGES = _parse_language_list(os.getenv('XLIFF_LANGUAGES', '')) or list(DEFAULT_LANGUAGES)
XLIFF_SOURCE_LANGUAGE = os.getenv('XLIFF_SOURCE_LANGUAGE', 'en')
XLIFF_DIRECTORY_NAME = os.getenv('XLIFF_DIRECTORY_NAME', 'xlf')
XLIFF_TWO_WAY = os.getenv('XLIFF_TWO_WAY', 'false').lower() == 'true'
XLIFF_OUTPUT_DIR = os.getenv('XLIFF_OUTPUT_DIR', '')

# Directory names never descended into during traversal
SKIPPED_DIRECTORIES: Tuple[str, ...] = ("bin", "TestAssets")

# XAML rule files are only picked up from directories with this name
XAML_RULES_DIRECTORY = "Rules"

DEBUG_MODE = os.getenv('DEBUG_MODE', 'false').lower() == 'true'

if DEBUG_MODE:
    _config_logger.setLevel(logging.DEBUG)
    _config_logger.debug(f"Loaded .env from {_env_file}: {_dotenv_result}")
    _config_logger.debug(f"   XLIFF_LANGUAGES: {','.join(XLIFF_LANGUAGES)}")
    _config_logger.debug(f"   XLIFF_SOURCE_LANGUAGE: {XLIFF_SOURCE_LANGUAGE}")
    _config_logger.debug(f"   XLIFF_DIRECTORY_NAME: {XLIFF_DIRECTORY_NAME}")
    _config_logger.debug(f"   XLIFF_TWO_WAY: {XLIFF_TWO_WAY}")
    _config_logger.debug(f"   XLIFF_OUTPUT_DIR: {XLIFF_OUTPUT_DIR or '(next to source)'}")


@dataclass
class ConverterConfig:
    """Run-wide settings for a conversion pass.

    Attributes:
        root_directory: Repository root; artifact ids are relative to it
        languages: Target languages, processed in this order
        two_way: Also write translations back into localized artifacts
        source_language: Language of the source artifacts
        xlf_directory_name: Name of the per-directory document folder
        output_directory: Root for localized artifacts (None = beside the source)
        skipped_directories: Directory names ignored during traversal
    """
    root_directory: Path
    languages: List[str] = field(default_factory=lambda: list(XLIFF_LANGUAGES))
    two_way: bool = XLIFF_TWO_WAY
    source_language: str = XLIFF_SOURCE_LANGUAGE
    xlf_directory_name: str = XLIFF_DIRECTORY_NAME
    output_directory: Optional[Path] = Path(XLIFF_OUTPUT_DIR) if XLIFF_OUTPUT_DIR else None
    skipped_directories: Tuple[str, ...] = SKIPPED_DIRECTORIES

    def __post_init__(self):
        """Normalize paths and validate configuration."""
        self.root_directory = Path(os.path.abspath(self.root_directory))
        if self.output_directory is not None:
            self.output_directory = Path(os.path.abspath(self.output_directory))
        self.languages = list(self.languages)

        if not self.languages:
            raise ConfigurationError("At least one target language is required")
        lowered = [language.lower() for language in self.languages]
        if len(set(lowered)) != len(lowered):
            raise ConfigurationError(
                "Duplicate target languages",
                context={'languages': ','.join(self.languages)}
            )
        if not self.xlf_directory_name or not self.xlf_directory_name.strip():
            raise ConfigurationError("xlf_directory_name must not be empty")
        if not self.source_language:
            raise ConfigurationError("source_language must not be empty")
