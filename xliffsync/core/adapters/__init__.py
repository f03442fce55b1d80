"""
Format adapters for translatable source artifacts.

Each format implements the capability interfaces in ``interfaces``:
every adapter can extract translation units, and the structured-markup
formats (RESX, VSCT, XAML) can also write translations back into a copy of
the artifact.
"""

from .translation_unit import TranslationUnit
from .interfaces import IExtractable, IInjectable
from .resx_adapter import ResxAdapter, ResourceEntry, exclusion_reason, is_translatable_entry
from .vsct_adapter import VsctAdapter
from .xaml_adapter import XamlAdapter
from .csharp_adapter import CSharpAdapter

from .exceptions import (
    ConversionError,
    AdapterError,
    MalformedSourceError,
    MissingTranslationError,
    UnsupportedFormatError,
    PathInvariantError,
    ConfigurationError,
)

__all__ = [
    # Core adapter components
    'TranslationUnit',
    'IExtractable',
    'IInjectable',
    'ResxAdapter',
    'ResourceEntry',
    'exclusion_reason',
    'is_translatable_entry',
    'VsctAdapter',
    'XamlAdapter',
    'CSharpAdapter',

    # Error handling - Exceptions
    'ConversionError',
    'AdapterError',
    'MalformedSourceError',
    'MissingTranslationError',
    'UnsupportedFormatError',
    'PathInvariantError',
    'ConfigurationError',
]
