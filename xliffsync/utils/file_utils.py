"""
File and path helpers used by the converter
"""
import os
import re
import tempfile
from pathlib import Path
from typing import Iterable, Optional, Union

from xliffsync.core.adapters.exceptions import PathInvariantError

# Primary subtag in lowercase (de, pt, zh) followed by optional script/region
# subtags (Hans, BR, 419). Matches the language suffix of localized copies
# such as Strings.de.resx or Strings.zh-Hans.resx.
_LANGUAGE_TAG_PATTERN = re.compile(r'^[a-z]{2,3}(?:-[A-Za-z0-9]{2,8})*$')


def make_original_file_id(original_file: Union[str, Path], root_directory: Union[str, Path]) -> str:
    """
    Compute the repository-relative id of an artifact.

    Args:
        original_file: Artifact path
        root_directory: Configured root directory

    Returns:
        Relative path with forward slashes

    Raises:
        PathInvariantError: If the artifact is not under the root directory
    """
    original = os.path.abspath(original_file)
    root = os.path.abspath(root_directory)

    if not original.startswith(root.rstrip(os.sep) + os.sep):
        raise PathInvariantError(
            "Artifact is not under the root directory",
            path=original,
            root=root
        )

    return original[len(root.rstrip(os.sep)) + 1:].replace('\\', '/')


def looks_like_language_tag(value: str, known_languages: Optional[Iterable[str]] = None) -> bool:
    """Return True if ``value`` is a configured language or has the shape of one."""
    if not value:
        return False
    if known_languages and value.lower() in {language.lower() for language in known_languages}:
        return True
    return bool(_LANGUAGE_TAG_PATTERN.match(value))


def is_neutral_file(path: Union[str, Path], known_languages: Optional[Iterable[str]] = None) -> bool:
    """
    Check whether a file is a source artifact rather than a localized copy.

    ``Strings.resx`` is neutral, ``Strings.de.resx`` is not.

    Args:
        path: File to check
        known_languages: Configured target languages

    Returns:
        True if the file has no language suffix
    """
    without_extension = Path(path).stem
    possible_language = Path(without_extension).suffix.lstrip('.')
    return not looks_like_language_tag(possible_language, known_languages)


def atomic_write_bytes(path: Union[str, Path], data: bytes) -> Path:
    """
    Write ``data`` to ``path`` through a temporary file in the same directory.

    The temporary file is removed on every exit path; the destination is
    either fully replaced or left as it was.

    Args:
        path: Destination file
        data: Bytes to write

    Returns:
        The destination path
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    temp_path = None
    try:
        with tempfile.NamedTemporaryFile(
            mode='wb', delete=False, dir=path.parent, prefix=f'.{path.name}.', suffix='.tmp'
        ) as tmp_f:
            temp_path = Path(tmp_f.name)
            tmp_f.write(data)
        os.replace(temp_path, path)
    finally:
        if temp_path is not None and temp_path.exists():
            temp_path.unlink()

    return path


def mirrored_directory(
    artifact_path: Union[str, Path],
    root_directory: Union[str, Path],
    output_directory: Optional[Union[str, Path]] = None
) -> Path:
    """
    Directory that receives localized copies of an artifact.

    Without an output directory this is the artifact's own directory;
    otherwise the artifact's directory relative to the root is recreated
    under the output directory.
    """
    artifact_directory = Path(os.path.abspath(artifact_path)).parent
    if output_directory is None:
        return artifact_directory

    relative_id = make_original_file_id(artifact_path, root_directory)
    relative_directory = Path(relative_id).parent
    return Path(output_directory) / relative_directory
