"""
Command-line interface for XLIFF conversion
"""
import argparse
import os
import sys

from xliffsync.config import XLIFF_LANGUAGES, XLIFF_TWO_WAY, XLIFF_OUTPUT_DIR, XLIFF_SOURCE_LANGUAGE, ConverterConfig
from xliffsync.core.adapters.exceptions import ConfigurationError, PathInvariantError, UnsupportedFormatError
from xliffsync.core.converter import Converter, adapter_for
from xliffsync.utils.file_utils import make_original_file_id
from xliffsync.utils.unified_logger import setup_cli_logger


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Update XLIFF translation memory from .resx, .vsct, .xaml and LocalizableStrings.cs files."
    )
    parser.add_argument("root", help="Root directory of the repository to convert.")
    parser.add_argument("-f", "--files", nargs="+", default=None,
                        help="Convert only these artifacts (must be under the root directory).")
    parser.add_argument("--two-way", action="store_true", default=XLIFF_TWO_WAY,
                        help="Also write translations back into localized copies of the source files.")
    parser.add_argument("-l", "--languages", nargs="+", default=XLIFF_LANGUAGES,
                        help=f"Target languages (default: {' '.join(XLIFF_LANGUAGES)}).")
    parser.add_argument("-sl", "--source_lang", default=XLIFF_SOURCE_LANGUAGE,
                        help=f"Source language (default: {XLIFF_SOURCE_LANGUAGE}).")
    parser.add_argument("-o", "--output-dir", default=XLIFF_OUTPUT_DIR or None,
                        help="Directory for localized files in two-way mode (default: next to the source file).")
    parser.add_argument("--no-color", action="store_true", help="Disable colored output.")

    args = parser.parse_args(argv)

    logger = setup_cli_logger(enable_colors=not args.no_color)

    try:
        config = ConverterConfig(
            root_directory=args.root,
            languages=args.languages,
            two_way=args.two_way,
            source_language=args.source_lang,
            output_directory=args.output_dir
        )
    except ConfigurationError as e:
        parser.error(e.message)

    if not config.root_directory.is_dir():
        parser.error(f"Root directory not found: {config.root_directory}")

    files = None
    if args.files:
        files = [os.path.abspath(path) for path in args.files]
        for path in files:
            if not os.path.isfile(path):
                parser.error(f"File not found: {path}")
            try:
                adapter_for(path)
                make_original_file_id(path, config.root_directory)
            except (UnsupportedFormatError, PathInvariantError) as e:
                parser.error(f"{e.message}: {path}")

    Converter(config, logger).run(files)
    return 0


if __name__ == "__main__":
    sys.exit(main())
