"""
Utility modules

Import helpers directly from their module:

    from xliffsync.utils.file_utils import make_original_file_id
    from xliffsync.utils.unified_logger import setup_cli_logger
"""

__all__ = []
