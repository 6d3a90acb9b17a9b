"""
Data loading module.

This module provides the AreaDataLoader class, which reads a division code
listing (one "name code" record per line) from disk and hands the lines to
the hierarchy builder.
"""

import logging
from pathlib import Path
from typing import List, Dict, Optional, Any

from .exceptions import DataLoadError, FileAccessError
from .utils.error_handler import (
    RetryConfig, safe_file_operation, create_error_context, log_error_details
)


class AreaDataLoader:
    """
    Loads division code listings from text files.

    Reading and decoding are the only concerns here; every line is returned
    as-is (minus its terminator) and interpreted later by the builder.
    """

    def __init__(self, logger: Optional[logging.Logger] = None,
                 retry_config: Optional[RetryConfig] = None):
        """
        Initialize the AreaDataLoader.

        Args:
            logger: Optional logger instance for logging operations
            retry_config: Optional retry configuration for file operations
        """
        self.logger = logger or logging.getLogger(__name__)
        self.retry_config = retry_config or RetryConfig(max_attempts=3, base_delay=1.0)
        self._statistics: Dict[str, Any] = {}

    def load_lines(self, file_path: str, encoding: str = "utf-8") -> List[str]:
        """
        Load the lines of a division code listing.

        Args:
            file_path: Path to the listing file
            encoding: Text encoding of the file

        Returns:
            Lines with line terminators removed, in file order

        Raises:
            FileAccessError: If the file is missing or cannot be read
            DataLoadError: If the file cannot be decoded or holds no records
        """
        self.logger.info(f"Loading division codes from: {file_path}")

        file_path_obj = Path(file_path)
        if not file_path_obj.exists():
            raise FileAccessError(
                f"Input file not found: {file_path}",
                file_path=str(file_path),
                operation="read"
            )

        if not file_path_obj.is_file():
            raise FileAccessError(
                f"Path is not a file: {file_path}",
                file_path=str(file_path),
                operation="read"
            )

        def read_text():
            with open(file_path_obj, 'r', encoding=encoding) as f:
                return f.read()

        try:
            text = safe_file_operation(
                operation=read_text,
                file_path=file_path,
                operation_name="read",
                retry_config=self.retry_config,
                logger=self.logger
            )
        except UnicodeDecodeError as e:
            context = create_error_context(
                operation="load_lines",
                file_path=str(file_path),
                encoding=encoding
            )
            error = DataLoadError(
                f"Could not decode {file_path} as {encoding}: {e.reason}",
                file_path=str(file_path),
                original_error=e
            )
            log_error_details(self.logger, error, context)
            raise error from e

        # UTF-8 byte order mark
        if text.startswith('\ufeff'):
            text = text[1:]

        lines = text.splitlines()
        non_blank = sum(1 for line in lines if line.strip())

        if non_blank == 0:
            raise DataLoadError(
                "Input file contains no records",
                file_path=str(file_path)
            )

        self._statistics = {
            'file_path': str(file_path),
            'encoding': encoding,
            'total_lines': len(lines),
            'non_blank_lines': non_blank,
            'file_size_bytes': file_path_obj.stat().st_size
        }

        self.logger.info(f"Loaded {len(lines):,} lines ({non_blank:,} non-blank)")
        return lines

    def get_loading_statistics(self) -> Dict[str, Any]:
        """Statistics about the most recent load."""
        return dict(self._statistics)
