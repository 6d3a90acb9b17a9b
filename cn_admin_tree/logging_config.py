"""
Logging configuration for the administrative area tree builder.

This module provides the logger used by the command line and the engine,
with configurable levels, optional file output and phase reporting helpers.
"""

import logging
import sys
from pathlib import Path
from typing import Optional
from datetime import datetime


class TreeBuildLogger:
    """Custom logger for area tree build operations."""

    def __init__(self, name: str = "cn_admin_tree", level: str = "INFO",
                 log_file: Optional[str] = None):
        """
        Initialize the build logger.

        Args:
            name: Logger name
            level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_file: Optional file path for log output
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, level.upper()))

        # Clear any existing handlers
        self.logger.handlers.clear()

        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        self.logger.addHandler(console_handler)

        if log_file:
            self._setup_file_handler(log_file, formatter)

    def _setup_file_handler(self, log_file: str, formatter: logging.Formatter):
        """Set up file logging handler."""
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
        file_handler.setFormatter(formatter)
        self.logger.addHandler(file_handler)

    def info(self, message: str):
        """Log info message."""
        self.logger.info(message)

    def debug(self, message: str):
        """Log debug message."""
        self.logger.debug(message)

    def warning(self, message: str):
        """Log warning message."""
        self.logger.warning(message)

    def error(self, message: str):
        """Log error message."""
        self.logger.error(message)

    def log_processing_start(self, line_count: int, source: str):
        """Log the start of a build with the input size."""
        self.info("=" * 60)
        self.info("AREA TREE BUILD STARTED")
        self.info("=" * 60)
        self.info(f"Source: {source}")
        self.info(f"Processing {line_count:,} input lines")
        self.info(f"Started at: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")

    def log_processing_complete(self, stats):
        """Log build completion with statistics."""
        self.info("=" * 60)
        self.info("AREA TREE BUILD COMPLETED")
        self.info("=" * 60)
        self.info(f"Input lines: {stats.total_lines:,}")
        self.info(f"Records placed: {stats.records_placed:,}")
        self.info(f"Provinces: {stats.province_count:,}")

        for level, count in stats.level_counts.items():
            self.info(f"  {level}: {count:,}")

        self.info(f"Indexed areas: {stats.indexed_count:,}")

        for kind, count in stats.diagnostic_counts.items():
            self.info(f"Diagnostics ({kind}): {count:,}")

        self.info(f"Coverage: {stats.get_coverage_rate():.2f}%")
        self.info(f"Processing time: {stats.processing_time:.2f} seconds")
        self.info(f"Completed at: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")

    def log_phase_start(self, phase_name: str):
        """Log the start of a processing phase."""
        self.info("-" * 40)
        self.info(f"Starting {phase_name}")
        self.info("-" * 40)

    def log_phase_complete(self, phase_name: str, count: int, duration: float):
        """Log the completion of a processing phase."""
        self.info(f"Completed {phase_name}")
        self.info(f"Records processed: {count:,}")
        self.info(f"Duration: {duration:.2f} seconds")

    def log_data_quality_warning(self, message: str):
        """Log data quality warnings."""
        self.warning(f"DATA QUALITY: {message}")

    def log_file_operation(self, operation: str, file_path: str, record_count: int):
        """Log file operations."""
        self.info(f"{operation}: {file_path} ({record_count:,} records)")


def setup_logging(config) -> TreeBuildLogger:
    """
    Set up logging based on configuration.

    Args:
        config: TreeBuildConfig instance

    Returns:
        Configured TreeBuildLogger instance
    """
    log_file = None
    if config.log_file:
        log_file = config.log_file
    elif config.output_directory:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = Path(config.output_directory) / f"build_log_{timestamp}.txt"

    return TreeBuildLogger(
        name="cn_admin_tree",
        level=config.log_level,
        log_file=str(log_file) if log_file else None
    )
