"""
Configuration management for the administrative area tree builder.

This module provides dataclasses for the build configuration (input file,
output options, traversal limits, logging) and for the statistics collected
during a build.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional
import os
from pathlib import Path

from .exceptions import ConfigurationError
from .models import DiagnosticKind
from .hierarchy.tree_annotator import DEFAULT_MAX_DEPTH

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


@dataclass
class TreeBuildConfig:
    """Configuration class for an area tree build."""

    # Input file path (e.g. 2023年中华人民共和国县以上行政区划代码.txt)
    input_file: str

    # Output configuration
    output_directory: str

    # Source file encoding
    encoding: str = "utf-8"

    # Annotation depth limit (provinces are depth 1)
    max_depth: int = DEFAULT_MAX_DEPTH

    # Output files
    write_compact_output: bool = True
    write_index_csv: bool = True
    write_diagnostics_csv: bool = True
    json_indent: int = 2

    # Treat any diagnostic as a failed build
    fail_on_diagnostics: bool = False

    # Minimum similarity score (0-100) for name lookups
    lookup_threshold: int = 80

    # Logging configuration
    log_level: str = "INFO"
    log_file: Optional[str] = None

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate_paths()
        self._validate_options()
        self._ensure_output_directory()

    def _validate_paths(self):
        """Validate that the input file exists."""
        if not os.path.exists(self.input_file):
            raise FileNotFoundError(f"Input file not found: {self.input_file}")

    def _validate_options(self):
        """Validate numeric limits and the log level."""
        if self.max_depth < 1:
            raise ConfigurationError(
                f"max_depth must be at least 1: {self.max_depth}",
                config_key='max_depth',
                config_value=self.max_depth
            )

        if not 0 <= self.lookup_threshold <= 100:
            raise ConfigurationError(
                f"Lookup threshold must be between 0 and 100: {self.lookup_threshold}",
                config_key='lookup_threshold',
                config_value=self.lookup_threshold
            )

        if self.json_indent < 0:
            raise ConfigurationError(
                f"json_indent must not be negative: {self.json_indent}",
                config_key='json_indent',
                config_value=self.json_indent
            )

        self.log_level = self.log_level.upper()
        if self.log_level not in VALID_LOG_LEVELS:
            raise ConfigurationError(
                f"Invalid log level: {self.log_level}",
                config_key='log_level',
                config_value=self.log_level,
                valid_values=VALID_LOG_LEVELS
            )

        try:
            "".encode(self.encoding)
        except LookupError as e:
            raise ConfigurationError(
                f"Unknown encoding: {self.encoding}",
                config_key='encoding',
                config_value=self.encoding
            ) from e

    def _ensure_output_directory(self):
        """Create output directory if it doesn't exist."""
        Path(self.output_directory).mkdir(parents=True, exist_ok=True)

    @classmethod
    def from_dict(cls, config_dict: Dict) -> 'TreeBuildConfig':
        """Create configuration from dictionary."""
        return cls(**config_dict)

    def to_dict(self) -> Dict:
        """Convert configuration to dictionary."""
        return {
            'input_file': self.input_file,
            'output_directory': self.output_directory,
            'encoding': self.encoding,
            'max_depth': self.max_depth,
            'write_compact_output': self.write_compact_output,
            'write_index_csv': self.write_index_csv,
            'write_diagnostics_csv': self.write_diagnostics_csv,
            'json_indent': self.json_indent,
            'fail_on_diagnostics': self.fail_on_diagnostics,
            'lookup_threshold': self.lookup_threshold,
            'log_level': self.log_level,
            'log_file': self.log_file
        }


@dataclass
class BuildStats:
    """Statistics tracking for a build."""

    total_lines: int = 0
    records_placed: int = 0
    level_counts: Dict[str, int] = field(default_factory=dict)
    diagnostic_counts: Dict[str, int] = field(default_factory=dict)
    province_count: int = 0
    indexed_count: int = 0
    processing_time: float = 0.0

    def get_total_diagnostics(self) -> int:
        return sum(self.diagnostic_counts.values())

    def get_coverage_rate(self) -> float:
        """Percentage of non-blank input lines that ended up in the tree."""
        considered = (self.records_placed
                      + self.diagnostic_counts.get(DiagnosticKind.MALFORMED_LINE, 0)
                      + self.diagnostic_counts.get(DiagnosticKind.ORPHAN_RECORD, 0))
        if considered == 0:
            return 0.0

        return (self.records_placed / considered) * 100
