"""
Output generation for the administrative area tree builder.

This module provides the OutputGenerator class, which writes the annotated
forest as JSON (full and compact), the flat index and the diagnostics as
CSV, and a plain-text build summary.
"""

import json
import os
import pandas as pd
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..models import AdministrativeArea, AreaTreeResult, Diagnostic, DERIVED_FIELDS
from ..config import TreeBuildConfig, BuildStats
from ..logging_config import TreeBuildLogger
from ..exceptions import OutputGenerationError
from ..hierarchy.hierarchy_config import classify_code
from ..utils.data_utils import get_index_summary

INDEX_COLUMNS = ['id', 'name', 'level', 'parentId', 'parentIds', 'parentNames', 'fullName', 'childCount']
DIAGNOSTIC_COLUMNS = ['lineNumber', 'kind', 'context', 'detail']


def strip_derived_fields(data: Any) -> Any:
    """
    Recursively drop parentIds, parentNames and fullName from serialized areas.

    Works on any JSON-like structure, so it can also compact a previously
    written full output.

    Args:
        data: A serialized area, a list of them, or any nested JSON value

    Returns:
        A new structure without the derived keys
    """
    if isinstance(data, list):
        return [strip_derived_fields(item) for item in data]

    if isinstance(data, dict):
        return {
            key: strip_derived_fields(value)
            for key, value in data.items()
            if key not in DERIVED_FIELDS
        }

    return data


def create_index_dataframe(index: Dict[str, AdministrativeArea]) -> pd.DataFrame:
    """
    Flatten the id index into a DataFrame, one row per area in index order.

    Args:
        index: Mapping from id to annotated area

    Returns:
        DataFrame with INDEX_COLUMNS
    """
    rows = [
        [
            area.id,
            area.name,
            classify_code(area.id),
            area.parent_id,
            area.parent_ids,
            area.parent_names,
            area.full_name,
            len(area.children) if area.children else 0
        ]
        for area in index.values()
    ]
    return pd.DataFrame(rows, columns=INDEX_COLUMNS)


def create_diagnostics_dataframe(diagnostics: List[Diagnostic]) -> pd.DataFrame:
    """Turn diagnostics into a DataFrame with DIAGNOSTIC_COLUMNS."""
    rows = [diagnostic.to_dict() for diagnostic in diagnostics]
    df = pd.DataFrame(rows, columns=DIAGNOSTIC_COLUMNS)
    df['lineNumber'] = df['lineNumber'].astype('Int64')
    return df


class OutputGenerator:
    """
    Writes the build result to the output directory.

    File names follow the published dataset: ``fullData.json`` for the
    annotated forest and ``data.json`` for the compact forest.
    """

    def __init__(self, config: TreeBuildConfig, logger: Optional[TreeBuildLogger] = None):
        """
        Initialize the OutputGenerator.

        Args:
            config: Configuration object with output directory and settings
            logger: Optional logger instance for logging operations
        """
        self.config = config
        self.logger = logger or TreeBuildLogger()
        self.timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")

        Path(self.config.output_directory).mkdir(parents=True, exist_ok=True)

        self.file_patterns = {
            'full_json': 'fullData.json',
            'compact_json': 'data.json',
            'index_csv': 'area_index.csv',
            'diagnostics_csv': 'diagnostics.csv',
            'summary_report': 'build_summary_report_{timestamp}.txt'
        }

    def generate_all_outputs(self, result: AreaTreeResult, build_stats: BuildStats) -> Dict[str, str]:
        """
        Generate all configured output files.

        Args:
            result: Build result with forest, index and diagnostics
            build_stats: Build statistics

        Returns:
            Dictionary mapping output type to generated file path

        Raises:
            OutputGenerationError: If any file cannot be written
        """
        self.logger.info("Starting output file generation")
        generated_files = {}

        generated_files['full_json'] = self._write_json(
            'full_json', result.to_dict(include_derived=True), len(result.index)
        )

        if self.config.write_compact_output:
            generated_files['compact_json'] = self._write_json(
                'compact_json', strip_derived_fields(result.to_dict(include_derived=True)), len(result.index)
            )

        if self.config.write_index_csv:
            generated_files['index_csv'] = self._write_csv(
                'index_csv', create_index_dataframe(result.index)
            )

        if self.config.write_diagnostics_csv:
            generated_files['diagnostics_csv'] = self._write_csv(
                'diagnostics_csv', create_diagnostics_dataframe(result.diagnostics)
            )

        generated_files['summary_report'] = self._generate_summary_report(result, build_stats)

        self.logger.info(f"Generated {len(generated_files)} output files")
        return generated_files

    def _get_output_path(self, output_type: str) -> str:
        filename = self.file_patterns[output_type].format(timestamp=self.timestamp)
        return os.path.join(self.config.output_directory, filename)

    def _write_json(self, output_type: str, payload: Any, record_count: int) -> str:
        """Write a JSON document (UTF-8, non-ASCII kept as-is)."""
        file_path = self._get_output_path(output_type)
        indent = self.config.json_indent or None

        try:
            with open(file_path, 'w', encoding='utf-8') as f:
                json.dump(payload, f, ensure_ascii=False, indent=indent)
                f.write('\n')
        except (OSError, TypeError, ValueError) as e:
            raise OutputGenerationError(
                f"Error writing {output_type} output: {e}",
                output_type=output_type,
                output_path=file_path,
                record_count=record_count,
                original_error=e
            ) from e

        self.logger.log_file_operation(f"Wrote {output_type}", file_path, record_count)
        return file_path

    def _write_csv(self, output_type: str, df: pd.DataFrame) -> str:
        """Write a DataFrame as UTF-8 CSV with a byte order mark."""
        file_path = self._get_output_path(output_type)

        try:
            df.to_csv(file_path, index=False, encoding='utf-8-sig')
        except OSError as e:
            raise OutputGenerationError(
                f"Error writing {output_type} output: {e}",
                output_type=output_type,
                output_path=file_path,
                record_count=len(df),
                original_error=e
            ) from e

        self.logger.log_file_operation(f"Wrote {output_type}", file_path, len(df))
        return file_path

    def _generate_summary_report(self, result: AreaTreeResult, build_stats: BuildStats) -> str:
        """
        Generate text summary report.

        Args:
            result: Build result
            build_stats: Build statistics

        Returns:
            Path to generated summary report file
        """
        file_path = self._get_output_path('summary_report')
        index_summary = get_index_summary(create_index_dataframe(result.index))

        try:
            with open(file_path, 'w', encoding='utf-8') as f:
                f.write("AREA TREE BUILD SUMMARY REPORT\n")
                f.write("=" * 50 + "\n\n")

                f.write(f"Report Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}\n")
                f.write(f"Processing Time: {build_stats.processing_time:.2f} seconds\n")
                f.write(f"Configuration:\n")
                f.write(f"  Input File: {self.config.input_file}\n")
                f.write(f"  Encoding: {self.config.encoding}\n")
                f.write(f"  Max Depth: {self.config.max_depth}\n\n")

                f.write("BUILD SUMMARY\n")
                f.write("-" * 13 + "\n")
                f.write(f"Input Lines: {build_stats.total_lines:,}\n")
                f.write(f"Records Placed: {build_stats.records_placed:,}\n")
                f.write(f"Provinces: {build_stats.province_count:,}\n")
                f.write(f"Indexed Areas: {build_stats.indexed_count:,}\n")
                f.write(f"Coverage: {build_stats.get_coverage_rate():.2f}%\n\n")

                f.write("AREAS BY LEVEL\n")
                f.write("-" * 14 + "\n")
                for level, count in index_summary['level_counts'].items():
                    f.write(f"{level.capitalize()}: {count:,}\n")
                f.write(f"Leaf Areas: {index_summary['leaf_count'] or 0:,}\n")
                f.write(f"Repeated Names: {index_summary['duplicate_name_count']:,}\n\n")

                f.write("DIAGNOSTICS\n")
                f.write("-" * 11 + "\n")
                if not result.diagnostics:
                    f.write("None\n")
                for kind, count in result.get_diagnostic_counts().items():
                    f.write(f"{kind}: {count:,}\n")

                f.write(f"\nReport completed at {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}\n")
        except OSError as e:
            raise OutputGenerationError(
                f"Error writing summary report: {e}",
                output_type='summary_report',
                output_path=file_path,
                original_error=e
            ) from e

        self.logger.info(f"Generated summary report: {file_path}")
        return file_path

    def validate_output_directory(self) -> bool:
        """
        Validate that output directory is writable.

        Returns:
            True if directory is writable, False otherwise
        """
        try:
            test_file = os.path.join(self.config.output_directory, f'test_write_{self.timestamp}.tmp')
            with open(test_file, 'w') as f:
                f.write('test')
            os.remove(test_file)
            return True
        except OSError as e:
            self.logger.error(f"Output directory not writable: {e}")
            return False
