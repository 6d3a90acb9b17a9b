"""
Build orchestration for the administrative area tree.

This module provides ``build_area_tree``, the two-stage core pipeline
(hierarchy builder followed by tree annotator), and the AreaTreeEngine
class that wraps it with file loading, progress reporting and statistics.
"""

import logging
import time
from typing import Iterable, List, Optional, Tuple
from tqdm import tqdm

from .models import AreaTreeResult, DiagnosticKind
from .config import TreeBuildConfig, BuildStats
from .data_loader import AreaDataLoader
from .logging_config import TreeBuildLogger
from .exceptions import DataQualityError, MalformedCodeError
from .hierarchy.hierarchy_builder import HierarchyBuilder
from .hierarchy.hierarchy_config import classify_code
from .hierarchy.tree_annotator import TreeAnnotator, DEFAULT_MAX_DEPTH
from .utils.error_handler import create_error_context, log_error_details

# Diagnostics listed individually in the log before summarising
MAX_LOGGED_DIAGNOSTICS = 50


def build_area_tree(lines: Iterable[str], max_depth: int = DEFAULT_MAX_DEPTH,
                    logger: Optional[logging.Logger] = None) -> AreaTreeResult:
    """
    Build the annotated area forest, flat index and diagnostics from raw lines.

    Builder diagnostics come first, followed by annotation diagnostics.
    Running it twice on the same lines gives equal results.

    Args:
        lines: Ordered raw lines ("name code" or "code name")
        max_depth: Annotation depth limit
        logger: Optional logger instance

    Returns:
        AreaTreeResult with forest, index and diagnostics

    Raises:
        MalformedCodeError: If a code token is not exactly 6 digits
    """
    logger = logger or logging.getLogger(__name__)

    built = HierarchyBuilder(logger).build(lines)
    annotated = TreeAnnotator(max_depth=max_depth, logger=logger).annotate(built.forest)

    return AreaTreeResult(
        forest=annotated.forest,
        index=annotated.index,
        diagnostics=built.diagnostics + annotated.diagnostics
    )


class AreaTreeEngine:
    """
    Orchestrates a complete build: load, build hierarchy, annotate, report.
    """

    def __init__(self, config: TreeBuildConfig, logger: Optional[TreeBuildLogger] = None):
        """
        Initialize the AreaTreeEngine.

        Args:
            config: Configuration object with build parameters
            logger: Optional logger instance for logging operations
        """
        self.config = config
        self.logger = logger or TreeBuildLogger(level=config.log_level)

        self.data_loader = AreaDataLoader(logger=self.logger.logger)
        self.builder = HierarchyBuilder(logger=self.logger.logger)
        self.annotator = TreeAnnotator(max_depth=config.max_depth, logger=self.logger.logger)

        self.lines: List[str] = []
        self.result: Optional[AreaTreeResult] = None
        self.build_stats = BuildStats()

    def run_complete_build(self) -> Tuple[AreaTreeResult, BuildStats]:
        """
        Run the complete build pipeline from loading to the annotated result.

        Returns:
            Tuple of (build result, build statistics)

        Raises:
            MalformedCodeError: If the listing contains a code that is not 6 digits
            DataQualityError: If fail_on_diagnostics is set and diagnostics were recorded
        """
        start_time = time.time()

        try:
            self.logger.log_phase_start("Data Loading")
            load_start = time.time()
            self.lines = self.data_loader.load_lines(self.config.input_file, self.config.encoding)
            self.logger.log_phase_complete("Data Loading", len(self.lines), time.time() - load_start)

            self.logger.log_processing_start(len(self.lines), self.config.input_file)
            self.build_stats.total_lines = len(self.lines)

            self.result = self.build(self.lines)

            self.build_stats.processing_time = time.time() - start_time
            self._calculate_final_statistics()
            self._report_diagnostics()
            self.logger.log_processing_complete(self.build_stats)

            if self.config.fail_on_diagnostics and self.result.has_diagnostics():
                counts = self.result.get_diagnostic_counts()
                raise DataQualityError(
                    f"Build recorded {len(self.result.diagnostics)} diagnostic(s)",
                    quality_issue=', '.join(counts),
                    affected_records=len(self.result.diagnostics),
                    severity='high',
                    recommendations=self._get_recommendations(counts)
                )

            return self.result, self.build_stats

        except MalformedCodeError as e:
            log_error_details(
                self.logger.logger, e,
                create_error_context(operation="run_complete_build", input_file=self.config.input_file)
            )
            raise
        except Exception as e:
            self.logger.error(f"Error in complete build process: {e}")
            raise

    def build(self, lines: List[str]) -> AreaTreeResult:
        """
        Run the builder and annotator over already loaded lines.

        Args:
            lines: Raw input lines

        Returns:
            AreaTreeResult for these lines
        """
        self.logger.log_phase_start("Hierarchy Building")
        phase_start = time.time()
        with tqdm(lines, desc="Building hierarchy", unit="line", leave=False) as progress:
            built = self.builder.build(progress)
        self.build_stats.records_placed = built.records_placed
        self.logger.log_phase_complete("Hierarchy Building", built.records_placed, time.time() - phase_start)

        self.logger.log_phase_start("Tree Annotation")
        phase_start = time.time()
        annotated = self.annotator.annotate(built.forest)
        self.logger.log_phase_complete("Tree Annotation", len(annotated.index), time.time() - phase_start)

        return AreaTreeResult(
            forest=annotated.forest,
            index=annotated.index,
            diagnostics=built.diagnostics + annotated.diagnostics
        )

    def _calculate_final_statistics(self):
        """Fill level, index and diagnostic counts from the result."""
        result = self.result
        level_counts = {}
        for area in result.index.values():
            level = classify_code(area.id)
            level_counts[level] = level_counts.get(level, 0) + 1

        self.build_stats.level_counts = level_counts
        self.build_stats.province_count = len(result.forest)
        self.build_stats.indexed_count = len(result.index)
        self.build_stats.diagnostic_counts = result.get_diagnostic_counts()

    def _report_diagnostics(self):
        """Log diagnostics as data quality warnings."""
        diagnostics = self.result.diagnostics
        if not diagnostics:
            self.logger.info("No diagnostics recorded")
            return

        for diagnostic in diagnostics[:MAX_LOGGED_DIAGNOSTICS]:
            location = f"line {diagnostic.line_number}" if diagnostic.line_number else "tree"
            self.logger.log_data_quality_warning(
                f"{diagnostic.kind} at {location}: {diagnostic.detail} [{diagnostic.context}]"
            )

        if len(diagnostics) > MAX_LOGGED_DIAGNOSTICS:
            self.logger.log_data_quality_warning(
                f"... {len(diagnostics) - MAX_LOGGED_DIAGNOSTICS} more diagnostic(s) not shown"
            )

    def _get_recommendations(self, counts) -> List[str]:
        recommendations = []
        if DiagnosticKind.MALFORMED_LINE in counts:
            recommendations.append("Check that every line holds exactly one name and one 6-digit code")
        if DiagnosticKind.ORPHAN_RECORD in counts:
            recommendations.append("Check that records are ordered province, prefecture, county")
        if DiagnosticKind.DUPLICATE_ID in counts:
            recommendations.append("Remove repeated division codes from the listing")
        if DiagnosticKind.DEPTH_LIMIT_EXCEEDED in counts:
            recommendations.append("Raise max_depth or inspect the nesting of the source data")
        return recommendations

    def has_diagnostics(self) -> bool:
        return self.result is not None and self.result.has_diagnostics()
