"""
Tests for writing build results to disk.
"""

import json
import os
import tempfile
import unittest

import pandas as pd

from cn_admin_tree.area_engine import build_area_tree
from cn_admin_tree.config import BuildStats, TreeBuildConfig
from cn_admin_tree.logging_config import TreeBuildLogger
from cn_admin_tree.models import DERIVED_FIELDS, DiagnosticKind
from cn_admin_tree.output.output_generator import (
    OutputGenerator,
    create_diagnostics_dataframe,
    create_index_dataframe,
    strip_derived_fields
)


SAMPLE_LINES = [
    '北京市 110000',
    '东城区 110101',
    '浙江省 330000',
    '杭州市 330100',
    '上城区 330102',
    '宁波市 330200',
    '没有编码',
]


def collect_keys(data):
    """All dictionary keys at any depth of a JSON value."""
    keys = set()
    if isinstance(data, list):
        for item in data:
            keys |= collect_keys(item)
    elif isinstance(data, dict):
        keys |= set(data)
        for value in data.values():
            keys |= collect_keys(value)
    return keys


class TestStripDerivedFields(unittest.TestCase):
    """Test cases for strip_derived_fields."""

    def test_removes_derived_keys_at_every_depth(self):
        result = build_area_tree(SAMPLE_LINES)
        compact = strip_derived_fields(result.to_dict())

        keys = collect_keys(compact)
        for key in DERIVED_FIELDS:
            self.assertNotIn(key, keys)
        self.assertEqual(keys, {'id', 'name', 'parentId', 'children'})

    def test_matches_serializing_without_derived_fields(self):
        result = build_area_tree(SAMPLE_LINES)

        self.assertEqual(
            strip_derived_fields(result.to_dict(include_derived=True)),
            result.to_dict(include_derived=False)
        )

    def test_input_is_not_modified(self):
        data = [{'id': '110000', 'fullName': '北京市', 'children': [{'id': '110101', 'parentIds': '0,110000,'}]}]

        strip_derived_fields(data)

        self.assertIn('fullName', data[0])
        self.assertIn('parentIds', data[0]['children'][0])


class TestDataFrames(unittest.TestCase):
    """Test cases for the tabular exports."""

    def test_index_dataframe(self):
        result = build_area_tree(SAMPLE_LINES)
        df = create_index_dataframe(result.index)

        self.assertEqual(len(df), len(result.index))
        self.assertEqual(list(df['id']), list(result.index))
        row = df[df['id'] == '330102'].iloc[0]
        self.assertEqual(row['level'], 'county')
        self.assertEqual(row['fullName'], '浙江省 杭州市 上城区')
        self.assertEqual(row['childCount'], 0)
        self.assertEqual(df[df['id'] == '330000'].iloc[0]['childCount'], 2)

    def test_levels_come_from_codes(self):
        result = build_area_tree(SAMPLE_LINES)
        df = create_index_dataframe(result.index)

        levels = dict(zip(df['id'], df['level']))
        self.assertEqual(levels['110000'], 'province')
        self.assertEqual(levels['110101'], 'county')
        self.assertEqual(levels['330100'], 'prefecture')
        self.assertFalse(hasattr(result.index['330100'], 'level'))

    def test_empty_diagnostics_dataframe(self):
        df = create_diagnostics_dataframe([])

        self.assertTrue(df.empty)
        self.assertEqual(list(df.columns), ['lineNumber', 'kind', 'context', 'detail'])


class TestOutputGenerator(unittest.TestCase):
    """Test cases for OutputGenerator."""

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.input_file = os.path.join(self.temp_dir.name, 'codes.txt')
        with open(self.input_file, 'w', encoding='utf-8') as f:
            f.write('\n'.join(SAMPLE_LINES))
        self.output_dir = os.path.join(self.temp_dir.name, 'output')
        self.logger = TreeBuildLogger(name='cn_admin_tree.tests', level='WARNING')
        self.result = build_area_tree(SAMPLE_LINES)
        self.stats = BuildStats(total_lines=len(SAMPLE_LINES), records_placed=6,
                                province_count=2, indexed_count=6)

    def tearDown(self):
        self.temp_dir.cleanup()

    def _generate(self, **overrides):
        config = TreeBuildConfig(
            input_file=self.input_file,
            output_directory=self.output_dir,
            **overrides
        )
        generator = OutputGenerator(config, self.logger)
        return generator.generate_all_outputs(self.result, self.stats)

    def test_generates_all_files(self):
        files = self._generate()

        self.assertEqual(
            set(files),
            {'full_json', 'compact_json', 'index_csv', 'diagnostics_csv', 'summary_report'}
        )
        for path in files.values():
            self.assertTrue(os.path.exists(path))
        self.assertEqual(os.path.basename(files['full_json']), 'fullData.json')
        self.assertEqual(os.path.basename(files['compact_json']), 'data.json')

    def test_full_json_keeps_names_and_ancestry(self):
        files = self._generate()

        with open(files['full_json'], encoding='utf-8') as f:
            text = f.read()
        data = json.loads(text)

        self.assertIn('浙江省 杭州市 上城区', text)
        self.assertEqual(data[0]['id'], '110000')
        self.assertEqual(data[0]['parentId'], '0')
        self.assertEqual(data[0]['children'][0]['parentIds'], '0,110000,')
        self.assertNotIn('children', data[0]['children'][0])

    def test_compact_json_has_no_derived_fields(self):
        files = self._generate()

        with open(files['compact_json'], encoding='utf-8') as f:
            data = json.load(f)

        keys = collect_keys(data)
        for key in DERIVED_FIELDS:
            self.assertNotIn(key, keys)
        self.assertEqual(data[1]['children'][0]['children'][0]['id'], '330102')

    def test_index_csv_rows_match_index(self):
        files = self._generate()

        df = pd.read_csv(files['index_csv'], dtype=str, encoding='utf-8-sig')

        self.assertEqual(len(df), len(self.result.index))
        self.assertEqual(list(df['id']), list(self.result.index))

    def test_diagnostics_csv(self):
        files = self._generate()

        df = pd.read_csv(files['diagnostics_csv'], encoding='utf-8-sig')

        self.assertEqual(len(df), 1)
        self.assertEqual(df.iloc[0]['kind'], DiagnosticKind.MALFORMED_LINE)
        self.assertEqual(df.iloc[0]['lineNumber'], 7)
        self.assertEqual(df.iloc[0]['context'], '没有编码')

    def test_optional_files_can_be_disabled(self):
        files = self._generate(write_compact_output=False, write_index_csv=False,
                               write_diagnostics_csv=False)

        self.assertEqual(set(files), {'full_json', 'summary_report'})
        self.assertFalse(os.path.exists(os.path.join(self.output_dir, 'data.json')))

    def test_zero_indent_writes_single_line(self):
        files = self._generate(json_indent=0)

        with open(files['full_json'], encoding='utf-8') as f:
            text = f.read()

        self.assertEqual(text.count('\n'), 1)

    def test_summary_report(self):
        files = self._generate()

        with open(files['summary_report'], encoding='utf-8') as f:
            report = f.read()

        self.assertIn('AREA TREE BUILD SUMMARY REPORT', report)
        self.assertIn('Province: 2', report)
        self.assertIn(f"{DiagnosticKind.MALFORMED_LINE}: 1", report)

    def test_validate_output_directory(self):
        config = TreeBuildConfig(input_file=self.input_file, output_directory=self.output_dir)
        generator = OutputGenerator(config, self.logger)

        self.assertTrue(generator.validate_output_directory())
        self.assertEqual(os.listdir(self.output_dir), [])


if __name__ == '__main__':
    unittest.main()
