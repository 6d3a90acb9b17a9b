"""
Tests for id, name and fuzzy lookups over the area index.
"""

import unittest

from cn_admin_tree.area_engine import build_area_tree
from cn_admin_tree.matching.area_matcher import AreaMatch, AreaMatcher


SAMPLE_LINES = [
    '北京市 110000',
    '东城区 110101',
    '朝阳区 110105',
    '吉林省 220000',
    '长春市 220100',
    '朝阳区 220104',
    '浙江省 330000',
    '杭州市 330100',
    '上城区 330102',
]


class TestAreaMatcher(unittest.TestCase):
    """Test cases for AreaMatcher."""

    @classmethod
    def setUpClass(cls):
        cls.result = build_area_tree(SAMPLE_LINES)

    def setUp(self):
        self.matcher = AreaMatcher(self.result.index)

    def test_get_by_id(self):
        area = self.matcher.get('330102')

        self.assertEqual(area.full_name, '浙江省 杭州市 上城区')
        self.assertIsNone(self.matcher.get('999999'))

    def test_find_by_name_returns_all_in_index_order(self):
        areas = self.matcher.find_by_name('朝阳区')

        self.assertEqual([area.id for area in areas], ['110105', '220104'])

    def test_find_by_full_name(self):
        areas = self.matcher.find_by_name(' 吉林省 长春市 朝阳区 ')

        self.assertEqual([area.id for area in areas], ['220104'])

    def test_find_by_name_empty(self):
        self.assertEqual(self.matcher.find_by_name(''), [])
        self.assertEqual(self.matcher.find_by_name(None), [])

    def test_search_exact_full_name_ranks_first(self):
        matches = self.matcher.search('吉林省 长春市 朝阳区')

        self.assertTrue(matches)
        self.assertEqual(matches[0].area.id, '220104')
        self.assertEqual(matches[0].score, 100)

    def test_search_scores_are_sorted_and_above_threshold(self):
        matches = self.matcher.search('朝阳区')

        scores = [match.score for match in matches]
        self.assertEqual(scores, sorted(scores, reverse=True))
        self.assertTrue(all(score >= self.matcher.threshold for score in scores))

    def test_matches_compare_by_area_and_score(self):
        match = self.matcher.search('吉林省 长春市 朝阳区')[0]

        self.assertEqual(match, AreaMatch(area=self.matcher.get('220104'), score=match.score))
        self.assertNotEqual(match, AreaMatch(area=self.matcher.get('110105'), score=match.score))
        self.assertIs(match.area, self.result.index['220104'])

    def test_search_respects_limit(self):
        matcher = AreaMatcher(self.result.index, threshold=0)

        self.assertEqual(len(matcher.search('朝阳区', limit=2)), 2)

    def test_search_without_match(self):
        self.assertEqual(self.matcher.search('xyz'), [])
        self.assertEqual(self.matcher.search('   '), [])

    def test_search_on_empty_index(self):
        self.assertEqual(AreaMatcher({}).search('北京市'), [])

    def test_get_ancestors(self):
        ancestors = self.matcher.get_ancestors('220104')

        self.assertEqual([area.id for area in ancestors], ['220000', '220100'])
        self.assertEqual(self.matcher.get_ancestors('220000'), [])
        self.assertEqual(self.matcher.get_ancestors('999999'), [])

    def test_invalid_threshold(self):
        with self.assertRaises(ValueError):
            AreaMatcher(self.result.index, threshold=101)


if __name__ == '__main__':
    unittest.main()
