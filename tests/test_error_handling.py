"""
Tests for the exception hierarchy and file operation retries.
"""

import logging
import unittest

from cn_admin_tree.exceptions import (
    AreaTreeError,
    ConfigurationError,
    DataQualityError,
    FileAccessError,
    MalformedCodeError,
    create_malformed_code_error,
    get_error_severity
)
from cn_admin_tree.utils.error_handler import (
    RetryConfig,
    create_error_context,
    log_error_details,
    safe_file_operation
)


class TestExceptions(unittest.TestCase):
    """Test cases for the exception classes."""

    def test_malformed_code_error(self):
        error = create_malformed_code_error('11010', line_number=2, line='东城区 11010')

        self.assertIsInstance(error, AreaTreeError)
        self.assertEqual(str(error), "Division code '11010' is not a 6-digit code (line 2)")
        data = error.to_dict()
        self.assertEqual(data['error_type'], 'MalformedCodeError')
        self.assertEqual(data['error_code'], 'MALFORMED_CODE')
        self.assertEqual(data['context']['line_number'], 2)

    def test_severity(self):
        self.assertEqual(get_error_severity(ConfigurationError("bad")), 'critical')
        self.assertEqual(get_error_severity(MalformedCodeError("bad")), 'high')
        self.assertEqual(
            get_error_severity(DataQualityError("bad", quality_issue='OrphanRecord', severity='low')),
            'low'
        )
        self.assertEqual(get_error_severity(ValueError("bad")), 'medium')


class TestSafeFileOperation(unittest.TestCase):
    """Test cases for safe_file_operation."""

    def setUp(self):
        self.retry_config = RetryConfig(max_attempts=3, base_delay=0)

    def test_returns_result(self):
        result = safe_file_operation(lambda: 'ok', 'codes.txt', 'read', self.retry_config)

        self.assertEqual(result, 'ok')

    def test_retries_transient_errors(self):
        attempts = []

        def flaky():
            attempts.append(1)
            if len(attempts) < 3:
                raise OSError("temporarily unavailable")
            return 'ok'

        result = safe_file_operation(flaky, 'codes.txt', 'read', self.retry_config)

        self.assertEqual(result, 'ok')
        self.assertEqual(len(attempts), 3)

    def test_gives_up_after_max_attempts(self):
        attempts = []

        def failing():
            attempts.append(1)
            raise OSError("disk error")

        with self.assertRaises(FileAccessError) as ctx:
            safe_file_operation(failing, 'codes.txt', 'read', self.retry_config)

        self.assertEqual(len(attempts), 3)
        self.assertIsInstance(ctx.exception.original_error, OSError)

    def test_permanent_errors_are_not_retried(self):
        attempts = []

        def missing():
            attempts.append(1)
            raise FileNotFoundError("codes.txt")

        with self.assertRaises(FileAccessError):
            safe_file_operation(missing, 'codes.txt', 'read', self.retry_config)

        self.assertEqual(len(attempts), 1)

    def test_other_errors_propagate(self):
        def bad_decode():
            raise UnicodeDecodeError('utf-8', b'\xb1', 0, 1, 'invalid start byte')

        with self.assertRaises(UnicodeDecodeError):
            safe_file_operation(bad_decode, 'codes.txt', 'read', self.retry_config)


class TestRetryConfig(unittest.TestCase):
    """Test cases for RetryConfig."""

    def test_exponential_delay_is_capped(self):
        config = RetryConfig(base_delay=1.0, backoff_factor=2.0, max_delay=3.0)

        self.assertEqual(config.get_delay(1), 1.0)
        self.assertEqual(config.get_delay(2), 2.0)
        self.assertEqual(config.get_delay(3), 3.0)

    def test_invalid_attempts(self):
        with self.assertRaises(ValueError):
            RetryConfig(max_attempts=0)


class TestErrorLogging(unittest.TestCase):
    """Test cases for log_error_details."""

    def test_logs_with_severity_level(self):
        logger = logging.getLogger('cn_admin_tree.tests.errors')
        context = create_error_context('load_lines', file_path='codes.txt')

        with self.assertLogs(logger, level='ERROR') as captured:
            log_error_details(logger, MalformedCodeError("bad code", code='1'), context)

        self.assertIn('High severity error', captured.output[0])
        self.assertEqual(context['operation'], 'load_lines')


if __name__ == '__main__':
    unittest.main()
