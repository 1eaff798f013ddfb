"""Tests for structured JSON logging."""

import json
import logging
import unittest

from utils.logging import JSONFormatter, setup_structured_logging


class TestJSONFormatter(unittest.TestCase):

    def _record(self, **extra) -> logging.LogRecord:
        record = logging.LogRecord(
            name="services.user_service", level=logging.INFO, pathname=__file__, lineno=1,
            msg="Preferences updated for %s", args=("user123",), exc_info=None,
        )
        for key, value in extra.items():
            setattr(record, key, value)
        return record

    def test_formats_standard_fields(self):
        data = json.loads(JSONFormatter().format(self._record()))

        self.assertEqual(data["level"], "INFO")
        self.assertEqual(data["logger"], "services.user_service")
        self.assertEqual(data["message"], "Preferences updated for user123")
        self.assertTrue(data["timestamp"].endswith("Z"))

    def test_includes_extra_fields(self):
        data = json.loads(JSONFormatter().format(self._record(userId="user123", keys=["theme"])))

        self.assertEqual(data["userId"], "user123")
        self.assertEqual(data["keys"], ["theme"])
        self.assertNotIn("args", data)

    def test_non_json_values_are_stringified(self):
        from decimal import Decimal

        data = json.loads(JSONFormatter().format(self._record(balance=Decimal("1.50"))))

        self.assertEqual(data["balance"], "1.50")


class TestSetupStructuredLogging(unittest.TestCase):

    def setUp(self):
        root = logging.getLogger()
        self._saved = (root.level, root.handlers[:])

    def tearDown(self):
        root = logging.getLogger()
        root.setLevel(self._saved[0])
        root.handlers = self._saved[1]

    def test_installs_json_handler_with_level(self):
        setup_structured_logging("warning")

        root = logging.getLogger()
        self.assertEqual(root.level, logging.WARNING)
        self.assertEqual(len(root.handlers), 1)
        self.assertIsInstance(root.handlers[0].formatter, JSONFormatter)


if __name__ == '__main__':
    unittest.main()
