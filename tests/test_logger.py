#!/usr/bin/env python3
"""
Package logger tests.
"""

import os
import sys
import unittest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))
from rksd_assistant.utils.logger import get_logger


class TestGetLogger(unittest.TestCase):
    def test_default_is_package_logger(self):
        self.assertEqual(get_logger().name, "rksd_assistant")

    def test_named_logger_is_child(self):
        tts_logger = get_logger("tts")
        self.assertEqual(tts_logger.name, "rksd_assistant.tts")
        self.assertIs(tts_logger.parent, get_logger())

    def test_child_records_reach_package_logger(self):
        with self.assertLogs("rksd_assistant", level="INFO") as cm:
            get_logger("storage").info("Seeded college_info table with %d facts", 5)
        self.assertEqual(cm.records[0].name, "rksd_assistant.storage")
        self.assertEqual(cm.records[0].getMessage(), "Seeded college_info table with 5 facts")


if __name__ == "__main__":
    unittest.main()
