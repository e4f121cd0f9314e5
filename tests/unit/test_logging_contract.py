# PATH: tests/unit/test_logging_contract.py
"""
Tests for logging contract enforcement.

No kwargs to logger; contextual fields only via extra={"context": {...}}.
"""

import ast
import json
import logging
import os
import unittest
from pathlib import Path
from typing import Any, Dict, List

from core.logging import (
    ConsoleFormatter,
    JSONFormatter,
    clear_global_context,
    get_logger,
    log_error,
    set_global_context,
)

PROJECT_ROOT = Path(__file__).parent.parent.parent
SOURCE_DIRS = ["core", "chains", "dex", "execution", "strategy", "config"]


class TestLoggingContractEnforcement(unittest.TestCase):
    """AST-based tests for logging contract."""

    ALLOWED_KWARGS = {"exc_info", "extra", "stack_info", "stacklevel"}

    def _find_logger_violations(self, source_code: str) -> List[Dict[str, Any]]:
        """Find logger calls with invalid kwargs using AST."""
        violations = []
        tree = ast.parse(source_code)

        for node in ast.walk(tree):
            if not isinstance(node, ast.Call) or not isinstance(node.func, ast.Attribute):
                continue

            method_name = node.func.attr
            if method_name not in ("debug", "info", "warning", "error", "critical", "exception"):
                continue

            obj = node.func.value
            if isinstance(obj, ast.Name):
                is_logger = "log" in obj.id.lower()
            elif isinstance(obj, ast.Attribute):
                is_logger = "log" in obj.attr.lower()
            else:
                is_logger = False
            if not is_logger:
                continue

            for kw in node.keywords:
                if kw.arg and kw.arg not in self.ALLOWED_KWARGS:
                    violations.append({
                        "line": node.lineno,
                        "method": method_name,
                        "invalid_kwarg": kw.arg,
                    })

        return violations

    def test_no_invalid_kwargs_in_source(self):
        """Every logger call in the packages uses extra= for context."""
        messages = []
        for directory in SOURCE_DIRS:
            for root, _dirs, files in os.walk(PROJECT_ROOT / directory):
                for name in files:
                    if not name.endswith(".py"):
                        continue
                    path = Path(root) / name
                    source = path.read_text(encoding="utf-8")
                    for v in self._find_logger_violations(source):
                        messages.append(
                            f"{path.relative_to(PROJECT_ROOT)}:{v['line']}: "
                            f"logger.{v['method']}(..., {v['invalid_kwarg']}=...)"
                        )
        if messages:
            self.fail("Logging violations:\n" + "\n".join(messages))

    def test_detector_catches_violation(self):
        violations = self._find_logger_violations('logger.info("x", input_mint="abc")\n')
        self.assertEqual(len(violations), 1)
        self.assertEqual(violations[0]["invalid_kwarg"], "input_mint")


class TestLoggingContextCapture(unittest.TestCase):
    """Context is captured in log records and rendered by the formatters."""

    def setUp(self):
        self.captured_records = []

        class CapturingHandler(logging.Handler):
            def __init__(self, records_list):
                super().__init__()
                self.records = records_list

            def emit(self, record):
                self.records.append(record)

        self.logger_name = f"test_capture_{id(self)}"
        base = logging.getLogger(self.logger_name)
        base.setLevel(logging.DEBUG)
        base.handlers = []
        base.propagate = False
        base.addHandler(CapturingHandler(self.captured_records))

    def tearDown(self):
        clear_global_context()

    def test_adapter_merges_default_context(self):
        logger = get_logger(self.logger_name, component="fees")
        logger.info("Sampled", extra={"context": {"samples": 150}})

        record = self.captured_records[0]
        self.assertEqual(record.context, {"component": "fees", "samples": 150})

    def test_log_error_sets_error_code(self):
        log_error(get_logger(self.logger_name), "UPSTREAM_REJECTED", "Jupiter quote failed", status_code=500)

        record = self.captured_records[0]
        self.assertEqual(record.levelno, logging.ERROR)
        self.assertEqual(record.context["error_code"], "UPSTREAM_REJECTED")
        self.assertEqual(record.context["status_code"], 500)
        self.assertIn("[UPSTREAM_REJECTED]", record.getMessage())

    def test_json_formatter_includes_global_context(self):
        set_global_context(service="swapsim-test")
        get_logger(self.logger_name).warning("Fallback", extra={"context": {"fallback": True}})

        entry = json.loads(JSONFormatter().format(self.captured_records[0]))

        self.assertEqual(entry["level"], "WARNING")
        self.assertEqual(entry["message"], "Fallback")
        self.assertEqual(entry["context"]["service"], "swapsim-test")
        self.assertTrue(entry["context"]["fallback"])

    def test_console_formatter_truncates_context(self):
        get_logger(self.logger_name).info("Many", extra={"context": {"a": 1, "b": 2, "c": 3, "d": 4}})

        line = ConsoleFormatter().format(self.captured_records[0])

        self.assertIn("a=1", line)
        self.assertIn("+1 more", line)


if __name__ == "__main__":
    unittest.main()
