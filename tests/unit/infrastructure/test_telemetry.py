"""Unit tests for LoggingTelemetry."""

import logging
import unittest

from scaffold_sentinel.infrastructure.telemetry import LoggingTelemetry


class TestLoggingTelemetry(unittest.TestCase):
    """Each TelemetryPort method maps onto one logging level."""

    def setUp(self) -> None:
        self.telemetry = LoggingTelemetry("scaffold_sentinel.test", "banner")

    def test_levels(self) -> None:
        """handshake and step log INFO, warning WARNING, error ERROR."""
        with self.assertLogs("scaffold_sentinel.test", level=logging.INFO) as logs:
            self.telemetry.handshake()
            self.telemetry.step("path=/p status=valid")
            self.telemetry.warning("file=x status=unreadable")
            self.telemetry.error("fix=y status=failed")
        self.assertEqual(
            [(r.levelno, r.getMessage()) for r in logs.records],
            [
                (logging.INFO, "banner"),
                (logging.INFO, "path=/p status=valid"),
                (logging.WARNING, "file=x status=unreadable"),
                (logging.ERROR, "fix=y status=failed"),
            ],
        )

    def test_default_logger_name(self) -> None:
        """Without a name the adapter logs under the package logger."""
        self.assertEqual(LoggingTelemetry().logger.name, "scaffold_sentinel")
