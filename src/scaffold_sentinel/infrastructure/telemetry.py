"""Logging-backed TelemetryPort."""

import logging

from scaffold_sentinel.domain.protocols import TelemetryPort

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def configure_logging(verbose: bool = False) -> None:
    """Root handler for command-line runs. Library use leaves logging alone."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
    )


class LoggingTelemetry(TelemetryPort):
    """Routes telemetry through the `scaffold_sentinel` logger hierarchy."""

    def __init__(self, name: str = "scaffold_sentinel", banner: str = "Scaffold Sentinel online") -> None:
        self.logger = logging.getLogger(name)
        self.banner = banner

    def step(self, message: str) -> None:
        self.logger.info(message)

    def error(self, message: str) -> None:
        self.logger.error(message)

    def warning(self, message: str) -> None:
        self.logger.warning(message)

    def handshake(self) -> None:
        self.logger.info(self.banner)
