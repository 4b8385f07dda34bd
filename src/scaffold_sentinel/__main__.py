"""Package entry point - composition root. Wire dependencies and run the CLI app."""

import os

from scaffold_sentinel.infrastructure.di.container import SentinelContainer
from scaffold_sentinel.infrastructure.telemetry import configure_logging
from scaffold_sentinel.interface.cli import CLIAppFactory, CLIDependencies


def main() -> None:
    """Entry point: wire dependencies at composition root, create app, run."""
    configure_logging(verbose=bool(os.environ.get("SENTINEL_VERBOSE")))
    container = SentinelContainer()
    deps = CLIDependencies(
        orchestrator=container.get_orchestrator(),
        pre_generation_gate=container.get_pre_generation_gate(),
        telemetry=container.get_telemetry_port(),
    )
    app = CLIAppFactory.create_app(deps)
    app()


if __name__ == "__main__":
    main()
