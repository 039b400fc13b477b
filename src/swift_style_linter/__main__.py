"""Package entry point - composition root. Wire dependencies and run the CLI app."""

from swift_style_linter.infrastructure.di.container import SwiftStyleContainer
from swift_style_linter.interface.cli import CLIAppFactory, CLIDependencies


def main() -> None:
    """Entry point: wire dependencies at composition root, create app, run."""
    container = SwiftStyleContainer.get_instance()
    config_file_loader = container.get_config_file_loader()

    deps = CLIDependencies(
        telemetry=container.get_telemetry_port(),
        filesystem=container.get_filesystem_gateway(),
        registry=container.get_rule_registry(),
        load_config=config_file_loader.load_config_from_fs,
        get_parser=container.get_parser,
    )

    app = CLIAppFactory.create_app(deps)
    app()


if __name__ == "__main__":
    main()
