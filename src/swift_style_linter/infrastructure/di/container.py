from typing import TYPE_CHECKING, Any, Optional, cast

from swift_style_linter.domain.config import PARSERS
from swift_style_linter.domain.exceptions import ConfigurationError
from swift_style_linter.domain.registry import RuleRegistry
from swift_style_linter.infrastructure.config_file_loader import ConfigFileLoader
from swift_style_linter.infrastructure.gateways.filesystem_gateway import FileSystemGateway
from swift_style_linter.infrastructure.gateways.sourcekitten_gateway import SourceKittenGateway
from swift_style_linter.infrastructure.gateways.swift_scanner import SwiftDeclarationScanner
from swift_style_linter.interface.telemetry import TyperTelemetry

if TYPE_CHECKING:
    from swift_style_linter.domain.protocols import (
        FileSystemProtocol,
        StructureParserProtocol,
        TelemetryPort,
    )


class SwiftStyleContainer:
    """Dependency Injection Container for the Swift style linter."""

    _instance: Optional["SwiftStyleContainer"] = None

    def __init__(self) -> None:
        self._singletons: dict[str, Any] = {}
        self._register_defaults()

    def _register_defaults(self) -> None:
        """Register default implementations for protocols."""
        self.register_singleton("TelemetryPort", TyperTelemetry())
        self.register_singleton("FileSystemGateway", FileSystemGateway())
        self.register_singleton("RuleRegistry", RuleRegistry())
        self.register_singleton("ConfigFileLoader", ConfigFileLoader())
        self.register_singleton("parser:scanner", SwiftDeclarationScanner())
        self.register_singleton("parser:sourcekitten", SourceKittenGateway())

    def register_singleton(self, key: str, instance: Any) -> None:
        """Register a singleton instance."""
        self._singletons[key] = instance

    def get(self, key: str) -> Any:
        """Retrieve a dependency by key. Prefer explicit get_* methods for type safety."""
        if key in self._singletons:
            return self._singletons[key]
        raise ValueError(f"Dependency '{key}' not registered.")

    def get_telemetry_port(self) -> "TelemetryPort":
        """Return the telemetry/UI port."""
        return cast("TelemetryPort", self.get("TelemetryPort"))

    def get_filesystem_gateway(self) -> "FileSystemProtocol":
        """Return the filesystem gateway."""
        return cast("FileSystemProtocol", self.get("FileSystemGateway"))

    def get_rule_registry(self) -> RuleRegistry:
        return cast(RuleRegistry, self.get("RuleRegistry"))

    def get_config_file_loader(self) -> ConfigFileLoader:
        return cast(ConfigFileLoader, self.get("ConfigFileLoader"))

    def get_parser(self, name: str) -> "StructureParserProtocol":
        """Return the structure parser registered under a configuration name."""
        if name not in PARSERS:
            raise ConfigurationError(f"unknown parser {name!r}")
        return cast("StructureParserProtocol", self.get(f"parser:{name}"))

    @classmethod
    def get_instance(cls) -> "SwiftStyleContainer":
        """Get or create global container instance."""
        if cls._instance is None:
            cls._instance = SwiftStyleContainer()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset the singleton instance (primarily for testing)."""
        cls._instance = None
