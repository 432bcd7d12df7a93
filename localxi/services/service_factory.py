"""
Service Factory for dependency injection.

This module provides a factory for creating properly configured service
instances with their dependencies injected.
"""
from typing import Optional

from ..utils.config import LineupConfig
from .catalog_service import JsonCatalog
from .lineup_service import LineupService
from .persistence_service import JsonFileLineupGateway, LineupGateway


class ServiceFactory:
    """
    Factory for creating service instances with proper dependency injection.

    Catalog and gateway are created once and shared by every service the
    factory hands out.
    """

    def __init__(self, config: Optional[LineupConfig] = None):
        """Initialize factory with a configuration (environment by default)."""
        self.config = config or LineupConfig.from_env()
        self._catalog: Optional[JsonCatalog] = None
        self._gateway: Optional[LineupGateway] = None

    def create_lineup_service(self) -> LineupService:
        """
        Create LineupService with injected dependencies.

        Returns:
            Configured LineupService instance
        """
        return LineupService(
            catalog=self.get_catalog(),
            gateway=self.get_gateway(),
            config=self.config,
        )

    def get_catalog(self) -> JsonCatalog:
        """Get singleton catalog."""
        if self._catalog is None:
            self._catalog = JsonCatalog(self.config.data_dir)
        return self._catalog

    def get_gateway(self) -> LineupGateway:
        """Get singleton lineup gateway."""
        if self._gateway is None:
            self._gateway = JsonFileLineupGateway(self.config.data_dir)
        return self._gateway

    def configure_custom_gateway(self, gateway: LineupGateway) -> None:
        """Swap in another gateway, e.g. an in-memory one for tests."""
        self._gateway = gateway
