# ============================================================================
# SCOPE: GLOBAL
# Description: Contenedor base con singletons compartidos (settings, política
#              de agenda, caché del catálogo de médicos).
# ============================================================================
"""
Base Container - Shared Singletons.

Single Responsibility: Manage process-wide resources (settings, policy, catalog cache).
"""

import logging
from dataclasses import asdict

from app.config.settings import Settings, get_settings
from app.core.shared.cache import MemoryCache
from app.domains.scheduling.domain.services.scheduling_policy import SchedulingPolicy
from app.domains.scheduling.infrastructure.cache import CatalogCacheInvalidator

logger = logging.getLogger(__name__)


class BaseContainer:
    """
    Base container for shared singletons.

    Single Responsibility: Create and cache shared resources.
    """

    def __init__(self, settings: Settings | None = None):
        """
        Initialize base container.

        Args:
            settings: Optional settings instance (defaults to get_settings())
        """
        self.settings = settings or get_settings()

        # Singletons
        self._policy: SchedulingPolicy | None = None
        self._catalog_cache: MemoryCache | None = None
        self._invalidator: CatalogCacheInvalidator | None = None

        logger.info("BaseContainer initialized")

    def get_policy(self) -> SchedulingPolicy:
        """Get scheduling policy built from settings (singleton)."""
        if self._policy is None:
            self._policy = SchedulingPolicy.from_settings(self.settings)
            logger.info(
                f"Scheduling policy: buffer={self._policy.buffer_minutes}min, "
                f"limits={self._policy.max_daily_per_patient}/day "
                f"{self._policy.max_monthly_per_patient}/month"
            )
        return self._policy

    def get_catalog_cache(self) -> MemoryCache:
        """
        Get doctor catalog cache (singleton).

        The first call also subscribes the cache invalidator to
        DoctorAvailabilityChanged.
        """
        if self._catalog_cache is None:
            self._catalog_cache = MemoryCache(
                max_size=self.settings.CATALOG_CACHE_MAX_SIZE,
                default_ttl=self.settings.CATALOG_CACHE_TTL_SECONDS,
            )
            self._invalidator = CatalogCacheInvalidator(self._catalog_cache)
            self._invalidator.subscribe()
            logger.info(f"Catalog cache created (ttl={self.settings.CATALOG_CACHE_TTL_SECONDS}s)")
        return self._catalog_cache

    def get_config(self) -> dict:
        """Get current configuration."""
        return {
            "environment": self.settings.ENVIRONMENT,
            "policy": asdict(self.get_policy()),
            "catalog_cache_ttl": self.settings.CATALOG_CACHE_TTL_SECONDS,
            "domains": ["scheduling"],
        }
