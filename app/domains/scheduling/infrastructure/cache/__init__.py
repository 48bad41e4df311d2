from app.domains.scheduling.infrastructure.cache.cached_doctor_catalog import (
    CachedDoctorCatalog,
    CatalogCacheInvalidator,
    doctor_cache_prefix,
)

__all__ = ["CachedDoctorCatalog", "CatalogCacheInvalidator", "doctor_cache_prefix"]
