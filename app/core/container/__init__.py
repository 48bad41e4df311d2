# ============================================================================
# SCOPE: GLOBAL
# Description: Contenedor principal de inyección de dependencias (singleton).
#              Compone los sub-contenedores de dominio.
# ============================================================================
"""
Dependency Injection Container.

Centralized container for creating and managing all application dependencies.
Implements Dependency Inversion Principle by wiring concrete implementations to interfaces.

This module is the facade that composes all domain-specific containers.
"""

from __future__ import annotations

import logging

from app.config.settings import Settings
from app.core.shared.logger import configure_logging_from_settings
from app.domains.scheduling.application.ports import IPatientDirectory

from .base import BaseContainer
from .scheduling import SchedulingContainer

logger = logging.getLogger(__name__)


class DependencyContainer:
    """
    Dependency Injection Container (Facade).

    Single Responsibility: Compose and delegate to domain-specific containers.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        patient_directory: IPatientDirectory | None = None,
    ):
        """
        Initialize container with all domain sub-containers.

        Args:
            settings: Optional settings (defaults to get_settings())
            patient_directory: Optional patient existence check for the validator
        """
        # Base container with singletons
        self._base = BaseContainer(settings)
        configure_logging_from_settings(self._base.settings)

        # Domain containers
        self._scheduling = SchedulingContainer(self._base, patient_directory=patient_directory)

        logger.info("DependencyContainer initialized with all domain containers")

    @property
    def settings(self) -> Settings:
        return self._base.settings

    @property
    def scheduling(self) -> SchedulingContainer:
        """Direct access to the scheduling container."""
        return self._scheduling

    def get_config(self) -> dict:
        """Get current configuration."""
        return self._base.get_config()

    # ============================================================
    # SCHEDULING (delegated to SchedulingContainer)
    # ============================================================

    def create_appointment_repository(self, db):
        return self._scheduling.create_appointment_repository(db)

    def create_doctor_catalog(self, db):
        return self._scheduling.create_doctor_catalog(db)

    def create_book_appointment_use_case(self, db):
        return self._scheduling.create_book_appointment_use_case(db)

    def create_reschedule_appointment_use_case(self, db):
        return self._scheduling.create_reschedule_appointment_use_case(db)

    def create_change_appointment_status_use_case(self, db):
        return self._scheduling.create_change_appointment_status_use_case(db)

    def create_get_available_slots_use_case(self, db):
        return self._scheduling.create_get_available_slots_use_case(db)

    def create_manage_doctor_schedule_use_case(self, db):
        return self._scheduling.create_manage_doctor_schedule_use_case(db)


# ============================================================
# GLOBAL CONTAINER INSTANCE
# ============================================================

_container: DependencyContainer | None = None


def get_container(settings: Settings | None = None) -> DependencyContainer:
    """
    Get global container instance (singleton).

    Args:
        settings: Optional settings (only used on first call)

    Returns:
        DependencyContainer instance
    """
    global _container

    if _container is None:
        logger.info("Initializing global DependencyContainer")
        _container = DependencyContainer(settings)
    elif settings is not None:
        logger.warning(
            "Container already initialized, ignoring new settings. "
            "Call reset_container() first to change settings."
        )

    return _container


def reset_container() -> None:
    """
    Reset global container instance.

    Useful for testing or reconfiguration.
    """
    global _container
    logger.info("Resetting global DependencyContainer")
    _container = None


__all__ = [
    # Main container
    "DependencyContainer",
    # Global functions
    "get_container",
    "reset_container",
    # Sub-containers (for advanced usage)
    "BaseContainer",
    "SchedulingContainer",
]
