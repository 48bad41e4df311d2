from typing import Any

from pydantic import Field, computed_field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Configuración de la aplicación utilizando Pydantic BaseSettings.
    Carga automáticamente las variables de entorno.
    """

    PROJECT_NAME: str = "Clinic Scheduling"
    VERSION: str = "0.1.0"

    # PostgreSQL Database Settings
    DB_HOST: str = Field("localhost", description="Host de PostgreSQL")
    DB_PORT: int = Field(5432, description="Puerto de PostgreSQL")
    DB_NAME: str = Field("clinic", description="Nombre de la base de datos")
    DB_USER: str = Field("clinic", description="Usuario de PostgreSQL")
    DB_PASSWORD: str | None = Field(None, description="Contraseña de PostgreSQL")
    DB_ECHO: bool = Field(False, description="Log SQL queries (solo para debug)")

    # Database connection pool settings
    DB_POOL_SIZE: int = Field(20, description="Tamaño del pool de conexiones")
    DB_MAX_OVERFLOW: int = Field(30, description="Máximo overflow del pool")
    DB_POOL_RECYCLE: int = Field(3600, description="Reciclar conexiones cada X segundos")
    DB_POOL_TIMEOUT: int = Field(30, description="Timeout para obtener conexión del pool")

    # Scheduling policy
    APPOINTMENT_BUFFER_MINUTES: int = Field(5, description="Margen entre turnos del mismo médico (minutos)")
    APPOINTMENT_MIN_DURATION_MINUTES: int = Field(15, description="Duración mínima de un turno (minutos)")
    APPOINTMENT_MAX_DURATION_MINUTES: int = Field(180, description="Duración máxima de un turno (minutos)")
    DEFAULT_APPOINTMENT_DURATION_MINUTES: int = Field(
        30, description="Duración asumida cuando un turno no tiene hora de fin"
    )
    MAX_DAILY_APPOINTMENTS_PER_PATIENT: int = Field(3, description="Turnos activos por paciente por día")
    MAX_MONTHLY_APPOINTMENTS_PER_PATIENT: int = Field(10, description="Turnos activos por paciente por mes")
    ENFORCE_PATIENT_LIMITS: bool = Field(True, description="Aplicar límites de frecuencia por paciente")
    BOOKING_HORIZON_MONTHS: int = Field(6, description="Meses hacia adelante en que se puede reservar")
    ALTERNATIVE_SLOTS_WINDOW_MINUTES: int = Field(
        120, description="Ventana para sugerir horarios alternativos (minutos)"
    )
    MAX_ALTERNATIVE_SLOTS: int = Field(5, description="Cantidad máxima de horarios alternativos sugeridos")

    # Catalog cache
    CATALOG_CACHE_TTL_SECONDS: int = Field(900, description="TTL del cache de contratos y horarios (segundos)")
    CATALOG_CACHE_MAX_SIZE: int = Field(1000, description="Cantidad máxima de entradas en el cache")

    # Logging
    LOG_LEVEL: str = Field("INFO", description="Nivel de logging")
    LOG_JSON: bool = Field(False, description="Emitir logs en formato JSON")

    # Application Settings
    DEBUG: bool = Field(False, description="Modo de depuración")
    ENVIRONMENT: str = Field("production", description="Entorno de ejecución")

    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignorar campos extras en lugar de generar un error
    )

    def __init__(self, **data: Any):
        super().__init__(**data)

    @field_validator("DB_POOL_SIZE")
    @classmethod
    def validate_pool_size(cls, v):
        if v < 1:
            raise ValueError("DB_POOL_SIZE must be at least 1")
        if v > 100:
            raise ValueError("DB_POOL_SIZE should not exceed 100")
        return v

    @field_validator("DB_MAX_OVERFLOW")
    @classmethod
    def validate_max_overflow(cls, v):
        if v < 0:
            raise ValueError("DB_MAX_OVERFLOW must be 0 or greater")
        if v > 200:
            raise ValueError("DB_MAX_OVERFLOW should not exceed 200")
        return v

    @field_validator("APPOINTMENT_BUFFER_MINUTES", "BOOKING_HORIZON_MONTHS")
    @classmethod
    def validate_non_negative(cls, v):
        if v < 0:
            raise ValueError("Value must be 0 or greater")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v):
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid LOG_LEVEL: {v}")
        return level

    @model_validator(mode="after")
    def validate_duration_bounds(self):
        if self.APPOINTMENT_MIN_DURATION_MINUTES < 1:
            raise ValueError("APPOINTMENT_MIN_DURATION_MINUTES must be positive")
        if self.APPOINTMENT_MIN_DURATION_MINUTES > self.APPOINTMENT_MAX_DURATION_MINUTES:
            raise ValueError("APPOINTMENT_MIN_DURATION_MINUTES cannot exceed APPOINTMENT_MAX_DURATION_MINUTES")
        return self

    @computed_field
    @property
    def database_url(self) -> str:
        """Construye la URL de conexión a PostgreSQL"""
        if self.DB_PASSWORD:
            return f"postgresql://{self.DB_USER}:{self.DB_PASSWORD}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        return f"postgresql://{self.DB_USER}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"

    @computed_field
    @property
    def is_development(self) -> bool:
        """Determina si está en modo desarrollo"""
        return self.DEBUG or self.ENVIRONMENT.lower() in ["development", "dev", "local"]

    @computed_field
    @property
    def database_config(self) -> dict:
        """Configuración optimizada para la base de datos según el entorno"""
        base_config = {
            "echo": self.DB_ECHO,
            "pool_pre_ping": True,
        }

        if self.is_development:
            return {
                **base_config,
                "poolclass": "NullPool",
            }
        return {
            **base_config,
            "pool_size": self.DB_POOL_SIZE,
            "max_overflow": self.DB_MAX_OVERFLOW,
            "pool_recycle": self.DB_POOL_RECYCLE,
            "pool_timeout": self.DB_POOL_TIMEOUT,
        }


# Singleton para configuración
_settings_instance = None


def get_settings() -> Settings:
    """
    Retorna una instancia cacheada de la configuración.
    Esto evita cargar las variables de entorno múltiples veces.
    """
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
