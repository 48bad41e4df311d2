from app.domains.scheduling.infrastructure.persistence.sqlalchemy.models import (
    AppointmentModel,
    DoctorContractModel,
    DoctorModel,
    ScheduleTemplateModel,
)

__all__ = ["AppointmentModel", "DoctorContractModel", "DoctorModel", "ScheduleTemplateModel"]
