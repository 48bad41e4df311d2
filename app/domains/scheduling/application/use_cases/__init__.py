"""
Scheduling Use Cases

Application layer use cases for the scheduling domain.
"""

from app.domains.scheduling.application.use_cases.book_appointment import (
    BookAppointmentRequest,
    BookAppointmentResponse,
    BookAppointmentUseCase,
)
from app.domains.scheduling.application.use_cases.change_appointment_status import (
    AppointmentStatusResponse,
    ChangeAppointmentStatusUseCase,
)
from app.domains.scheduling.application.use_cases.get_available_slots import (
    AvailableSlotsResponse,
    GetAvailableSlotsUseCase,
)
from app.domains.scheduling.application.use_cases.manage_doctor_schedule import (
    AddContractRequest,
    AddScheduleTemplateRequest,
    ManageDoctorScheduleUseCase,
    RenewContractRequest,
    ScheduleChangeResponse,
)
from app.domains.scheduling.application.use_cases.reschedule_appointment import (
    RescheduleAppointmentRequest,
    RescheduleAppointmentResponse,
    RescheduleAppointmentUseCase,
)

__all__ = [
    # Book Appointment
    "BookAppointmentRequest",
    "BookAppointmentResponse",
    "BookAppointmentUseCase",
    # Reschedule
    "RescheduleAppointmentRequest",
    "RescheduleAppointmentResponse",
    "RescheduleAppointmentUseCase",
    # Status transitions
    "AppointmentStatusResponse",
    "ChangeAppointmentStatusUseCase",
    # Slots
    "AvailableSlotsResponse",
    "GetAvailableSlotsUseCase",
    # Doctor schedule
    "AddContractRequest",
    "AddScheduleTemplateRequest",
    "ManageDoctorScheduleUseCase",
    "RenewContractRequest",
    "ScheduleChangeResponse",
]
