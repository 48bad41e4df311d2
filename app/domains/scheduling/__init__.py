"""
Scheduling Bounded Context

Appointment slot allocation and conflict validation for the clinic:
doctors, contracts, weekly working hours and appointments.
"""
