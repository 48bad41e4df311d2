"""
Patient Directory Port
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class IPatientDirectory(Protocol):
    """Optional patient existence check used by the validator."""

    async def exists(self, patient_id: int) -> bool:
        ...
