"""
PATH: medication_requests/models/__init__.py
"""

from .request import MedicationRequest, RequestStatus
from .request_detail import RequestDetail
from .requested_medication import RequestedMedication

__all__ = [
    "MedicationRequest",
    "RequestDetail",
    "RequestStatus",
    "RequestedMedication",
]
