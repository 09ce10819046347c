"""
PATH: catalog/models/__init__.py

Catalog models export surface.
"""

from .batch import Batch
from .medical_center import MedicalCenter
from .medication import Medication
from .party import Person, Provider
from .warehouse import Warehouse

__all__ = [
    "Batch",
    "MedicalCenter",
    "Medication",
    "Person",
    "Provider",
    "Warehouse",
]
