# catalog/views.py

"""
CATALOG VIEWSETS

Thin CRUD over reference data consumed by the request, donation and
dispatch engines. No stock is mutated here.

RULES:
- Batches are immutable: create / read / delete only.
- Medication.global_available_quantity is read-only.
- Deleting a row that is still referenced returns 409 (ProtectedError).
"""

from rest_framework import permissions, viewsets

from catalog.models import Batch, MedicalCenter, Medication, Person, Provider, Warehouse
from catalog.serializers import (
    BatchSerializer,
    MedicalCenterSerializer,
    MedicationSerializer,
    PersonSerializer,
    ProviderSerializer,
    WarehouseSerializer,
)
from common.services.exceptions import ConflictError


class WarehouseViewSet(viewsets.ModelViewSet):
    queryset = Warehouse.objects.all()
    serializer_class = WarehouseSerializer
    permission_classes = [permissions.IsAuthenticated]
    filterset_fields = ["status"]


class MedicationViewSet(viewsets.ModelViewSet):
    queryset = Medication.objects.all()
    serializer_class = MedicationSerializer
    permission_classes = [permissions.IsAuthenticated]
    filterset_fields = ["status"]

    def get_queryset(self):
        qs = super().get_queryset()
        search = (self.request.query_params.get("search") or "").strip()
        if search:
            qs = qs.filter(name__icontains=search)
        return qs


class BatchViewSet(viewsets.ModelViewSet):
    queryset = Batch.objects.select_related("medication").all()
    serializer_class = BatchSerializer
    permission_classes = [permissions.IsAuthenticated]
    filterset_fields = ["medication"]
    http_method_names = ["get", "post", "delete", "head", "options"]


class PersonViewSet(viewsets.ModelViewSet):
    queryset = Person.objects.all()
    serializer_class = PersonSerializer
    permission_classes = [permissions.IsAuthenticated]


class ProviderViewSet(viewsets.ModelViewSet):
    queryset = Provider.objects.all()
    serializer_class = ProviderSerializer
    permission_classes = [permissions.IsAuthenticated]

    def perform_create(self, serializer):
        provider_id = serializer.validated_data["provider_id"]
        if Provider.objects.filter(pk=provider_id).exists():
            raise ConflictError(f"A provider with id {provider_id} already exists")
        serializer.save()

    def perform_update(self, serializer):
        serializer.validated_data.pop("provider_id", None)
        serializer.save()


class MedicalCenterViewSet(viewsets.ModelViewSet):
    queryset = MedicalCenter.objects.all()
    serializer_class = MedicalCenterSerializer
    permission_classes = [permissions.IsAuthenticated]
    filterset_fields = ["status"]
