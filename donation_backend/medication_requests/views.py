# medication_requests/views.py

"""
======================================================
PATH: medication_requests/views.py
======================================================
MEDICATION REQUEST VIEWSET

Purpose:
- Submit, list and inspect requests.
- Drive lifecycle transitions through RequestStateMachine.
- Edit requested medications and reviewer allocations through RequestEditor.

RULES:
- status is never written through a serializer save
- every write builds its engines from this request's PersistenceGateway
- domain errors propagate to common.api.errors.exception_handler
"""

from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from common.api.mixins import GatewayMixin
from medication_requests.models import MedicationRequest
from medication_requests.serializers import (
    DetailInputSerializer,
    DetailKeySerializer,
    MedicationRequestSerializer,
    RequestDetailSerializer,
    RequestedMedicationInputSerializer,
    RequestedMedicationSerializer,
    RequestedMedicationUpdateSerializer,
    RequestSubmitSerializer,
    TransitionSerializer,
)
from medication_requests.services.request_editing import RequestEditor
from medication_requests.services.request_state_machine import RequestStateMachine


class MedicationRequestViewSet(
    GatewayMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    serializer_class = MedicationRequestSerializer
    lookup_value_regex = r"\d+"
    permission_classes = [IsAuthenticated]
    filterset_fields = ["status", "beneficiary", "medical_center"]

    def get_queryset(self):
        return (
            MedicationRequest.objects.select_related("user", "beneficiary", "medical_center", "dispatch")
            .prefetch_related("requested_medications", "details__warehouse", "details__batch__medication")
        )

    def _state_machine(self) -> RequestStateMachine:
        return RequestStateMachine(self.get_gateway())

    def _editor(self) -> RequestEditor:
        return RequestEditor(self.get_gateway(), state_machine=self._state_machine())

    # -------------------------------------------------
    # SUBMIT
    # -------------------------------------------------
    def create(self, request, *args, **kwargs):
        """
        POST /api/requests/
        body: {pathology?, beneficiary_national_id?, medical_center?, medications: [{name, dosage?}]}
        """
        serializer = RequestSubmitSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        v = serializer.validated_data

        created = self._editor().submit_request(
            user=request.user,
            pathology=v.get("pathology", ""),
            medications=v.get("medications") or [],
            beneficiary_national_id=v.get("beneficiary_national_id"),
            medical_center_id=v.get("medical_center"),
        )
        return Response(MedicationRequestSerializer(created).data, status=status.HTTP_201_CREATED)

    # -------------------------------------------------
    # LIFECYCLE
    # -------------------------------------------------
    @action(detail=True, methods=["post"], url_path="transition")
    def transition(self, request, pk=None):
        """POST /api/requests/{n}/transition/  body: {status, observations?}"""
        serializer = TransitionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        v = serializer.validated_data

        updated = self._state_machine().transition(pk, v["status"], v.get("observations"))
        return Response(MedicationRequestSerializer(updated).data, status=status.HTTP_200_OK)

    @action(detail=True, methods=["post"], url_path="confirm")
    def confirm(self, request, pk=None):
        updated = self._state_machine().confirm(pk)
        return Response(MedicationRequestSerializer(updated).data, status=status.HTTP_200_OK)

    # -------------------------------------------------
    # REQUESTED MEDICATIONS
    # -------------------------------------------------
    @action(detail=True, methods=["post"], url_path="medications")
    def add_medication(self, request, pk=None):
        serializer = RequestedMedicationInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        item = self._editor().add_requested_medication(pk, **serializer.validated_data)
        return Response(RequestedMedicationSerializer(item).data, status=status.HTTP_201_CREATED)

    @action(
        detail=True,
        methods=["patch", "delete"],
        url_path=r"medications/(?P<item_id>\d+)",
    )
    def medication_item(self, request, pk=None, item_id=None):
        editor = self._editor()

        if request.method == "DELETE":
            editor.remove_requested_medication(pk, item_id)
            return Response(status=status.HTTP_204_NO_CONTENT)

        serializer = RequestedMedicationUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        item = editor.update_requested_medication(pk, item_id, **serializer.validated_data)
        return Response(RequestedMedicationSerializer(item).data, status=status.HTTP_200_OK)

    # -------------------------------------------------
    # ALLOCATIONS
    # -------------------------------------------------
    @action(detail=True, methods=["post", "delete"], url_path="details")
    def details(self, request, pk=None):
        """
        POST   /api/requests/{n}/details/  body: {warehouse, batch, quantity, dosage_instructions?, treatment_duration?}
        DELETE /api/requests/{n}/details/  body: {warehouse, batch}
        """
        editor = self._editor()

        if request.method == "DELETE":
            serializer = DetailKeySerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            v = serializer.validated_data
            editor.remove_detail(pk, warehouse_id=v["warehouse"], batch_code=v["batch"])
            return Response(status=status.HTTP_204_NO_CONTENT)

        serializer = DetailInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        v = serializer.validated_data

        detail = editor.add_detail(
            pk,
            warehouse_id=v["warehouse"],
            batch_code=v["batch"],
            quantity=v["quantity"],
            dosage_instructions=v.get("dosage_instructions", ""),
            treatment_duration=v.get("treatment_duration", ""),
        )
        detail = type(detail).objects.select_related("warehouse", "batch__medication").get(pk=detail.pk)
        return Response(RequestDetailSerializer(detail).data, status=status.HTTP_201_CREATED)
