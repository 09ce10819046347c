# dispatches/views.py

"""
DISPATCH VIEWSET

- POST   creates a dispatch (status change + stock debit, one transaction)
- PATCH  changes only the receiver
- DELETE reverses the dispatch (stock re-credit + request back to APROBADA)
"""

from rest_framework import mixins, status, viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from common.api.mixins import GatewayMixin
from dispatches.models import Dispatch
from dispatches.serializers import (
    DispatchCreateSerializer,
    DispatchReceiverSerializer,
    DispatchSerializer,
)
from dispatches.services.dispatch_engine import DispatchEngine


class DispatchViewSet(
    GatewayMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    serializer_class = DispatchSerializer
    permission_classes = [IsAuthenticated]
    lookup_value_regex = r"\d+"
    filterset_fields = ["request", "receiver"]
    http_method_names = ["get", "post", "patch", "delete", "head", "options"]

    def get_queryset(self):
        return Dispatch.objects.select_related("request", "receiver", "dispatched_by")

    def _engine(self) -> DispatchEngine:
        return DispatchEngine(self.get_gateway())

    def _payload(self, dispatch_number):
        return DispatchSerializer(self.get_queryset().get(pk=dispatch_number)).data

    def create(self, request, *args, **kwargs):
        """POST /api/dispatches/  body: {request, receiver_national_id?}"""
        serializer = DispatchCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        v = serializer.validated_data

        dispatch = self._engine().create_dispatch(
            v["request"],
            v.get("receiver_national_id"),
            user=request.user,
        )
        return Response(self._payload(dispatch.number), status=status.HTTP_201_CREATED)

    def partial_update(self, request, pk=None):
        serializer = DispatchReceiverSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        dispatch = self._engine().update_receiver(pk, serializer.validated_data["receiver_national_id"])
        return Response(self._payload(dispatch.number), status=status.HTTP_200_OK)

    def destroy(self, request, pk=None):
        self._engine().delete_dispatch(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)
