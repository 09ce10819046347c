# donations/views.py

"""
DONATION VIEWSET

Every write goes through DonationIntakeEngine so stock and donation rows
always move together.
"""

from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from common.api.mixins import GatewayMixin
from donations.models import Donation
from donations.serializers import (
    DonationCreateSerializer,
    DonationLinesSerializer,
    DonationSerializer,
)
from donations.services.donation_intake import DonationIntakeEngine


class DonationViewSet(
    GatewayMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    serializer_class = DonationSerializer
    permission_classes = [IsAuthenticated]
    lookup_value_regex = r"\d+"
    filterset_fields = ["provider"]

    def get_queryset(self):
        return Donation.objects.select_related("provider").prefetch_related("lines__batch")

    def _engine(self) -> DonationIntakeEngine:
        return DonationIntakeEngine(self.get_gateway())

    def _payload(self, donation_number):
        return DonationSerializer(self.get_queryset().get(pk=donation_number)).data

    def create(self, request, *args, **kwargs):
        """POST /api/donations/  body: {provider?, description?, lines: [{warehouse, batch, quantity}]}"""
        serializer = DonationCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        v = serializer.validated_data

        donation = self._engine().create_donation(
            provider_id=v.get("provider"),
            description=v.get("description", ""),
            lines=[dict(line) for line in v["lines"]],
            user=request.user,
        )
        return Response(self._payload(donation.number), status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["post"], url_path="lines")
    def add_lines(self, request, pk=None):
        serializer = DonationLinesSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        donation = self._engine().add_lines(pk, [dict(line) for line in serializer.validated_data["lines"]])
        return Response(self._payload(donation.number), status=status.HTTP_200_OK)

    def destroy(self, request, pk=None):
        self._engine().delete_donation(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)
