# dispatches/serializers.py

from rest_framework import serializers

from dispatches.models import Dispatch


class DispatchSerializer(serializers.ModelSerializer):
    request_status = serializers.CharField(source="request.status", read_only=True)
    dispatched_by = serializers.EmailField(source="dispatched_by.email", read_only=True, default=None)

    class Meta:
        model = Dispatch
        fields = [
            "number",
            "request",
            "request_status",
            "receiver",
            "dispatched_by",
            "dispatched_at",
        ]
        read_only_fields = fields


class DispatchCreateSerializer(serializers.Serializer):
    request = serializers.IntegerField(min_value=1)
    receiver_national_id = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class DispatchReceiverSerializer(serializers.Serializer):
    receiver_national_id = serializers.CharField(allow_blank=True, allow_null=True)
