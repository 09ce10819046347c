# donations/serializers.py

from rest_framework import serializers

from donations.models import Donation, DonationMedication


class DonationMedicationSerializer(serializers.ModelSerializer):
    medication = serializers.CharField(source="batch.medication_id", read_only=True)

    class Meta:
        model = DonationMedication
        fields = ["id", "warehouse", "batch", "medication", "quantity", "created_at"]
        read_only_fields = fields


class DonationSerializer(serializers.ModelSerializer):
    lines = DonationMedicationSerializer(many=True, read_only=True)
    provider_name = serializers.CharField(source="provider.name", read_only=True, default=None)

    class Meta:
        model = Donation
        fields = [
            "number",
            "provider",
            "provider_name",
            "description",
            "received_at",
            "created_at",
            "lines",
        ]
        read_only_fields = fields


# ---------------- INPUT ----------------


class DonationLineInputSerializer(serializers.Serializer):
    warehouse = serializers.IntegerField()
    batch = serializers.CharField(max_length=64)
    quantity = serializers.IntegerField()


class DonationCreateSerializer(serializers.Serializer):
    provider = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    lines = DonationLineInputSerializer(many=True, allow_empty=True)


class DonationLinesSerializer(serializers.Serializer):
    lines = DonationLineInputSerializer(many=True, allow_empty=True)
