# medication_requests/serializers.py

from rest_framework import serializers

from medication_requests.models import (
    MedicationRequest,
    RequestDetail,
    RequestedMedication,
    RequestStatus,
)

# ---------------- OUTPUT ----------------


class RequestedMedicationSerializer(serializers.ModelSerializer):
    class Meta:
        model = RequestedMedication
        fields = ["id", "name", "dosage", "created_at"]
        read_only_fields = fields


class RequestDetailSerializer(serializers.ModelSerializer):
    warehouse_name = serializers.CharField(source="warehouse.name", read_only=True)
    medication = serializers.CharField(source="batch.medication_id", read_only=True)
    medication_name = serializers.CharField(source="batch.medication.name", read_only=True)
    expires_on = serializers.DateField(source="batch.expires_on", read_only=True)

    class Meta:
        model = RequestDetail
        fields = [
            "id",
            "warehouse",
            "warehouse_name",
            "batch",
            "medication",
            "medication_name",
            "expires_on",
            "quantity",
            "dosage_instructions",
            "treatment_duration",
        ]
        read_only_fields = fields


class MedicationRequestSerializer(serializers.ModelSerializer):
    user = serializers.EmailField(source="user.email", read_only=True)
    requested_medications = RequestedMedicationSerializer(many=True, read_only=True)
    details = RequestDetailSerializer(many=True, read_only=True)
    dispatch = serializers.SerializerMethodField()

    class Meta:
        model = MedicationRequest
        fields = [
            "number",
            "user",
            "beneficiary",
            "medical_center",
            "pathology",
            "status",
            "observations",
            "created_at",
            "updated_at",
            "requested_medications",
            "details",
            "dispatch",
        ]
        read_only_fields = fields

    def get_dispatch(self, obj):
        # Reverse one-to-one raises when absent; hasattr absorbs that.
        if not hasattr(obj, "dispatch"):
            return None
        return {
            "number": obj.dispatch.number,
            "receiver": obj.dispatch.receiver_id,
            "dispatched_at": obj.dispatch.dispatched_at,
        }


# ---------------- INPUT ----------------


class RequestedMedicationInputSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    dosage = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")


class RequestedMedicationUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255, required=False)
    dosage = serializers.CharField(max_length=255, required=False, allow_blank=True)


class RequestSubmitSerializer(serializers.Serializer):
    pathology = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    beneficiary_national_id = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    medical_center = serializers.IntegerField(required=False, allow_null=True)
    medications = RequestedMedicationInputSerializer(many=True, required=False)


class TransitionSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=RequestStatus.choices)
    observations = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class DetailInputSerializer(serializers.Serializer):
    warehouse = serializers.IntegerField()
    batch = serializers.CharField(max_length=64)
    quantity = serializers.IntegerField()
    dosage_instructions = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    treatment_duration = serializers.CharField(max_length=120, required=False, allow_blank=True, default="")


class DetailKeySerializer(serializers.Serializer):
    warehouse = serializers.IntegerField()
    batch = serializers.CharField(max_length=64)
