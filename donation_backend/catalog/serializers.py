# catalog/serializers.py

from rest_framework import serializers

from catalog.models import Batch, MedicalCenter, Medication, Person, Provider, Warehouse
from common.services.exceptions import ConflictError
from common.validators import normalize_national_id, normalize_provider_id


class WarehouseSerializer(serializers.ModelSerializer):
    class Meta:
        model = Warehouse
        fields = [
            "id",
            "name",
            "address",
            "phone",
            "email",
            "status",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["created_at", "updated_at"]


class MedicationSerializer(serializers.ModelSerializer):
    """
    global_available_quantity is ledger-managed; clients can read it, never write it.
    """

    is_active = serializers.ReadOnlyField()

    class Meta:
        model = Medication
        fields = [
            "code",
            "name",
            "description",
            "main_compound",
            "status",
            "is_active",
            "global_available_quantity",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["global_available_quantity", "created_at", "updated_at"]

    def update(self, instance, validated_data):
        validated_data.pop("code", None)
        return super().update(instance, validated_data)


class BatchSerializer(serializers.ModelSerializer):
    is_expired = serializers.ReadOnlyField()
    medication_name = serializers.CharField(source="medication.name", read_only=True)

    class Meta:
        model = Batch
        fields = [
            "code",
            "medication",
            "medication_name",
            "manufactured_on",
            "expires_on",
            "is_expired",
            "created_at",
        ]
        read_only_fields = ["created_at"]

    def validate(self, attrs):
        manufactured_on = attrs.get("manufactured_on")
        expires_on = attrs.get("expires_on")
        if manufactured_on and expires_on and manufactured_on > expires_on:
            raise serializers.ValidationError(
                {"manufactured_on": "manufactured_on cannot be after expires_on"}
            )
        return attrs


class PersonSerializer(serializers.ModelSerializer):
    # Accepts dashed input ("001-1234567-8"); stored as 11 bare digits.
    national_id = serializers.CharField(max_length=20)
    full_name = serializers.ReadOnlyField()

    class Meta:
        model = Person
        fields = [
            "national_id",
            "first_name",
            "last_name",
            "full_name",
            "sex",
            "birth_date",
            "phone",
            "address",
            "created_at",
        ]
        read_only_fields = ["created_at"]

    def validate_national_id(self, value):
        cleaned = normalize_national_id(value)
        if cleaned is None:
            raise serializers.ValidationError("National ID must be exactly 11 digits.")
        if self.instance is None and Person.objects.filter(pk=cleaned).exists():
            raise ConflictError(f"A person with national ID {cleaned} already exists")
        return cleaned

    def update(self, instance, validated_data):
        validated_data.pop("national_id", None)
        return super().update(instance, validated_data)


class ProviderSerializer(serializers.ModelSerializer):
    provider_id = serializers.CharField(max_length=20)

    class Meta:
        model = Provider
        fields = [
            "provider_id",
            "name",
            "phone",
            "email",
            "address",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["created_at", "updated_at"]

    def validate_provider_id(self, value):
        cleaned = normalize_provider_id(value)
        if cleaned is None:
            raise serializers.ValidationError(
                "Provider id must be a 9-digit RNC or an 11-digit national ID."
            )
        return cleaned

    def update(self, instance, validated_data):
        validated_data.pop("provider_id", None)
        return super().update(instance, validated_data)


class MedicalCenterSerializer(serializers.ModelSerializer):
    class Meta:
        model = MedicalCenter
        fields = ["id", "name", "address", "status"]
