from rest_framework import serializers

from records.models import Consultation
from records.serializers.common import clean_text

TYPES = [c for c, _ in Consultation.TYPE_CHOICES]
STATUSES = [c for c, _ in Consultation.STATUS_CHOICES]


class ConsultationCreateSerializer(serializers.Serializer):
    patientId = serializers.IntegerField(min_value=1)
    date = serializers.DateField()
    type = serializers.ChoiceField(choices=TYPES)
    referToDoctor = serializers.BooleanField(required=False, default=False)
    status = serializers.ChoiceField(choices=STATUSES, required=False)
    reason = serializers.CharField(required=False, allow_blank=True)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    bloodPressure = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=16)
    pulse = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=16)
    temperature = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=16)
    weight = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=16)
    lastMenstrualPeriod = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=32)
    remark = serializers.CharField(required=False, allow_blank=True)

    def validate_notes(self, v):
        return clean_text(v)

    def validate_reason(self, v):
        return clean_text(v)

    def validate_remark(self, v):
        return clean_text(v)


class ConsultationUpdateSerializer(serializers.Serializer):
    date = serializers.DateField(required=False)
    type = serializers.ChoiceField(choices=TYPES, required=False)
    referToDoctor = serializers.BooleanField(required=False)
    status = serializers.ChoiceField(choices=STATUSES, required=False)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    def validate_notes(self, v):
        return clean_text(v)


class DoctorNotesSerializer(serializers.Serializer):
    doctorNotes = serializers.CharField()

    def validate_doctorNotes(self, v):
        v = clean_text(v)
        if not v:
            raise serializers.ValidationError('doctor notes must not be empty')
        return v
