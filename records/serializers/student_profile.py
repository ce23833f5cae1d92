from django.utils import timezone
from rest_framework import serializers

from records.models import StudentProfile
from records.serializers.common import clean_text

# free-text fields cleaned of markup before saving
TEXT_FIELDS = (
    'first_name', 'last_name', 'middle_initial', 'suffix', 'nationality', 'address',
    'guardian_name', 'guardian_contact', 'height', 'religion', 'chronic_conditions',
    'known_allergies', 'disabilities', 'immunization_history', 'genetic_conditions',
)


class StudentProfileSerializer(serializers.Serializer):
    first_name = serializers.CharField(max_length=255)
    last_name = serializers.CharField(max_length=255)
    middle_initial = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=1)
    suffix = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=10)
    date_of_birth = serializers.DateField()
    nationality = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=255)
    civil_status = serializers.ChoiceField(choices=StudentProfile.CIVIL_STATUS_CHOICES, required=False,
                                           allow_blank=True, allow_null=True)
    address = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=1000)
    guardian_name = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=255)
    guardian_contact = serializers.CharField(max_length=255)
    blood_type = serializers.ChoiceField(choices=StudentProfile.BLOOD_TYPE_CHOICES, required=False,
                                         allow_blank=True, allow_null=True)
    height = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=10)
    religion = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=255)
    eye_color = serializers.ChoiceField(choices=StudentProfile.EYE_COLOR_CHOICES, required=False,
                                        allow_blank=True, allow_null=True)
    chronic_conditions = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=2000)
    known_allergies = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=2000)
    disabilities = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=2000)
    immunization_history = serializers.CharField(required=False, allow_blank=True, allow_null=True,
                                                 max_length=2000)
    genetic_conditions = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=2000)

    def validate_date_of_birth(self, v):
        if v >= timezone.localdate():
            raise serializers.ValidationError('date of birth must be before today')
        return v

    def validate(self, attrs):
        for name in TEXT_FIELDS:
            if name in attrs:
                attrs[name] = clean_text(attrs[name])
        for name in ('civil_status', 'blood_type', 'eye_color'):
            if name in attrs and attrs[name] is None:
                attrs[name] = ''
        for name in ('first_name', 'last_name', 'guardian_contact'):
            if not attrs.get(name):
                raise serializers.ValidationError({name: 'This field may not be blank.'})
        return attrs
