import logging

from records.models import StudentProfile
from records.services.audit import log_action
from records.services.patients import record_row

logger = logging.getLogger(__name__)

PROFILE_FIELDS = (
    'first_name', 'last_name', 'middle_initial', 'suffix', 'date_of_birth', 'nationality',
    'civil_status', 'address', 'guardian_name', 'guardian_contact', 'blood_type', 'height',
    'religion', 'eye_color', 'chronic_conditions', 'known_allergies', 'disabilities',
    'immunization_history', 'genetic_conditions', 'created_at', 'updated_at',
)


def get_student_profile(user):
    profile = StudentProfile.objects.filter(user=user).first()
    return record_row(profile, PROFILE_FIELDS) if profile else None


def save_student_profile(user, data: dict):
    """Create or replace the caller's own profile; returns ``(profile, created)``."""
    profile, created = StudentProfile.objects.update_or_create(user=user, defaults=data)
    logger.info("%s student profile for user %s", 'Created' if created else 'Updated', user.id)
    log_action(user=user, action='student_profile_save', object_type='student_profile', object_id=profile.id,
               detail={'created': created})
    return profile, created
