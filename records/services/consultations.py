"""
Consultation workflow.

A nurse records a consultation.  When it is referred to a doctor it stays
``in-progress`` until a doctor adds notes, which completes it; otherwise
it is ``completed`` straight away.
"""
import logging

from django.db import transaction

from records.models import Consultation, Remark
from records.services.audit import log_action
from records.services.patients import PATIENT_RECORDS, record_row

logger = logging.getLogger(__name__)

CONSULTATION_FIELDS = PATIENT_RECORDS['consultations'][1]

# request field -> model field
VITALS = {
    'bloodPressure': 'blood_pressure',
    'pulse': 'pulse',
    'temperature': 'temperature',
    'weight': 'weight',
    'lastMenstrualPeriod': 'last_menstrual_period',
}


class ConsultationStateError(ValueError):
    """The consultation is not in a state that allows the requested step."""


def format_consultation(c: Consultation) -> dict:
    return {'patientId': c.patient_id, **record_row(c, CONSULTATION_FIELDS)}


def status_for(refer_to_doctor: bool, status=None) -> str:
    if status:
        return status
    return Consultation.STATUS_IN_PROGRESS if refer_to_doctor else Consultation.STATUS_COMPLETED


def create_consultation(current_user, patient, *, date, consultation_type, refer_to_doctor=False, status=None,
                        notes='', reason='', vitals=None, remark=None) -> Consultation:
    with transaction.atomic():
        c = Consultation.objects.create(
            patient=patient, date=date, type=consultation_type, refer_to_doctor=refer_to_doctor,
            status=status_for(refer_to_doctor, status), notes=notes or '', reason=reason or '',
            **{field: value or '' for field, value in (vitals or {}).items()},
        )
        if remark:
            Remark.objects.create(patient=patient, date=date, note=remark)
    log_action(user=current_user, action='consultation_create', object_type='consultation', object_id=c.id,
               detail={'patientId': patient.id, 'status': c.status})
    return c


def update_consultation(current_user, c: Consultation, changes: dict) -> Consultation:
    """Apply ``changes`` (model field names).

    Changing ``refer_to_doctor`` without an explicit status moves the
    consultation to the matching status.
    """
    changes = dict(changes)
    if 'refer_to_doctor' in changes and not changes.get('status'):
        changes['status'] = status_for(changes['refer_to_doctor'])
    for field, value in changes.items():
        setattr(c, field, value)
    if changes:
        c.save(update_fields=[*changes, 'updated_at'])
        log_action(user=current_user, action='consultation_update', object_type='consultation', object_id=c.id,
                   detail={'fields': sorted(changes), 'status': c.status})
    return c


def add_doctor_notes(current_user, c: Consultation, notes: str) -> Consultation:
    if not c.awaiting_doctor():
        raise ConsultationStateError('This consultation is not pending doctor review')
    c.doctor_notes = notes
    c.status = Consultation.STATUS_COMPLETED
    c.save(update_fields=['doctor_notes', 'status', 'updated_at'])
    logger.info("Consultation %s completed by doctor %s", c.id, current_user.email)
    log_action(user=current_user, action='consultation_doctor_notes', object_type='consultation',
               object_id=c.id, detail={'patientId': c.patient_id})
    return c


def delete_consultation(current_user, c: Consultation) -> None:
    cid, patient_id = c.id, c.patient_id
    c.delete()
    log_action(user=current_user, action='consultation_delete', object_type='consultation', object_id=cid,
               detail={'patientId': patient_id})
