from django.db import transaction
from django.shortcuts import get_object_or_404

from records.models import (
    Consultation,
    Employee,
    MedicalHistory,
    Patient,
    PatientAllergy,
    PatientCondition,
    PatientImmunization,
    PatientProfile,
    Remark,
    Student,
)
from records.services.audit import log_action

# sub-resource name -> (model, exported fields)
PATIENT_RECORDS = {
    'medical-history': (MedicalHistory, ('id', 'condition', 'diagnosed')),
    'consultations': (Consultation, (
        'id', 'date', 'type', 'status', 'scheduled_at', 'reason', 'notes', 'refer_to_doctor',
        'doctor_notes', 'blood_pressure', 'pulse', 'temperature', 'weight', 'last_menstrual_period',
    )),
    'conditions': (PatientCondition, ('id', 'condition_name', 'diagnosis_date', 'status', 'notes')),
    'allergies': (PatientAllergy, ('id', 'allergen', 'reaction', 'severity', 'diagnosis_date', 'notes')),
    'immunizations': (PatientImmunization, (
        'id', 'vaccine_name', 'administration_date', 'dose_number', 'provider', 'notes',
    )),
    'remarks': (Remark, ('id', 'date', 'note')),
}

PROFILE_FIELDS = (
    'last_name', 'first_name', 'middle_initial', 'suffix', 'date_of_birth', 'nationality',
    'civil_status', 'address', 'guardian_name', 'guardian_contact', 'emergency_contact',
    'blood_type', 'height', 'weight', 'religion', 'eye_color', 'disabilities', 'genetic_conditions',
)


def record_row(obj, fields):
    data = {}
    for f in fields:
        v = getattr(obj, f)
        data[f] = v.isoformat() if hasattr(v, 'isoformat') else v
    return data


def format_patient(p: Patient) -> dict:
    data = {
        'id': p.id,
        'name': p.name,
        'age': p.age,
        'gender': p.gender,
        'address': p.address,
        'contact': p.contact,
        'lastVisit': p.last_visit.isoformat() if p.last_visit else None,
        'patientType': p.patient_type,
        'student': None,
        'employee': None,
    }
    student = getattr(p, 'student', None) if p.is_student() else None
    if student:
        data['student'] = {
            'studentId': student.student_id, 'course': student.course,
            'yearLevel': student.year_level, 'section': student.section,
        }
    employee = getattr(p, 'employee', None) if p.is_employee() else None
    if employee:
        data['employee'] = {
            'employeeId': employee.employee_id, 'department': employee.department,
            'position': employee.position,
            'hireDate': employee.hire_date.isoformat() if employee.hire_date else None,
        }
    return data


def format_patient_detail(p: Patient) -> dict:
    data = format_patient(p)
    profile = PatientProfile.objects.filter(patient=p).first()
    data['profile'] = record_row(profile, PROFILE_FIELDS) if profile else None
    for name in PATIENT_RECORDS:
        data[name] = list_patient_records(p, name)
    return data


def list_patient_records(patient: Patient, name: str) -> list[dict]:
    model, fields = PATIENT_RECORDS[name]
    return [record_row(r, fields) for r in model.objects.filter(patient=patient).order_by('id')]


def get_patient_or_404(pk) -> Patient:
    return get_object_or_404(Patient.objects.select_related('student', 'employee'), pk=pk)


def create_patient(current_user, *, name, age, gender, patient_type, address='', contact='',
                   last_visit=None, student=None, employee=None) -> Patient:
    """Create a patient with its empty profile and matching sub-record.

    Only the sub-record matching ``patient_type`` is created, so a patient
    never has both a student and an employee record.
    """
    with transaction.atomic():
        patient = Patient.objects.create(
            name=name, age=age, gender=gender, address=address or '', contact=contact or '',
            last_visit=last_visit, patient_type=patient_type,
        )
        PatientProfile.objects.create(patient=patient)
        if patient.is_student() and student:
            Student.objects.create(
                patient=patient, student_id=student['studentId'], course=student.get('course', ''),
                year_level=student.get('yearLevel', ''), section=student.get('section', ''),
            )
        elif patient.is_employee() and employee:
            Employee.objects.create(
                patient=patient, employee_id=employee['employeeId'],
                department=employee.get('department', ''), position=employee.get('position', ''),
                hire_date=employee.get('hireDate'),
            )
    log_action(user=current_user, action='patient_create', object_type='patient', object_id=patient.id,
               detail={'patientType': patient_type})
    return patient
