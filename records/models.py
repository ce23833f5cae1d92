"""
Database models for the clinic records backend.

Two groups of models live here: the account side (users and the roles
that gate access to pages and API endpoints) and the patient records
kept by the clinic (profiles, medical history, consultations and the
student/employee sub-records).
"""
from __future__ import annotations

from django.contrib.auth.models import AbstractUser
from django.db import models

from .roles import INVENTORY_ROLES, REPORTS_ROLES, RoleName


class Role(models.Model):
    """A named permission tier.

    The set of rows is fixed (see the ``0002_seed_roles`` migration and the
    ``seed_roles`` command).  ``level`` orders the tiers: nurses (1) have
    full access, doctors (2) have no inventory/reports access, students
    and employees (3) are the most restricted patients-facing tiers.
    """
    name = models.CharField(max_length=20, choices=RoleName.choices, unique=True)
    description = models.TextField(blank=True)
    level = models.PositiveSmallIntegerField(default=3)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['level', 'name']

    def __str__(self) -> str:
        return f"{self.name} (level {self.level})"

    @property
    def kind(self) -> RoleName | None:
        return RoleName.parse(self.name)

    def is_nurse(self) -> bool:
        return self.kind == RoleName.NURSE

    def is_doctor(self) -> bool:
        return self.kind == RoleName.DOCTOR

    def is_student(self) -> bool:
        return self.kind == RoleName.STUDENT

    def is_employee(self) -> bool:
        return self.kind == RoleName.EMPLOYEE

    def can_access_inventory(self) -> bool:
        return self.kind in INVENTORY_ROLES

    def can_access_reports(self) -> bool:
        return self.kind in REPORTS_ROLES


class User(AbstractUser):
    """Clinic account created on first Google sign-in.

    The email address is the identity key and doubles as ``username``.
    ``google_id`` is filled in once a verified Google token has been seen
    for the account.  ``role`` stays empty until the role resolver (or an
    administrator) assigns one.
    """
    email = models.EmailField(unique=True)
    google_id = models.CharField(max_length=64, unique=True, null=True, blank=True)
    role = models.ForeignKey(
        Role, null=True, blank=True, on_delete=models.SET_NULL, related_name='users', db_index=True
    )

    def __str__(self) -> str:
        return f"{self.email} ({self.role.name if self.role else 'no role'})"

    @property
    def display_name(self) -> str:
        return self.get_full_name() or self.username

    def has_role(self, name) -> bool:
        wanted = RoleName.parse(name)
        return bool(self.role and wanted and self.role.kind == wanted)

    def is_nurse(self) -> bool:
        return self.has_role(RoleName.NURSE)

    def is_doctor(self) -> bool:
        return self.has_role(RoleName.DOCTOR)

    def can_access_inventory(self) -> bool:
        # accounts predating role assignment keep full access
        return self.role.can_access_inventory() if self.role else True

    def can_access_reports(self) -> bool:
        return self.role.can_access_reports() if self.role else True

    def get_role_display_name(self) -> str:
        if not self.role:
            return RoleName.STUDENT.label
        return self.role.name.capitalize()


# ---------------------------------------------------------------------------
# Patient records
# ---------------------------------------------------------------------------

class Patient(models.Model):
    """A person treated by the clinic, either a student or an employee."""
    TYPE_STUDENT = 'student'
    TYPE_EMPLOYEE = 'employee'
    TYPE_CHOICES = ((TYPE_STUDENT, 'Student'), (TYPE_EMPLOYEE, 'Employee'))

    name = models.CharField(max_length=255)
    age = models.PositiveIntegerField()
    gender = models.CharField(max_length=20)
    address = models.TextField(blank=True)
    contact = models.CharField(max_length=50, blank=True)
    last_visit = models.DateField(null=True, blank=True)
    patient_type = models.CharField(max_length=16, choices=TYPE_CHOICES, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"{self.name} ({self.patient_type})"

    def is_student(self) -> bool:
        return self.patient_type == self.TYPE_STUDENT

    def is_employee(self) -> bool:
        return self.patient_type == self.TYPE_EMPLOYEE


class PatientProfile(models.Model):
    patient = models.OneToOneField(Patient, on_delete=models.CASCADE, related_name='profile')
    last_name = models.CharField(max_length=100, blank=True)
    first_name = models.CharField(max_length=100, blank=True)
    middle_initial = models.CharField(max_length=5, blank=True)
    suffix = models.CharField(max_length=10, blank=True)
    date_of_birth = models.DateField(null=True, blank=True)
    nationality = models.CharField(max_length=64, blank=True)
    civil_status = models.CharField(max_length=32, blank=True)
    address = models.TextField(blank=True)
    guardian_name = models.CharField(max_length=255, blank=True)
    guardian_contact = models.CharField(max_length=50, blank=True)
    emergency_contact = models.CharField(max_length=50, blank=True)
    blood_type = models.CharField(max_length=5, blank=True)
    height = models.CharField(max_length=16, blank=True)
    weight = models.CharField(max_length=16, blank=True)
    religion = models.CharField(max_length=64, blank=True)
    eye_color = models.CharField(max_length=32, blank=True)
    disabilities = models.TextField(blank=True)
    genetic_conditions = models.TextField(blank=True)

    def __str__(self) -> str:
        return f"Profile of {self.patient_id}"


class Student(models.Model):
    patient = models.OneToOneField(Patient, on_delete=models.CASCADE, related_name='student')
    student_id = models.CharField(max_length=32, unique=True)
    course = models.CharField(max_length=128, blank=True)
    year_level = models.CharField(max_length=16, blank=True)
    section = models.CharField(max_length=32, blank=True)

    def __str__(self) -> str:
        return f"Student {self.student_id}"


class Employee(models.Model):
    patient = models.OneToOneField(Patient, on_delete=models.CASCADE, related_name='employee')
    employee_id = models.CharField(max_length=32, unique=True)
    department = models.CharField(max_length=128, blank=True)
    position = models.CharField(max_length=128, blank=True)
    hire_date = models.DateField(null=True, blank=True)

    def __str__(self) -> str:
        return f"Employee {self.employee_id}"


class MedicalHistory(models.Model):
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='medical_histories')
    condition = models.CharField(max_length=255)
    diagnosed = models.DateField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name_plural = 'medical histories'

    def __str__(self) -> str:
        return f"{self.condition} ({self.patient_id})"


class Consultation(models.Model):
    TYPE_WALK_IN = 'walk-in'
    TYPE_SCHEDULED = 'scheduled'
    TYPE_CHOICES = ((TYPE_WALK_IN, 'Walk-in'), (TYPE_SCHEDULED, 'Scheduled'))

    # referred consultations wait in-progress until a doctor adds notes
    STATUS_IN_PROGRESS = 'in-progress'
    STATUS_COMPLETED = 'completed'
    STATUS_CHOICES = (
        (STATUS_IN_PROGRESS, 'In progress'),
        (STATUS_COMPLETED, 'Completed'),
    )

    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='consultations')
    date = models.DateField()
    type = models.CharField(max_length=16, choices=TYPE_CHOICES, default=TYPE_WALK_IN)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_COMPLETED, db_index=True)
    scheduled_at = models.DateTimeField(null=True, blank=True)
    reason = models.TextField(blank=True)
    notes = models.TextField(blank=True)
    refer_to_doctor = models.BooleanField(default=False)
    doctor_notes = models.TextField(blank=True)
    # vital signs are recorded as typed by the nurse
    blood_pressure = models.CharField(max_length=16, blank=True)
    pulse = models.CharField(max_length=16, blank=True)
    temperature = models.CharField(max_length=16, blank=True)
    weight = models.CharField(max_length=16, blank=True)
    last_menstrual_period = models.CharField(max_length=32, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [models.Index(fields=['patient', 'date'], name='consult_patient_date_idx')]

    def __str__(self) -> str:
        return f"consult p={self.patient_id} {self.date} ({self.type})"

    def awaiting_doctor(self) -> bool:
        return self.status == self.STATUS_IN_PROGRESS


class Remark(models.Model):
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='remarks')
    date = models.DateField()
    note = models.TextField()

    def __str__(self) -> str:
        return f"Remark {self.date} ({self.patient_id})"


class PatientAllergy(models.Model):
    SEVERITY_CHOICES = (('mild', 'Mild'), ('moderate', 'Moderate'), ('severe', 'Severe'))

    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='allergies')
    allergen = models.CharField(max_length=255)
    reaction = models.TextField(blank=True)
    severity = models.CharField(max_length=16, choices=SEVERITY_CHOICES, blank=True)
    diagnosis_date = models.DateField(null=True, blank=True)
    notes = models.TextField(blank=True)

    class Meta:
        verbose_name_plural = 'patient allergies'

    def __str__(self) -> str:
        return f"{self.allergen} ({self.patient_id})"


class PatientCondition(models.Model):
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='chronic_conditions')
    condition_name = models.CharField(max_length=255)
    diagnosis_date = models.DateField(null=True, blank=True)
    status = models.CharField(max_length=32, blank=True)
    notes = models.TextField(blank=True)

    def __str__(self) -> str:
        return f"{self.condition_name} ({self.patient_id})"


class PatientImmunization(models.Model):
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='immunizations')
    vaccine_name = models.CharField(max_length=255)
    administration_date = models.DateField(null=True, blank=True)
    dose_number = models.PositiveSmallIntegerField(null=True, blank=True)
    provider = models.CharField(max_length=255, blank=True)
    notes = models.TextField(blank=True)

    def __str__(self) -> str:
        return f"{self.vaccine_name} ({self.patient_id})"


class StudentProfile(models.Model):
    """Health profile a student keeps for themselves from the student dashboard."""
    CIVIL_STATUS_CHOICES = [(v, v) for v in ('Single', 'Married', 'Divorced', 'Widowed')]
    BLOOD_TYPE_CHOICES = [(v, v) for v in ('A+', 'A-', 'B+', 'B-', 'AB+', 'AB-', 'O+', 'O-')]
    EYE_COLOR_CHOICES = [(v, v) for v in ('Brown', 'Black', 'Blue', 'Green', 'Gray', 'Hazel')]

    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='student_profile')
    first_name = models.CharField(max_length=255)
    last_name = models.CharField(max_length=255)
    middle_initial = models.CharField(max_length=1, blank=True)
    suffix = models.CharField(max_length=10, blank=True)
    date_of_birth = models.DateField()
    nationality = models.CharField(max_length=255, blank=True)
    civil_status = models.CharField(max_length=16, choices=CIVIL_STATUS_CHOICES, blank=True)
    address = models.TextField(blank=True)
    guardian_name = models.CharField(max_length=255, blank=True)
    guardian_contact = models.CharField(max_length=255)
    blood_type = models.CharField(max_length=3, choices=BLOOD_TYPE_CHOICES, blank=True)
    height = models.CharField(max_length=10, blank=True)
    religion = models.CharField(max_length=255, blank=True)
    eye_color = models.CharField(max_length=16, choices=EYE_COLOR_CHOICES, blank=True)
    chronic_conditions = models.TextField(blank=True)
    known_allergies = models.TextField(blank=True)
    disabilities = models.TextField(blank=True)
    immunization_history = models.TextField(blank=True)
    genetic_conditions = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"{self.last_name}, {self.first_name} ({self.user_id})"


class AuditEvent(models.Model):
    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True)
    action = models.CharField(max_length=64)
    object_type = models.CharField(max_length=64, blank=True, null=True)
    object_id = models.IntegerField(blank=True, null=True)
    detail = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=['action', 'created_at'], name='audit_action_created_idx'),
            models.Index(fields=['object_type', 'object_id', 'created_at'], name='audit_object_created_idx'),
        ]

    def __str__(self) -> str:
        return f"{self.action}:{self.user_id}@{self.created_at:%F %T}"
