"""
Django admin registrations for the records models.

Roles are normally assigned by the sign-in flow or the ``set_user_role``
command; the admin is the manual fallback for inspecting accounts and
correcting a role by hand.
"""
from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import (
    AuditEvent,
    Consultation,
    Employee,
    MedicalHistory,
    Patient,
    PatientAllergy,
    PatientCondition,
    PatientImmunization,
    PatientProfile,
    Remark,
    Role,
    Student,
    StudentProfile,
    User,
)


@admin.register(Role)
class RoleAdmin(admin.ModelAdmin):
    list_display = ('name', 'level', 'description', 'updated_at')
    ordering = ('level', 'name')


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ('email', 'first_name', 'role', 'is_staff', 'is_active')
    list_filter = ('role', 'is_staff', 'is_active')
    search_fields = ('email', 'username', 'first_name', 'last_name')
    fieldsets = BaseUserAdmin.fieldsets + (
        ('Clinic', {'fields': ('role', 'google_id')}),
    )


class StudentInline(admin.StackedInline):
    model = Student
    extra = 0


class EmployeeInline(admin.StackedInline):
    model = Employee
    extra = 0


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'patient_type', 'age', 'gender', 'last_visit')
    list_filter = ('patient_type',)
    search_fields = ('name', 'student__student_id', 'employee__employee_id')
    inlines = [StudentInline, EmployeeInline]


@admin.register(PatientProfile)
class PatientProfileAdmin(admin.ModelAdmin):
    list_display = ('patient', 'last_name', 'first_name', 'blood_type')
    search_fields = ('patient__name', 'last_name', 'first_name')


@admin.register(Consultation)
class ConsultationAdmin(admin.ModelAdmin):
    list_display = ('id', 'patient', 'date', 'type', 'status', 'refer_to_doctor')
    list_filter = ('type', 'status', 'refer_to_doctor')
    search_fields = ('patient__name',)


admin.site.register(MedicalHistory)
admin.site.register(Remark)
admin.site.register(PatientAllergy)
admin.site.register(PatientCondition)
admin.site.register(PatientImmunization)


@admin.register(StudentProfile)
class StudentProfileAdmin(admin.ModelAdmin):
    list_display = ('user', 'last_name', 'first_name', 'date_of_birth', 'blood_type', 'updated_at')
    search_fields = ('user__email', 'last_name', 'first_name')


@admin.register(AuditEvent)
class AuditEventAdmin(admin.ModelAdmin):
    list_display = ('id', 'action', 'user', 'object_type', 'object_id', 'created_at')
    list_filter = ('action', 'object_type')
    readonly_fields = ('user', 'action', 'object_type', 'object_id', 'detail', 'created_at')
