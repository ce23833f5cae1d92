from rest_framework import serializers

from records.models import Employee, Patient, Student
from records.serializers.common import clean_text


class StudentInfoSerializer(serializers.Serializer):
    studentId = serializers.CharField(max_length=32)
    course = serializers.CharField(required=False, allow_blank=True, max_length=128)
    yearLevel = serializers.CharField(required=False, allow_blank=True, max_length=16)
    section = serializers.CharField(required=False, allow_blank=True, max_length=32)


class EmployeeInfoSerializer(serializers.Serializer):
    employeeId = serializers.CharField(max_length=32)
    department = serializers.CharField(required=False, allow_blank=True, max_length=128)
    position = serializers.CharField(required=False, allow_blank=True, max_length=128)
    hireDate = serializers.DateField(required=False, allow_null=True)


class PatientCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    age = serializers.IntegerField(min_value=0, max_value=150)
    gender = serializers.CharField(max_length=20)
    address = serializers.CharField(required=False, allow_blank=True)
    contact = serializers.CharField(required=False, allow_blank=True, max_length=50)
    lastVisit = serializers.DateField(required=False, allow_null=True)
    patientType = serializers.ChoiceField(choices=[c for c, _ in Patient.TYPE_CHOICES])
    student = StudentInfoSerializer(required=False)
    employee = EmployeeInfoSerializer(required=False)

    def validate_name(self, v):
        v = clean_text(v)
        if len(v) < 2:
            raise serializers.ValidationError('name must be at least 2 characters')
        return v

    def validate_address(self, v):
        return clean_text(v)

    def validate_contact(self, v):
        return clean_text(v)

    def validate(self, attrs):
        ptype = attrs['patientType']
        if ptype == Patient.TYPE_STUDENT and attrs.get('employee'):
            raise serializers.ValidationError({'employee': 'a student patient cannot carry employee details'})
        if ptype == Patient.TYPE_EMPLOYEE and attrs.get('student'):
            raise serializers.ValidationError({'student': 'an employee patient cannot carry student details'})
        student = attrs.get('student')
        if student and Student.objects.filter(student_id=student['studentId']).exists():
            raise serializers.ValidationError({'student': 'student id already registered'})
        employee = attrs.get('employee')
        if employee and Employee.objects.filter(employee_id=employee['employeeId']).exists():
            raise serializers.ValidationError({'employee': 'employee id already registered'})
        return attrs


class PatientListQuerySerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=[c for c, _ in Patient.TYPE_CHOICES], required=False)
    q = serializers.CharField(max_length=64, required=False)
    page = serializers.IntegerField(required=False, min_value=1)
    pageSize = serializers.IntegerField(required=False, min_value=1, max_value=200)
