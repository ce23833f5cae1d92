"""
Role-guarded patient endpoints.

Nurses and doctors (and accounts without a role, which the guard treats
as nurses) may use the patient API; students and employees are refused
with a structured 403.
"""
import datetime

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient, APITestCase

from records.models import (
    AuditEvent,
    Consultation,
    Employee,
    MedicalHistory,
    Patient,
    PatientAllergy,
    PatientProfile,
    Role,
    Student,
    User,
)
from records.services.patients import create_patient


class PatientAPITests(APITestCase):
    def setUp(self) -> None:
        roles = {r.name: r for r in Role.objects.all()}
        self.nurse = User.objects.create_user(username='nurse@clinic.test', email='nurse@clinic.test',
                                              password=None, role=roles['nurse'])
        self.doctor = User.objects.create_user(username='doc@clinic.test', email='doc@clinic.test',
                                               password=None, role=roles['doctor'])
        self.student = User.objects.create_user(username='stu@clinic.test', email='stu@clinic.test',
                                                password=None, role=roles['student'])
        self.employee = User.objects.create_user(username='emp@clinic.test', email='emp@clinic.test',
                                                 password=None, role=roles['employee'])
        self.unassigned = User.objects.create_user(username='new@clinic.test', email='new@clinic.test',
                                                   password=None)

        self.ana = create_patient(self.nurse, name='Ana Reyes', age=19, gender='Female',
                                  patient_type=Patient.TYPE_STUDENT,
                                  student={'studentId': 'S-001', 'course': 'BSN', 'yearLevel': '2'})
        self.ben = create_patient(self.nurse, name='Ben Cruz', age=41, gender='Male',
                                  patient_type=Patient.TYPE_EMPLOYEE,
                                  employee={'employeeId': 'E-100', 'department': 'Registrar'})
        MedicalHistory.objects.create(patient=self.ana, condition='Asthma', diagnosed=datetime.date(2020, 5, 1))
        Consultation.objects.create(patient=self.ana, date=datetime.date(2024, 3, 2), reason='Wheezing')
        PatientAllergy.objects.create(patient=self.ana, allergen='Penicillin', severity='severe')

    def authenticate(self, user: User) -> APIClient:
        client = APIClient()
        client.force_authenticate(user=user)
        return client

    def test_nurse_can_list_patients(self):
        r = self.authenticate(self.nurse).get('/api/patients')
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertEqual(r.data['pagination']['total'], 2)
        names = {p['name'] for p in r.data['data']}
        self.assertEqual(names, {'Ana Reyes', 'Ben Cruz'})

    def test_doctor_can_list_patients(self):
        r = self.authenticate(self.doctor).get('/api/patients')
        self.assertEqual(r.status_code, status.HTTP_200_OK)

    def test_account_without_role_is_let_through(self):
        r = self.authenticate(self.unassigned).get('/api/patients')
        self.assertEqual(r.status_code, status.HTTP_200_OK)

    def test_student_is_refused_with_reason(self):
        r = self.authenticate(self.student).get('/api/patients')
        self.assertEqual(r.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(r.data['ok'])
        self.assertEqual(r.data['error']['code'], 'insufficient_role')
        self.assertEqual(r.data['error']['reason'], 'insufficient role')

    def test_employee_cannot_read_detail(self):
        r = self.authenticate(self.employee).get(f'/api/patients/{self.ana.id}')
        self.assertEqual(r.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(r.data['error']['reason'], 'insufficient role')

    def test_anonymous_is_401(self):
        r = APIClient().get('/api/patients')
        self.assertEqual(r.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertFalse(r.data['ok'])

    def test_filter_by_type_and_search(self):
        client = self.authenticate(self.nurse)
        r = client.get('/api/patients', {'type': 'employee'})
        self.assertEqual([p['name'] for p in r.data['data']], ['Ben Cruz'])
        self.assertEqual(r.data['data'][0]['employee']['employeeId'], 'E-100')
        r = client.get('/api/patients', {'q': 'S-001'})
        self.assertEqual([p['name'] for p in r.data['data']], ['Ana Reyes'])

    def test_pagination(self):
        r = self.authenticate(self.nurse).get('/api/patients', {'page': 2, 'pageSize': 1})
        self.assertEqual(r.data['pagination'], {'total': 2, 'page': 2, 'pageSize': 1})
        # newest first, so page 2 holds the first patient created
        self.assertEqual([p['name'] for p in r.data['data']], ['Ana Reyes'])

    def test_invalid_type_filter_is_400(self):
        r = self.authenticate(self.nurse).get('/api/patients', {'type': 'visitor'})
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)

    def test_nurse_registers_student_patient(self):
        payload = {
            'name': 'Carla Diaz', 'age': 20, 'gender': 'Female', 'patientType': 'student',
            'student': {'studentId': 'S-002', 'course': 'BSIT', 'yearLevel': '3', 'section': 'A'},
        }
        r = self.authenticate(self.nurse).post('/api/patients', payload, format='json')
        self.assertEqual(r.status_code, status.HTTP_201_CREATED)
        patient = Patient.objects.get(id=r.data['data']['id'])
        self.assertTrue(PatientProfile.objects.filter(patient=patient).exists())
        self.assertEqual(Student.objects.get(patient=patient).student_id, 'S-002')
        self.assertFalse(Employee.objects.filter(patient=patient).exists())
        self.assertTrue(AuditEvent.objects.filter(action='patient_create', object_id=patient.id).exists())

    def test_registration_strips_markup(self):
        payload = {'name': '<b>Dan</b> Lim', 'age': 30, 'gender': 'Male', 'patientType': 'employee',
                   'employee': {'employeeId': 'E-200'}}
        r = self.authenticate(self.doctor).post('/api/patients', payload, format='json')
        self.assertEqual(r.status_code, status.HTTP_201_CREATED)
        self.assertEqual(r.data['data']['name'], 'Dan Lim')

    def test_registration_rejects_mismatched_sub_record(self):
        payload = {'name': 'Eve Tan', 'age': 22, 'gender': 'Female', 'patientType': 'student',
                   'employee': {'employeeId': 'E-300'}}
        r = self.authenticate(self.nurse).post('/api/patients', payload, format='json')
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(Patient.objects.filter(name='Eve Tan').exists())

    def test_registration_rejects_duplicate_student_id(self):
        payload = {'name': 'Fay Uy', 'age': 18, 'gender': 'Female', 'patientType': 'student',
                   'student': {'studentId': 'S-001'}}
        r = self.authenticate(self.nurse).post('/api/patients', payload, format='json')
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)

    def test_student_cannot_register_patient(self):
        payload = {'name': 'Gil Ong', 'age': 18, 'gender': 'Male', 'patientType': 'student'}
        r = self.authenticate(self.student).post('/api/patients', payload, format='json')
        self.assertEqual(r.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(Patient.objects.filter(name='Gil Ong').exists())

    def test_detail_includes_profile_and_records(self):
        r = self.authenticate(self.nurse).get(f'/api/patients/{self.ana.id}')
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        data = r.data['data']
        self.assertEqual(data['student']['studentId'], 'S-001')
        self.assertIsNone(data['employee'])
        self.assertIsNotNone(data['profile'])
        self.assertEqual(data['medical-history'][0]['condition'], 'Asthma')
        self.assertEqual(data['medical-history'][0]['diagnosed'], '2020-05-01')
        self.assertEqual(len(data['consultations']), 1)
        self.assertEqual(data['allergies'][0]['severity'], 'severe')
        self.assertEqual(data['immunizations'], [])
        self.assertEqual(data['remarks'], [])

    def test_detail_unknown_patient_is_404(self):
        r = self.authenticate(self.nurse).get('/api/patients/99999')
        self.assertEqual(r.status_code, status.HTTP_404_NOT_FOUND)

    def test_sub_resource_lists(self):
        client = self.authenticate(self.doctor)
        r = client.get(f'/api/patients/{self.ana.id}/consultations')
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertEqual(r.data['data'][0]['reason'], 'Wheezing')
        self.assertEqual(r.data['data'][0]['status'], 'completed')
        r = client.get(reverse('patient_records', args=[self.ben.id, 'conditions']))
        self.assertEqual(r.data['data'], [])

    def test_unknown_sub_resource_is_404(self):
        r = self.authenticate(self.nurse).get(f'/api/patients/{self.ana.id}/remarks-archive')
        self.assertEqual(r.status_code, status.HTTP_404_NOT_FOUND)

    def test_student_refused_on_sub_resource(self):
        r = self.authenticate(self.student).get(f'/api/patients/{self.ana.id}/allergies')
        self.assertEqual(r.status_code, status.HTTP_403_FORBIDDEN)
