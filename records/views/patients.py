"""
Patient record endpoints.

Listing, registering and reading patients is reserved to clinic staff
(nurses and doctors).  Other roles are refused with a 403 whose reason
is ``insufficient role``.
"""
from __future__ import annotations

from django.db.models import Q
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import NotFound
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from records.models import Patient
from records.permissions import IsClinicStaff
from records.serializers.patient import PatientCreateSerializer, PatientListQuerySerializer
from records.services.patients import (
    PATIENT_RECORDS,
    create_patient,
    format_patient,
    format_patient_detail,
    get_patient_or_404,
    list_patient_records,
)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsClinicStaff])
def patients(request):
    if request.method == 'POST':
        return _register_patient(request)
    q = PatientListQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    vd = q.validated_data
    qs = Patient.objects.select_related('student', 'employee').order_by('-id')
    if vd.get('type'):
        qs = qs.filter(patient_type=vd['type'])
    if vd.get('q'):
        qs = qs.filter(
            Q(name__icontains=vd['q'])
            | Q(student__student_id__icontains=vd['q'])
            | Q(employee__employee_id__icontains=vd['q'])
        )
    total = qs.count()
    page = vd.get('page') or 1
    page_size = vd.get('pageSize') or 0
    if page_size:
        start = (page - 1) * page_size
        qs = qs[start:start + page_size]
    return Response({
        'ok': True,
        'data': [format_patient(p) for p in qs],
        'pagination': {'total': total, 'page': page, 'pageSize': page_size or total},
    })


def _register_patient(request):
    data = PatientCreateSerializer(data=request.data)
    data.is_valid(raise_exception=True)
    vd = data.validated_data
    patient = create_patient(
        request.user,
        name=vd['name'],
        age=vd['age'],
        gender=vd['gender'],
        patient_type=vd['patientType'],
        address=vd.get('address', ''),
        contact=vd.get('contact', ''),
        last_visit=vd.get('lastVisit'),
        student=vd.get('student'),
        employee=vd.get('employee'),
    )
    return Response({'ok': True, 'data': format_patient(patient)}, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsClinicStaff])
def patient_detail(request, pk: int):
    """Patient with profile, sub-record and every dependent record list."""
    return Response({'ok': True, 'data': format_patient_detail(get_patient_or_404(pk))})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsClinicStaff])
def patient_records(request, pk: int, kind: str):
    if kind not in PATIENT_RECORDS:
        raise NotFound('unknown record type')
    patient = get_patient_or_404(pk)
    return Response({'ok': True, 'data': list_patient_records(patient, kind)})
