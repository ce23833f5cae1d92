"""
Consultation endpoints.

Nurses and doctors record, edit and delete consultations.  Adding doctor
notes, which completes a referred consultation, is reserved to doctors.
"""
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from records.models import Consultation
from records.permissions import IsClinicStaff, IsDoctor
from records.serializers.consultation import (
    ConsultationCreateSerializer,
    ConsultationUpdateSerializer,
    DoctorNotesSerializer,
)
from records.services.consultations import (
    VITALS,
    ConsultationStateError,
    add_doctor_notes,
    create_consultation,
    delete_consultation,
    format_consultation,
    update_consultation,
)
from records.services.patients import get_patient_or_404

# request field -> model field for partial updates
UPDATABLE = {'date': 'date', 'type': 'type', 'referToDoctor': 'refer_to_doctor', 'status': 'status', 'notes': 'notes'}


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsClinicStaff])
def consultation_create(request):
    s = ConsultationCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    patient = get_patient_or_404(vd['patientId'])
    c = create_consultation(
        request.user, patient,
        date=vd['date'],
        consultation_type=vd['type'],
        refer_to_doctor=vd.get('referToDoctor', False),
        status=vd.get('status'),
        notes=vd.get('notes') or '',
        reason=vd.get('reason') or '',
        vitals={field: vd[key] for key, field in VITALS.items() if key in vd},
        remark=vd.get('remark'),
    )
    return Response({'ok': True, 'data': format_consultation(c)}, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated, IsClinicStaff])
def consultation_detail(request, pk: int):
    c = get_object_or_404(Consultation, pk=pk)
    if request.method == 'GET':
        return Response({'ok': True, 'data': format_consultation(c)})
    if request.method == 'DELETE':
        delete_consultation(request.user, c)
        return Response(status=status.HTTP_204_NO_CONTENT)
    s = ConsultationUpdateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    changes = {field: s.validated_data[key] for key, field in UPDATABLE.items() if key in s.validated_data}
    c = update_consultation(request.user, c, changes)
    return Response({'ok': True, 'data': format_consultation(c)})


@api_view(['PUT'])
@permission_classes([IsAuthenticated, IsDoctor])
def consultation_doctor_notes(request, pk: int):
    """Record the doctor's notes and complete a referred consultation."""
    s = DoctorNotesSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    c = get_object_or_404(Consultation, pk=pk)
    try:
        c = add_doctor_notes(request.user, c, s.validated_data['doctorNotes'])
    except ConsultationStateError as e:
        return Response({'ok': False, 'error': {'code': 'invalid_state', 'message': str(e)}}, status=400)
    return Response({'ok': True, 'data': format_consultation(c)})
