from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from records.permissions import IsStudent
from records.serializers.student_profile import StudentProfileSerializer
from records.services.student_profiles import get_student_profile, save_student_profile


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsStudent])
def student_profile(request):
    """Read or save the signed-in student's own health profile."""
    if request.method == 'GET':
        return Response({'ok': True, 'profile': get_student_profile(request.user)})
    s = StudentProfileSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    _, created = save_student_profile(request.user, s.validated_data)
    return Response({'ok': True, 'created': created, 'profile': get_student_profile(request.user)},
                    status=201 if created else 200)
