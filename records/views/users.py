from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def current_user(request):
    """The signed-in account with its role and the pages it may open."""
    user = request.user
    role = user.role
    return Response({
        'ok': True,
        'data': {
            'id': user.id,
            'name': user.display_name,
            'email': user.email,
            'role': user.get_role_display_name(),
            'roleLevel': role.level if role else None,
            'canAccessInventory': user.can_access_inventory(),
            'canAccessReports': user.can_access_reports(),
        },
    })
