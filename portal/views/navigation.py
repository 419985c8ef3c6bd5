from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..services.navigation import navigation_for


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def navigation(request):
    """Sidebar entries the caller's role may open, in display order."""
    return Response({'role': request.user.role, 'items': navigation_for(request.user.role)})
