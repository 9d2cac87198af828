from django.utils import timezone
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response


@api_view(['GET'])
@authentication_classes([])
@permission_classes([AllowAny])
def health_check(request):
    return Response({
        'status': 'OK',
        'message': 'Serbia Land Registry API is running',
        'timestamp': timezone.now().isoformat(),
    })
