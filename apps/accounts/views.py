from rest_framework import status, serializers
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from apps.core.exceptions import StorageUnavailableError

from .serializers import DeviceLoginSerializer, UserSerializer
from .services import resolve_user, get_user_by_id, UserNotFoundError, InvalidDeviceError


# Response serializers for API documentation
class LoginResponseSerializer(serializers.Serializer):
    user = UserSerializer()


class ErrorResponseSerializer(serializers.Serializer):
    error = serializers.CharField()


@extend_schema(
    request=DeviceLoginSerializer,
    responses={
        200: LoginResponseSerializer,
        400: ErrorResponseSerializer,
        503: ErrorResponseSerializer,
    },
    description="Resolve the user for a device, creating it on first login.",
    tags=['users'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def login(request):
    """Login or auto-create the user for a device."""
    serializer = DeviceLoginSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        user = resolve_user(
            device_id=serializer.validated_data['device_id'],
            display_name=serializer.validated_data['display_name'],
        )
    except InvalidDeviceError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except StorageUnavailableError as e:
        return Response({'error': str(e)}, status=status.HTTP_503_SERVICE_UNAVAILABLE)

    return Response({'user': UserSerializer(user).data})


@extend_schema(
    responses={200: UserSerializer, 404: ErrorResponseSerializer},
    description="Get a user by ID.",
    tags=['users'],
)
@api_view(['GET'])
@permission_classes([AllowAny])
def user_detail(request, pk):
    """Get a single user."""
    try:
        user = get_user_by_id(user_id=pk)
    except UserNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

    return Response(UserSerializer(user).data)
