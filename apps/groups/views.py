from rest_framework import status, serializers
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter

from apps.accounts.serializers import UserSerializer
from apps.accounts.services import get_user_by_id, UserNotFoundError
from apps.core.exceptions import NotFoundError, StorageUnavailableError

from .serializers import (
    GroupSerializer,
    GroupCreateSerializer,
    GroupListQuerySerializer,
    JoinGroupSerializer,
    ApproveJoinSerializer,
)
from .services import (
    create_group,
    get_group_detail,
    list_groups_for_user,
    request_join,
    approve_join,
    # Exceptions
    GroupNotFoundError,
    InvalidGroupError,
    InsufficientPermissionsError,
)


class GroupWithUserResponseSerializer(serializers.Serializer):
    group = GroupSerializer()
    user = UserSerializer()


class JoinResponseSerializer(serializers.Serializer):
    message = serializers.CharField()
    status = serializers.CharField()
    user = UserSerializer()


class ApproveJoinResponseSerializer(serializers.Serializer):
    message = serializers.CharField()
    group = GroupSerializer()
    user = UserSerializer()


class ErrorResponseSerializer(serializers.Serializer):
    error = serializers.CharField()


def _error(e, code):
    return Response({'error': str(e)}, status=code)


@extend_schema(
    methods=['GET'],
    parameters=[OpenApiParameter('user_id', str, required=True, description='Member user id')],
    responses={200: GroupSerializer(many=True), 400: ErrorResponseSerializer, 404: ErrorResponseSerializer},
    description="Get all groups the user is a member of, most recently updated first.",
    tags=['groups'],
)
@extend_schema(
    methods=['POST'],
    request=GroupCreateSerializer,
    responses={201: GroupWithUserResponseSerializer, 400: ErrorResponseSerializer, 404: ErrorResponseSerializer},
    description="Create a group. The creator becomes its first member.",
    tags=['groups'],
)
@api_view(['GET', 'POST'])
@permission_classes([AllowAny])
def group_list(request):
    """List a user's groups or create a new group."""
    if request.method == 'GET':
        query = GroupListQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        try:
            groups = list_groups_for_user(user_id=query.validated_data['user_id'])
        except UserNotFoundError as e:
            return _error(e, status.HTTP_404_NOT_FOUND)
        except StorageUnavailableError as e:
            return _error(e, status.HTTP_503_SERVICE_UNAVAILABLE)

        return Response(GroupSerializer(groups, many=True).data)

    serializer = GroupCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        group = create_group(
            name=serializer.validated_data['name'],
            owner_id=serializer.validated_data['user_id'],
        )
        detail = get_group_detail(group_id=group.id)
        owner = get_user_by_id(user_id=group.creator_id)
    except InvalidGroupError as e:
        return _error(e, status.HTTP_400_BAD_REQUEST)
    except UserNotFoundError as e:
        return _error(e, status.HTTP_404_NOT_FOUND)
    except StorageUnavailableError as e:
        return _error(e, status.HTTP_503_SERVICE_UNAVAILABLE)

    return Response(
        {'group': GroupSerializer(detail).data, 'user': UserSerializer(owner).data},
        status=status.HTTP_201_CREATED
    )


@extend_schema(
    responses={200: GroupSerializer, 404: ErrorResponseSerializer},
    description="Get a group with members, pending join requests and expenses.",
    tags=['groups'],
)
@api_view(['GET'])
@permission_classes([AllowAny])
def group_detail(request, pk):
    """Get group details."""
    try:
        detail = get_group_detail(group_id=pk)
    except GroupNotFoundError as e:
        return _error(e, status.HTTP_404_NOT_FOUND)
    except StorageUnavailableError as e:
        return _error(e, status.HTTP_503_SERVICE_UNAVAILABLE)

    return Response(GroupSerializer(detail).data)


@extend_schema(
    request=JoinGroupSerializer,
    responses={200: JoinResponseSerializer, 404: ErrorResponseSerializer},
    description="Ask to join the group a join code belongs to.",
    tags=['groups'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def join_group(request):
    """Send a join request."""
    serializer = JoinGroupSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        result = request_join(
            join_code=serializer.validated_data['join_code'],
            user_id=serializer.validated_data['user_id'],
        )
    except NotFoundError as e:
        return _error(e, status.HTTP_404_NOT_FOUND)
    except StorageUnavailableError as e:
        return _error(e, status.HTTP_503_SERVICE_UNAVAILABLE)

    return Response({
        'message': 'Join request sent',
        'status': result.status,
        'user': UserSerializer(result.user).data,
    })


@extend_schema(
    request=ApproveJoinSerializer,
    responses={
        200: ApproveJoinResponseSerializer,
        403: ErrorResponseSerializer,
        404: ErrorResponseSerializer,
    },
    description="Approve a pending join request, making the user a member.",
    tags=['groups'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def approve_join_request(request):
    """Approve a join request."""
    serializer = ApproveJoinSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    approved_by_id = serializer.validated_data['approved_by']

    try:
        approved_by = get_user_by_id(user_id=approved_by_id) if approved_by_id else None
        group = approve_join(
            group_id=serializer.validated_data['group_id'],
            user_id=serializer.validated_data['user_id'],
            approved_by=approved_by,
        )
        detail = get_group_detail(group_id=group.id)
        user = get_user_by_id(user_id=serializer.validated_data['user_id'])
    except InsufficientPermissionsError as e:
        return _error(e, status.HTTP_403_FORBIDDEN)
    except NotFoundError as e:
        return _error(e, status.HTTP_404_NOT_FOUND)
    except StorageUnavailableError as e:
        return _error(e, status.HTTP_503_SERVICE_UNAVAILABLE)

    return Response({
        'message': 'User added to members',
        'group': GroupSerializer(detail).data,
        'user': UserSerializer(user).data,
    })
