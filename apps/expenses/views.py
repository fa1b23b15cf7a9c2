from rest_framework import status, serializers
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from apps.core.exceptions import NotFoundError, StorageUnavailableError

from .serializers import (
    ExpenseSerializer,
    SubmitExpenseSerializer,
    ApproveExpenseSerializer,
)
from .services import (
    submit_expense,
    cast_approval,
    get_expense_by_id,
    ExpenseNotFoundError,
    InvalidExpenseError,
)


class ExpenseResponseSerializer(serializers.Serializer):
    expense = ExpenseSerializer()


class ErrorResponseSerializer(serializers.Serializer):
    error = serializers.CharField()


@extend_schema(
    request=SubmitExpenseSerializer,
    responses={
        201: ExpenseResponseSerializer,
        400: ErrorResponseSerializer,
        404: ErrorResponseSerializer,
        503: ErrorResponseSerializer,
    },
    description="Submit an expense to a group. It starts unapproved.",
    tags=['expenses'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def create_expense(request):
    """Add an expense."""
    serializer = SubmitExpenseSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        expense = submit_expense(
            group_id=serializer.validated_data['group_id'],
            submitter_id=serializer.validated_data['added_by'],
            description=serializer.validated_data['description'],
            amount=serializer.validated_data['amount'],
        )
    except InvalidExpenseError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except NotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except StorageUnavailableError as e:
        return Response({'error': str(e)}, status=status.HTTP_503_SERVICE_UNAVAILABLE)

    return Response(
        {'expense': ExpenseSerializer(expense).data},
        status=status.HTTP_201_CREATED
    )


@extend_schema(
    request=ApproveExpenseSerializer,
    responses={
        200: ExpenseResponseSerializer,
        400: ErrorResponseSerializer,
        404: ErrorResponseSerializer,
        503: ErrorResponseSerializer,
    },
    description="Approve an expense. Approving twice has no further effect.",
    tags=['expenses'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def approve_expense(request):
    """Cast an approval on an expense."""
    serializer = ApproveExpenseSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        expense = cast_approval(
            expense_id=serializer.validated_data['expense_id'],
            user_id=serializer.validated_data['user_id'],
        )
    except NotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except StorageUnavailableError as e:
        return Response({'error': str(e)}, status=status.HTTP_503_SERVICE_UNAVAILABLE)

    return Response({'expense': ExpenseSerializer(expense).data})


@extend_schema(
    responses={200: ExpenseSerializer, 404: ErrorResponseSerializer, 503: ErrorResponseSerializer},
    description="Get a single expense.",
    tags=['expenses'],
)
@api_view(['GET'])
@permission_classes([AllowAny])
def expense_detail(request, pk):
    """Get an expense."""
    try:
        expense = get_expense_by_id(expense_id=pk)
    except ExpenseNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except StorageUnavailableError as e:
        return Response({'error': str(e)}, status=status.HTTP_503_SERVICE_UNAVAILABLE)

    return Response(ExpenseSerializer(expense).data)
