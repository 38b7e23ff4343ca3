"""
Views for authentication, the current user and user management.
"""

import logging

from django.contrib.auth import get_user_model
from django.db.models import ProtectedError, Q

from rest_framework import generics, permissions, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.views import TokenObtainPairView

from .permissions import IsAdministrator
from .serializers import (
    PasswordChangeSerializer,
    PosTokenObtainPairSerializer,
    UserCreateSerializer,
    UserSerializer,
    UserUpdateSerializer,
)

User = get_user_model()
logger = logging.getLogger(__name__)


class PosTokenObtainPairView(TokenObtainPairView):
    """
    JWT login endpoint that also returns the user's role and permissions.

    Request body:
    {
        "username": "cashier1",
        "password": "..."
    }
    """

    serializer_class = PosTokenObtainPairSerializer


class LogoutView(APIView):
    """
    Blacklist the supplied refresh token.

    Request body:
    {
        "refresh": "<refresh token>"
    }
    """

    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):
        refresh = request.data.get("refresh")
        if not refresh:
            return Response(
                {"detail": "Refresh token is required."}, status=status.HTTP_400_BAD_REQUEST
            )
        try:
            RefreshToken(refresh).blacklist()
        except TokenError as e:
            return Response({"detail": str(e)}, status=status.HTTP_400_BAD_REQUEST)

        logger.info(f"User {request.user.username} logged out")
        return Response({"detail": "Logged out successfully."}, status=status.HTTP_200_OK)


@api_view(["GET"])
@permission_classes([permissions.IsAuthenticated])
def current_user(request):
    """Return the authenticated user with role and permissions."""
    return Response(UserSerializer(request.user).data)


class PasswordChangeView(APIView):
    """
    API endpoint for changing user password.
    """

    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):
        serializer = PasswordChangeSerializer(data=request.data, context={"request": request})
        if serializer.is_valid():
            serializer.save()
            return Response(
                {"detail": "Password changed successfully."},
                status=status.HTTP_200_OK,
            )
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


class UserListCreateView(generics.ListCreateAPIView):
    """
    List all store users or create a new one. Administrators only.

    Query parameters:
    - role: filter by role
    - search: match username, email or name
    """

    permission_classes = [IsAdministrator]

    def get_serializer_class(self):
        if self.request.method == "POST":
            return UserCreateSerializer
        return UserSerializer

    def get_queryset(self):
        queryset = User.objects.all().order_by("username")

        role = self.request.query_params.get("role")
        if role:
            queryset = queryset.filter(role=role)

        search = self.request.query_params.get("search")
        if search:
            queryset = queryset.filter(
                Q(username__icontains=search)
                | Q(email__icontains=search)
                | Q(first_name__icontains=search)
                | Q(last_name__icontains=search)
            )

        return queryset

    def perform_create(self, serializer):
        user = serializer.save()
        logger.info(
            f"User {user.username} ({user.role}) created by {self.request.user.username}"
        )


class UserDetailView(generics.RetrieveUpdateDestroyAPIView):
    """
    Retrieve, update or delete a store user. Administrators only.
    """

    queryset = User.objects.all()
    permission_classes = [IsAdministrator]

    def get_serializer_class(self):
        if self.request.method in ("PUT", "PATCH"):
            return UserUpdateSerializer
        return UserSerializer

    def destroy(self, request, *args, **kwargs):
        user = self.get_object()
        if user.pk == request.user.pk:
            return Response(
                {"detail": "You cannot delete your own account."},
                status=status.HTTP_400_BAD_REQUEST,
            )

        username = user.username
        try:
            user.delete()
        except ProtectedError:
            return Response(
                {
                    "detail": "User has recorded sales and cannot be deleted. "
                    "Deactivate the account instead."
                },
                status=status.HTTP_400_BAD_REQUEST,
            )
        logger.info(f"User {username} deleted by {request.user.username}")
        return Response(status=status.HTTP_204_NO_CONTENT)
