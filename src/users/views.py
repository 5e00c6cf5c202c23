import logging

from django.contrib.auth import authenticate
from django.shortcuts import get_object_or_404
from rest_framework import mixins, viewsets, status
from rest_framework import serializers as rf_serializers
from rest_framework.decorators import action
from rest_framework.generics import CreateAPIView, RetrieveUpdateAPIView
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.views import (
    TokenObtainPairView as BaseTokenObtainPairView,
    TokenRefreshView as BaseTokenRefreshView,
)
from drf_spectacular.utils import extend_schema, OpenApiResponse, extend_schema_view

from src.rooms.throttling import ScopedRateThrottleIsolated
from src.system.audit import record_audit

from .middleware import ACCESS_COOKIE, REFRESH_COOKIE, set_token_cookie, token_lifetime_left
from .models import CustomUser
from .permissions import IsSuperAdmin
from .serializers import CustomUserSerializer, RegistrationSerializer, LoginSerializer

logger = logging.getLogger(__name__)


class ThrottledTokenObtainPairView(BaseTokenObtainPairView):
    throttle_classes = (ScopedRateThrottleIsolated,)
    throttle_scope = 'auth_login'


class ThrottledTokenRefreshView(BaseTokenRefreshView):
    throttle_classes = (ScopedRateThrottleIsolated,)
    throttle_scope = 'auth_login'


class LoginResponseSerializer(rf_serializers.Serializer):
    detail = rf_serializers.CharField()
    access_expires_in_sec = rf_serializers.IntegerField()
    user = CustomUserSerializer()


class SimpleDetailSerializer(rf_serializers.Serializer):
    detail = rf_serializers.CharField()


def _set_auth_cookies(response, user):
    """Issue a fresh token pair for `user` as httpOnly cookies; returns the access token."""
    refresh = RefreshToken.for_user(user)
    access_token = refresh.access_token
    set_token_cookie(response, ACCESS_COOKIE, access_token)
    set_token_cookie(response, REFRESH_COOKIE, refresh)
    return access_token


@extend_schema(
    summary="Register & set auth cookies",
    request=RegistrationSerializer,
    responses={
        201: OpenApiResponse(response=CustomUserSerializer, description="Account created; JWT cookies set."),
        400: OpenApiResponse(description="Validation error"),
    },
    tags=["auth"],
)
class RegisterView(CreateAPIView):
    serializer_class = RegistrationSerializer
    permission_classes = [AllowAny]
    throttle_classes = (ScopedRateThrottleIsolated,)
    throttle_scope = 'auth_register'

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        logger.info("User registered: %s", user.email)

        response = Response(
            {"detail": "Account created successfully.", "user": CustomUserSerializer(user).data},
            status=status.HTTP_201_CREATED,
        )
        _set_auth_cookies(response, user)
        return response


@extend_schema(tags=["auth"])
class LoginView(APIView):
    permission_classes = [AllowAny]
    serializer_class = LoginSerializer
    throttle_classes = (ScopedRateThrottleIsolated,)
    throttle_scope = 'auth_login'

    @extend_schema(
        request=LoginSerializer,
        responses={
            200: OpenApiResponse(response=LoginResponseSerializer, description="Login successful; cookies set"),
            401: OpenApiResponse(response=SimpleDetailSerializer, description="Invalid credentials"),
        },
        auth=[],
    )
    def post(self, request, *args, **kwargs):
        serializer = self.serializer_class(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = authenticate(
            request,
            email=serializer.validated_data['email'],
            password=serializer.validated_data['password'],
        )
        if not user:
            return Response({"detail": "Invalid credentials"}, status=status.HTTP_401_UNAUTHORIZED)

        response = Response(status=status.HTTP_200_OK)
        access_token = _set_auth_cookies(response, user)
        response.data = {
            "detail": "Login successful",
            "access_expires_in_sec": token_lifetime_left(access_token),
            "user": CustomUserSerializer(user).data,
        }
        return response


@extend_schema(
    summary="Logout",
    request=None,
    responses={200: OpenApiResponse(response=SimpleDetailSerializer, description="Logged out")},
    tags=["auth"],
)
class LogoutView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        response = Response({"detail": "Logout successful"}, status=status.HTTP_200_OK)
        response.delete_cookie(ACCESS_COOKIE, path='/')
        response.delete_cookie(REFRESH_COOKIE, path='/')
        return response


@extend_schema(tags=["auth"], summary="Current user profile")
class MeView(RetrieveUpdateAPIView):
    serializer_class = CustomUserSerializer
    permission_classes = [IsAuthenticated]
    http_method_names = ['get', 'patch', 'head', 'options']

    def get_object(self):
        return self.request.user


@extend_schema(tags=["users"])
@extend_schema_view(
    list=extend_schema(summary="List users (super admin)"),
    retrieve=extend_schema(summary="Retrieve user (super admin)"),
)
class CustomUserViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    """
    Account management for super admins.
    promote/demote change the role between `user` and `admin` and are audited;
    super admin accounts cannot be modified here.
    """
    queryset = CustomUser.objects.order_by('email')
    serializer_class = CustomUserSerializer
    permission_classes = [IsAuthenticated, IsSuperAdmin]
    filterset_fields = ('role', 'is_active')

    def _change_role(self, request, pk, new_role, audit_action):
        user = get_object_or_404(CustomUser, pk=pk)
        if user.role == CustomUser.Role.SUPER_ADMIN:
            return Response(
                {"detail": "Cannot modify super admin role."},
                status=status.HTTP_403_FORBIDDEN,
            )
        old_role = user.role
        if old_role == new_role:
            return Response(
                {"detail": f"User already has role {new_role}."},
                status=status.HTTP_400_BAD_REQUEST,
            )

        user.role = new_role
        user.save(update_fields=['role'])
        record_audit(
            audit_action,
            user=request.user,
            entity_type='user',
            entity_id=user.pk,
            old_value={'role': old_role},
            new_value={'role': new_role},
            request=request,
        )
        logger.info("User %s role %s -> %s by %s", user.email, old_role, new_role, request.user.email)
        return Response(CustomUserSerializer(user).data)

    @extend_schema(summary="Promote user to admin", request=None, responses={200: CustomUserSerializer})
    @action(detail=True, methods=['post'])
    def promote(self, request, pk=None):
        return self._change_role(request, pk, CustomUser.Role.ADMIN, 'USER_PROMOTED')

    @extend_schema(summary="Demote admin to user", request=None, responses={200: CustomUserSerializer})
    @action(detail=True, methods=['post'])
    def demote(self, request, pk=None):
        return self._change_role(request, pk, CustomUser.Role.USER, 'ADMIN_DEMOTED')
