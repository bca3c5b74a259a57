# users/views.py
"""
USER VIEWS

Tokens are issued elsewhere; this service only verifies them
(SimpleJWT JWTAuthentication) and exposes the resolved identity.
"""

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import UserRateThrottle
from rest_framework.views import APIView

from .serializers import UserSerializer


class MeUserThrottle(UserRateThrottle):
    """
    Authenticated user throttling for /me/.
    Uses REST_FRAMEWORK['DEFAULT_THROTTLE_RATES']['user'].
    """
    scope = "user"


class MeView(APIView):
    permission_classes = [IsAuthenticated]
    serializer_class = UserSerializer
    throttle_classes = [MeUserThrottle]

    @extend_schema(
        responses={200: UserSerializer},
        description="Get current authenticated user profile",
    )
    def get(self, request):
        return Response(UserSerializer(request.user).data)
