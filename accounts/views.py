import logging

from django.contrib.auth import authenticate
from django.db import transaction
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.tokens import RefreshToken

from budget.cycle import ensure_current_cycle
from budget.models import BudgetSetting

from .serializers import SignupSerializer, LoginSerializer

logger = logging.getLogger(__name__)


def token_pair(user):
    refresh = RefreshToken.for_user(user)
    return {"refresh": str(refresh), "access": str(refresh.access_token)}


class SignupView(APIView):
    """
    POST body: { "email": "user@email.com", "password": "...", "username": "optional" }
    Creates the account with default cycle settings and its first budget month.
    """
    permission_classes = [AllowAny]
    authentication_classes = []

    @transaction.atomic
    def post(self, request):
        serializer = SignupSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        user = serializer.save()
        BudgetSetting.objects.create(user=user)
        result = ensure_current_cycle(user.pk)
        logger.info(f"Provisioned user {user.pk} with month {result.month_id}")

        return Response(
            {"message": "Account created successfully", "email": user.email, **token_pair(user)},
            status=status.HTTP_201_CREATED,
        )


class LoginView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        email = serializer.validated_data["email"].strip().lower()
        password = serializer.validated_data["password"]

        user = authenticate(request, email=email, password=password)
        if not user:
            return Response({"error": "Invalid email or password"}, status=status.HTTP_401_UNAUTHORIZED)

        # accounts created before settings existed get the defaults
        BudgetSetting.objects.get_or_create(user=user)
        ensure_current_cycle(user.pk)

        return Response({"message": "Login successful", "email": user.email, **token_pair(user)})
