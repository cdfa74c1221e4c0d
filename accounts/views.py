import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated, AllowAny
from rest_framework.views import APIView
from drf_yasg.utils import swagger_auto_schema
from drf_yasg import openapi

from .models import UserRole, Profile, Organizer
from .permissions import check_role, IsOrganizer
from .serializers import UserSerializer, ProfileSerializer, OrganizerSerializer, RoleCheckSerializer

logger = logging.getLogger(__name__)


class SignupView(GenericAPIView):
    permission_classes = [AllowAny]
    serializer_class = UserSerializer.SignupSerializer

    @swagger_auto_schema(
        request_body=UserSerializer.SignupSerializer,
        responses={
            201: UserSerializer.RetrieveSerializer,
            400: "Bad Request"
        },
        operation_description="Create a student account with email and password.",
        tags=['account']
    )
    def post(self, request):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        tokens = user.tokens()
        logger.info(f"New student account {user.id} created")
        return Response(
            {
                "message": "Account created successfully.",
                "access_token": tokens['access'],
                "refresh_token": tokens['refresh'],
                "redirect_to": "/user-info",
                "user": UserSerializer.RetrieveSerializer(user).data
            },
            status=status.HTTP_201_CREATED
        )


class LoginView(GenericAPIView):
    permission_classes = [AllowAny]
    serializer_class = UserSerializer.LoginSerializer

    @swagger_auto_schema(
        request_body=UserSerializer.LoginSerializer,
        responses={
            200: "Tokens and redirect target",
            401: "Unauthorized"
        },
        operation_description="Sign in with email and password. Redirects to /user-info until a profile exists.",
        tags=['account']
    )
    def post(self, request):
        serializer = self.get_serializer(data=request.data, context={'request': request})
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        return Response(
            {
                "message": "Login successful.",
                "access_token": data['access_token'],
                "refresh_token": data['refresh_token'],
                "redirect_to": data['redirect_to'],
                "user": UserSerializer.RetrieveSerializer(data['user']).data
            },
            status=status.HTTP_200_OK
        )


class LogoutView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = UserSerializer.LogoutSerializer

    @swagger_auto_schema(
        request_body=UserSerializer.LogoutSerializer,
        responses={200: "Signed out", 400: "Bad Request"},
        operation_description="Sign out by revoking the refresh token.",
        tags=['account']
    )
    def post(self, request):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response({"message": "Signed out successfully.", "redirect_to": "/"}, status=status.HTTP_200_OK)


class MeView(APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        responses={200: UserSerializer.RetrieveSerializer, 401: "Unauthorized"},
        operation_description="Return the signed-in user with their role.",
        tags=['account']
    )
    def get(self, request):
        return Response(UserSerializer.RetrieveSerializer(request.user).data, status=status.HTTP_200_OK)


class RoleCheckView(APIView):
    permission_classes = [AllowAny]

    @swagger_auto_schema(
        manual_parameters=[
            openapi.Parameter(
                'role',
                openapi.IN_QUERY,
                description="Required role: student, organizer or admin",
                type=openapi.TYPE_STRING,
                required=True
            )
        ],
        responses={200: RoleCheckSerializer, 400: "Bad Request"},
        operation_description="Check whether the caller may enter a view restricted to the given role.",
        tags=['account']
    )
    def get(self, request):
        role = request.query_params.get('role')
        if role not in dict(UserRole.ROLE_CHOICES):
            return Response({"error": "role must be one of student, organizer, admin."}, status=status.HTTP_400_BAD_REQUEST)
        result = check_role(request.user, role)
        return Response(RoleCheckSerializer(result._asdict()).data, status=status.HTTP_200_OK)


class ProfileView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = ProfileSerializer

    @swagger_auto_schema(
        responses={200: ProfileSerializer, 404: "Profile not found"},
        operation_description="Retrieve the signed-in user's profile.",
        tags=['profile']
    )
    def get(self, request):
        try:
            profile = Profile.objects.get(user=request.user)
        except Profile.DoesNotExist:
            return Response({"error": "Profile does not exist.", "redirect_to": "/user-info"}, status=status.HTTP_404_NOT_FOUND)
        return Response(ProfileSerializer(profile).data, status=status.HTTP_200_OK)

    @swagger_auto_schema(
        request_body=ProfileSerializer,
        responses={201: ProfileSerializer, 400: "Bad Request"},
        operation_description="Create the signed-in user's profile.",
        tags=['profile']
    )
    def post(self, request):
        serializer = self.get_serializer(data=request.data, context={'request': request})
        serializer.is_valid(raise_exception=True)
        profile = serializer.save()
        return Response(
            {"message": "Profile created successfully!", "profile": ProfileSerializer(profile).data, "redirect_to": "/home"},
            status=status.HTTP_201_CREATED
        )


class OrganizerProfileView(GenericAPIView):
    permission_classes = [IsAuthenticated, IsOrganizer]
    serializer_class = OrganizerSerializer

    @swagger_auto_schema(
        responses={200: OrganizerSerializer, 403: "Forbidden", 404: "Organizer profile not found"},
        operation_description="Retrieve the signed-in organizer's profile.",
        tags=['profile']
    )
    def get(self, request):
        try:
            organizer = Organizer.objects.get(user=request.user)
        except Organizer.DoesNotExist:
            return Response({"error": "Organizer profile not found"}, status=status.HTTP_404_NOT_FOUND)
        return Response(OrganizerSerializer(organizer).data, status=status.HTTP_200_OK)

    @swagger_auto_schema(
        request_body=OrganizerSerializer,
        responses={201: OrganizerSerializer, 400: "Bad Request", 403: "Forbidden"},
        operation_description="Create the signed-in organizer's profile.",
        tags=['profile']
    )
    def post(self, request):
        serializer = self.get_serializer(data=request.data, context={'request': request})
        serializer.is_valid(raise_exception=True)
        organizer = serializer.save()
        return Response(OrganizerSerializer(organizer).data, status=status.HTTP_201_CREATED)
