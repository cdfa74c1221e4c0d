from rest_framework import status
from rest_framework.response import Response
from rest_framework.generics import GenericAPIView, ListAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.views import APIView
from drf_yasg.utils import swagger_auto_schema

from accounts.permissions import IsStudent
from events.models import Event
from .models import Registration
from .serializers import RegisterTeamSerializer, RegistrationSerializer
from .services import register_team, cancel_registration


class RegisterView(GenericAPIView):
    permission_classes = [IsAuthenticated, IsStudent]
    serializer_class = RegisterTeamSerializer

    @swagger_auto_schema(
        request_body=RegisterTeamSerializer,
        responses={
            201: RegistrationSerializer,
            400: "Bad Request",
            401: "Unauthorized",
            404: "Event not found"
        },
        operation_description="Register the signed-in student, alone or with a team, for an event.",
        tags=['registrations']
    )
    def post(self, request, event_id):
        try:
            event = Event.objects.get(id=event_id)
        except Event.DoesNotExist:
            return Response({"error": "Event not found."}, status=status.HTTP_404_NOT_FOUND)

        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        registration = register_team(
            request.user,
            event,
            serializer.validated_data['members'],
            team_name=serializer.validated_data.get('team_name'),
        )
        return Response(
            {
                "message": "Registration successful!",
                "registration": RegistrationSerializer(registration).data,
                "redirect_to": f"/event/{event.id}"
            },
            status=status.HTTP_201_CREATED
        )


class MyRegistrationsView(ListAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = RegistrationSerializer

    def get_queryset(self):
        return Registration.objects.filter(user=self.request.user).select_related('event').prefetch_related('members')

    @swagger_auto_schema(
        responses={200: RegistrationSerializer(many=True)},
        operation_description="List the signed-in user's registrations with their events, newest first.",
        tags=['registrations']
    )
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)


class RegistrationDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def get_registration(self, request, registration_id):
        try:
            return Registration.objects.get(id=registration_id, user=request.user)
        except Registration.DoesNotExist:
            return None

    @swagger_auto_schema(
        responses={200: RegistrationSerializer, 404: "Registration not found"},
        operation_description="Retrieve one of the signed-in user's registrations.",
        tags=['registrations']
    )
    def get(self, request, registration_id):
        registration = self.get_registration(request, registration_id)
        if registration is None:
            return Response({"error": "Registration not found."}, status=status.HTTP_404_NOT_FOUND)
        return Response(RegistrationSerializer(registration).data, status=status.HTTP_200_OK)

    @swagger_auto_schema(
        responses={204: "Registration cancelled", 400: "Bad Request", 404: "Registration not found"},
        operation_description="Cancel a registration and free its slot. Not allowed once a project is submitted.",
        tags=['registrations']
    )
    def delete(self, request, registration_id):
        registration = self.get_registration(request, registration_id)
        if registration is None:
            return Response({"error": "Registration not found."}, status=status.HTTP_404_NOT_FOUND)
        cancel_registration(request.user, registration)
        return Response(status=status.HTTP_204_NO_CONTENT)
