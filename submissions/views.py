from rest_framework import status
from rest_framework.response import Response
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.parsers import JSONParser, MultiPartParser, FormParser
from rest_framework.views import APIView
from drf_yasg.utils import swagger_auto_schema
from drf_yasg import openapi

from accounts.permissions import IsStudent
from events.models import Event
from events.serializers import EventSerializer
from events.services import can_manage_event
from registrations.models import Registration
from .models import Submission
from .serializers import (
    SubmissionSerializer, SubmitProjectSerializer, ReviewSubmissionSerializer,
    EvaluateSubmissionSerializer
)
from .services import (
    submission_status, can_edit_submission, submit_project, submission_rows,
    evaluate_submission, publish_results
)


class SubmitProjectView(GenericAPIView):
    permission_classes = [IsAuthenticated, IsStudent]
    serializer_class = SubmitProjectSerializer
    parser_classes = (MultiPartParser, FormParser, JSONParser)

    def get_registration(self, request, event_id):
        return Registration.objects.select_related('event').filter(user=request.user, event_id=event_id).first()

    @swagger_auto_schema(
        responses={200: SubmissionSerializer, 404: "Not registered for this event"},
        operation_description="Retrieve the signed-in student's submission for an event with its status.",
        tags=['submissions']
    )
    def get(self, request, event_id):
        registration = self.get_registration(request, event_id)
        if registration is None:
            return Response({"error": "You are not registered for this event."}, status=status.HTTP_404_NOT_FOUND)
        submission = Submission.objects.filter(registration=registration).first()
        return Response(
            {
                "event": EventSerializer(registration.event).data,
                "submission": SubmissionSerializer(submission).data if submission else None,
                "status": submission_status(submission),
                "can_edit": can_edit_submission(submission),
            },
            status=status.HTTP_200_OK
        )

    @swagger_auto_schema(
        request_body=SubmitProjectSerializer,
        responses={
            201: SubmissionSerializer,
            200: SubmissionSerializer,
            400: "Bad Request",
            403: "Already evaluated",
            404: "Not registered for this event"
        },
        operation_description="Submit or update the project for an event. Locked once the submission is rated.",
        tags=['submissions']
    )
    def post(self, request, event_id):
        registration = self.get_registration(request, event_id)
        if registration is None:
            return Response({"error": "You are not registered for this event."}, status=status.HTTP_404_NOT_FOUND)

        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        existed = Submission.objects.filter(registration=registration).exists()
        submission = submit_project(
            request.user,
            registration,
            github_link=serializer.validated_data.get('github_link'),
            upload=serializer.validated_data.get('file'),
        )
        return Response(
            {
                "message": "Project updated successfully!" if existed else "Project submitted successfully!",
                "submission": SubmissionSerializer(submission).data,
                "redirect_to": f"/event/{event_id}"
            },
            status=status.HTTP_200_OK if existed else status.HTTP_201_CREATED
        )


class EventReviewMixin:
    def get_event(self, request, event_id):
        """Return ``(event, error_response)`` for an event the caller may review."""
        try:
            event = Event.objects.select_related('organizer_profile').get(id=event_id)
        except Event.DoesNotExist:
            return None, Response({"error": "Event not found."}, status=status.HTTP_404_NOT_FOUND)
        if not can_manage_event(request.user, event):
            return None, Response(
                {"error": "You are not authorized to review submissions for this event."},
                status=status.HTTP_403_FORBIDDEN
            )
        return event, None


class ReviewSubmissionsView(EventReviewMixin, APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        manual_parameters=[
            openapi.Parameter(
                'order',
                openapi.IN_QUERY,
                description="Sort by rating: desc (default) or asc",
                type=openapi.TYPE_STRING
            )
        ],
        responses={200: ReviewSubmissionSerializer(many=True), 403: "Forbidden", 404: "Event not found"},
        operation_description="List every submission for an event, sorted by rating.",
        tags=['evaluation']
    )
    def get(self, request, event_id):
        event, error = self.get_event(request, event_id)
        if error:
            return error
        descending = request.query_params.get('order', 'desc') != 'asc'
        rows = submission_rows(event, descending=descending)
        return Response(
            {
                "event": EventSerializer(event).data,
                "submissions": ReviewSubmissionSerializer(rows, many=True).data,
            },
            status=status.HTTP_200_OK
        )


class PublishResultsView(EventReviewMixin, APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        responses={200: "Number of published submissions", 403: "Forbidden", 404: "Event not found"},
        operation_description="Publish results for every submission of an event.",
        tags=['evaluation']
    )
    def post(self, request, event_id):
        event, error = self.get_event(request, event_id)
        if error:
            return error
        count = publish_results(event)
        return Response({"message": "Results published successfully", "published": count}, status=status.HTTP_200_OK)


class EvaluateSubmissionView(EventReviewMixin, GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = EvaluateSubmissionSerializer

    @swagger_auto_schema(
        request_body=EvaluateSubmissionSerializer,
        responses={200: ReviewSubmissionSerializer, 400: "Bad Request", 403: "Forbidden", 404: "Submission not found"},
        operation_description="Rate a submission and flag it for the next round.",
        tags=['evaluation']
    )
    def post(self, request, submission_id):
        try:
            submission = Submission.objects.select_related('registration').get(id=submission_id)
        except Submission.DoesNotExist:
            return Response({"error": "Submission not found."}, status=status.HTTP_404_NOT_FOUND)
        _, error = self.get_event(request, submission.event_id)
        if error:
            return error

        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        evaluate_submission(
            submission,
            data.get('rating'),
            is_selected=data.get('is_selected_for_next_round', False),
            notes=data.get('evaluation_notes'),
        )
        return Response(
            {"message": "Evaluation saved successfully", "submission": ReviewSubmissionSerializer(submission).data},
            status=status.HTTP_200_OK
        )
