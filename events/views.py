import logging

from django.db.models import Q
from rest_framework import status
from rest_framework.response import Response
from rest_framework.generics import GenericAPIView, ListAPIView
from rest_framework.permissions import IsAuthenticated, AllowAny
from rest_framework.parsers import JSONParser, MultiPartParser, FormParser
from rest_framework.views import APIView
from drf_yasg.utils import swagger_auto_schema
from drf_yasg import openapi

from accounts.models import User, UserRole
from accounts.permissions import IsOrganizer, IsAdmin
from accounts.serializers import UserRoleSerializer
from registrations.models import Registration
from submissions.models import Submission
from .models import Event, Wishlist, RecentlyViewed
from .serializers import (
    EventSerializer, CreateEventSerializer, RejectEventSerializer,
    WishlistSerializer, RecentlyViewedSerializer
)
from .services import (
    is_deadline_passed, is_slots_full, can_view_event, record_view,
    approve_event, reject_event
)

logger = logging.getLogger(__name__)

ORDERING_FIELDS = ['event_date', '-event_date', 'registration_deadline', 'prize_money', '-prize_money', '-impressions']
ACTIVITY_LIMIT = 3


class EventListView(ListAPIView):
    serializer_class = EventSerializer
    permission_classes = [AllowAny]

    def get_queryset(self):
        queryset = Event.objects.filter(approval_status=Event.APPROVED)
        params = self.request.query_params

        q = params.get('q', '').strip()
        if q:
            queryset = queryset.filter(Q(title__icontains=q) | Q(organizer__icontains=q))

        event_type = params.get('event_type')
        if event_type:
            queryset = queryset.filter(event_type__iexact=event_type)

        tag = params.get('tag')
        if tag:
            # JSON containment lookups are not available on every backend
            ids = [event.id for event in queryset.only('id', 'tags') if tag in (event.tags or [])]
            queryset = queryset.filter(id__in=ids)

        ordering = params.get('ordering', 'event_date')
        if ordering not in ORDERING_FIELDS:
            ordering = 'event_date'
        return queryset.order_by(ordering, 'id')

    @swagger_auto_schema(
        manual_parameters=[
            openapi.Parameter('q', openapi.IN_QUERY, description="Search title or organizer", type=openapi.TYPE_STRING),
            openapi.Parameter('event_type', openapi.IN_QUERY, description="Filter by event type", type=openapi.TYPE_STRING),
            openapi.Parameter('tag', openapi.IN_QUERY, description="Filter by tag", type=openapi.TYPE_STRING),
            openapi.Parameter('ordering', openapi.IN_QUERY, description=f"One of {', '.join(ORDERING_FIELDS)}", type=openapi.TYPE_STRING),
        ],
        responses={200: EventSerializer(many=True)},
        operation_description="List approved events. No authentication required.",
        tags=['events']
    )
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)


class EventDetailView(APIView):
    permission_classes = [AllowAny]

    @swagger_auto_schema(
        responses={200: EventSerializer, 404: "Event not found"},
        operation_description="Retrieve an event with the caller's registration, wishlist and result state. Counts an impression.",
        tags=['events']
    )
    def get(self, request, event_id):
        try:
            event = Event.objects.select_related('organizer_profile').get(id=event_id)
        except Event.DoesNotExist:
            return Response({"error": "Event not found."}, status=status.HTTP_404_NOT_FOUND)

        user = request.user
        if not can_view_event(user, event):
            return Response({"error": "Event not found."}, status=status.HTTP_404_NOT_FOUND)

        record_view(user, event)

        data = EventSerializer(event).data
        data['deadline_passed'] = is_deadline_passed(event)
        data['slots_full'] = is_slots_full(event)
        data['is_registered'] = False
        data['is_wishlisted'] = False
        data['submission_result'] = None

        if user.is_authenticated:
            registration = Registration.objects.filter(user=user, event=event).first()
            data['is_registered'] = registration is not None
            data['is_wishlisted'] = Wishlist.objects.filter(user=user, event=event).exists()
            if registration is not None:
                submission = Submission.objects.filter(registration=registration, result_published=True).first()
                if submission is not None:
                    data['submission_result'] = {
                        'rating': submission.rating,
                        'is_selected_for_next_round': submission.is_selected_for_next_round,
                    }
        return Response(data, status=status.HTTP_200_OK)


class EventCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated, IsOrganizer]
    serializer_class = CreateEventSerializer
    parser_classes = (JSONParser, MultiPartParser, FormParser)

    @swagger_auto_schema(
        request_body=CreateEventSerializer,
        responses={
            201: EventSerializer,
            400: "Bad Request",
            401: "Unauthorized",
            403: "Forbidden"
        },
        operation_description="Create an event. It stays pending until an admin reviews it.",
        tags=['events']
    )
    def post(self, request):
        serializer = self.get_serializer(data=request.data, context={'request': request})
        serializer.is_valid(raise_exception=True)
        event = serializer.save()
        logger.info(f"Event {event.id} created by user {request.user.id}")
        return Response(
            {"message": "Event created successfully", "event": EventSerializer(event).data, "redirect_to": "/organizer-dashboard"},
            status=status.HTTP_201_CREATED
        )


class OrganizerEventsView(ListAPIView):
    permission_classes = [IsAuthenticated, IsOrganizer]
    serializer_class = EventSerializer

    def get_queryset(self):
        return Event.objects.filter(organizer_profile__user=self.request.user).order_by('-created_at')

    @swagger_auto_schema(
        responses={200: EventSerializer(many=True), 403: "Forbidden"},
        operation_description="List events created by the signed-in organizer, newest first.",
        tags=['events']
    )
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)


class WishlistToggleView(APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        responses={201: WishlistSerializer, 200: WishlistSerializer, 404: "Event not found"},
        operation_description="Add an event to the wishlist. Adding twice is a no-op.",
        tags=['wishlist']
    )
    def post(self, request, event_id):
        try:
            event = Event.objects.get(id=event_id, approval_status=Event.APPROVED)
        except Event.DoesNotExist:
            return Response({"error": "Event not found."}, status=status.HTTP_404_NOT_FOUND)
        item, created = Wishlist.objects.get_or_create(user=request.user, event=event)
        return Response(
            WishlistSerializer(item).data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK
        )

    @swagger_auto_schema(
        responses={204: "Removed from wishlist", 404: "Not in wishlist"},
        operation_description="Remove an event from the wishlist.",
        tags=['wishlist']
    )
    def delete(self, request, event_id):
        deleted, _ = Wishlist.objects.filter(user=request.user, event_id=event_id).delete()
        if not deleted:
            return Response({"error": "Event is not in your wishlist."}, status=status.HTTP_404_NOT_FOUND)
        return Response(status=status.HTTP_204_NO_CONTENT)


class WishlistView(ListAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = WishlistSerializer

    def get_queryset(self):
        return Wishlist.objects.filter(user=self.request.user).select_related('event')

    @swagger_auto_schema(
        responses={200: WishlistSerializer(many=True)},
        operation_description="List the signed-in user's wishlist, newest first.",
        tags=['wishlist']
    )
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)


class ActivityView(APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        responses={200: "Recently viewed, wishlisted and registered events"},
        operation_description="Home page activity: the latest viewed, wishlisted and registered events.",
        tags=['events']
    )
    def get(self, request):
        user = request.user
        recent = RecentlyViewed.objects.filter(user=user).select_related('event')[:ACTIVITY_LIMIT]
        wishlist = Wishlist.objects.filter(user=user).select_related('event')[:ACTIVITY_LIMIT]
        registrations = Registration.objects.filter(user=user).select_related('event')[:ACTIVITY_LIMIT]
        return Response({
            "recently_viewed": RecentlyViewedSerializer(recent, many=True).data,
            "wishlist": WishlistSerializer(wishlist, many=True).data,
            "registered": EventSerializer([r.event for r in registrations], many=True).data,
        }, status=status.HTTP_200_OK)


class AdminDashboardView(APIView):
    permission_classes = [IsAuthenticated, IsAdmin]

    @swagger_auto_schema(
        responses={200: "Events, role rows and platform stats", 403: "Forbidden"},
        operation_description="Admin overview of every event and role assignment.",
        tags=['admin']
    )
    def get(self, request):
        events = Event.objects.order_by('-created_at')
        roles = UserRole.objects.select_related('user')
        return Response({
            "events": EventSerializer(events, many=True).data,
            "user_roles": UserRoleSerializer(roles, many=True).data,
            "stats": {
                "totalEvents": events.count(),
                "pendingApprovals": events.filter(approval_status=Event.PENDING).count(),
                "totalUsers": User.objects.count(),
                "totalRegistrations": Registration.objects.count(),
            },
        }, status=status.HTTP_200_OK)


class ApproveEventView(APIView):
    permission_classes = [IsAuthenticated, IsAdmin]

    @swagger_auto_schema(
        responses={200: EventSerializer, 400: "Already reviewed", 404: "Event not found"},
        operation_description="Approve a pending event.",
        tags=['admin']
    )
    def post(self, request, event_id):
        try:
            event = Event.objects.select_related('organizer_profile__user').get(id=event_id)
        except Event.DoesNotExist:
            return Response({"error": "Event not found."}, status=status.HTTP_404_NOT_FOUND)
        approve_event(event)
        return Response(
            {"message": "Event approved successfully", "event": EventSerializer(event).data},
            status=status.HTTP_200_OK
        )


class RejectEventView(GenericAPIView):
    permission_classes = [IsAuthenticated, IsAdmin]
    serializer_class = RejectEventSerializer

    @swagger_auto_schema(
        request_body=RejectEventSerializer,
        responses={200: EventSerializer, 400: "Bad Request", 404: "Event not found"},
        operation_description="Reject a pending event with a reason.",
        tags=['admin']
    )
    def post(self, request, event_id):
        try:
            event = Event.objects.select_related('organizer_profile__user').get(id=event_id)
        except Event.DoesNotExist:
            return Response({"error": "Event not found."}, status=status.HTTP_404_NOT_FOUND)
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        reject_event(event, serializer.validated_data.get('reason'))
        return Response(
            {"message": "Event rejected", "event": EventSerializer(event).data},
            status=status.HTTP_200_OK
        )
