from django.conf import settings
from rest_framework import serializers

from accounts.models import Organizer
from accounts.validators import required_text, optional_text, optional_url
from utils.storage import upload_image
from .models import Event, Wishlist, RecentlyViewed


def _number_messages(message):
    return {'min_value': message, 'invalid': "A valid number is required."}


class EventSerializer(serializers.ModelSerializer):
    class Meta:
        model = Event
        fields = [
            'id', 'title', 'organizer', 'location', 'event_type', 'event_date', 'registration_deadline',
            'team_size_min', 'team_size_max', 'total_slots', 'registered_count', 'registration_fee',
            'prize_money', 'poster_url', 'description', 'eligibility', 'stages', 'details',
            'dates_deadlines', 'prizes', 'tags', 'custom_sections', 'submission_type',
            'approval_status', 'rejection_reason', 'impressions', 'created_at', 'updated_at'
        ]
        read_only_fields = fields


class CreateEventSerializer(serializers.ModelSerializer):
    title = required_text(200, "Event title is required", label='Event title')
    organizer = required_text(100, "Name is required", label='Name')
    location = required_text(300, "Location is required", label='Location')
    event_type = serializers.CharField(
        max_length=100,
        required=False,
        allow_blank=True,
        error_messages={'max_length': "Event type must be less than 100 characters"},
    )
    event_date = serializers.DateTimeField(error_messages={'required': "Event date is required", 'null': "Event date is required"})
    registration_deadline = serializers.DateTimeField(
        error_messages={'required': "Registration deadline is required", 'null': "Registration deadline is required"}
    )
    team_size_min = serializers.IntegerField(min_value=1, default=1, error_messages=_number_messages("Minimum team size must be at least 1"))
    team_size_max = serializers.IntegerField(min_value=1, default=1, error_messages=_number_messages("Maximum team size must be at least 1"))
    total_slots = serializers.IntegerField(min_value=1, default=100, error_messages=_number_messages("Total slots must be at least 1"))
    registration_fee = serializers.IntegerField(min_value=0, default=0, error_messages=_number_messages("Registration fee cannot be negative"))
    prize_money = serializers.IntegerField(min_value=0, required=False, allow_null=True, error_messages=_number_messages("Prize money cannot be negative"))
    poster_url = optional_url()
    poster = serializers.ImageField(write_only=True, required=False)
    description = required_text(2000, "Description is required")
    eligibility = optional_text(1000)
    stages = optional_text(1000)
    details = optional_text(2000)
    dates_deadlines = optional_text(1000)
    prizes = optional_text(1000)
    tags = serializers.ListField(child=serializers.CharField(max_length=50), required=False)
    custom_sections = serializers.JSONField(required=False)
    submission_type = serializers.ChoiceField(choices=Event.SUBMISSION_CHOICES, default=Event.SUBMISSION_NONE)

    class Meta:
        model = Event
        fields = [
            'title', 'organizer', 'location', 'event_type', 'event_date', 'registration_deadline',
            'team_size_min', 'team_size_max', 'total_slots', 'registration_fee', 'prize_money',
            'poster_url', 'poster', 'description', 'eligibility', 'stages', 'details',
            'dates_deadlines', 'prizes', 'tags', 'custom_sections', 'submission_type'
        ]

    def validate_custom_sections(self, value):
        if value in (None, ''):
            return []
        if not isinstance(value, list):
            raise serializers.ValidationError("Custom sections must be a list.")
        sections = []
        for section in value:
            if not isinstance(section, dict):
                raise serializers.ValidationError("Each custom section needs a title and a description.")
            title = str(section.get('title', '')).strip()
            description = str(section.get('description', '')).strip()
            # half-filled rows from the form are dropped
            if not title and not description:
                continue
            if not title:
                raise serializers.ValidationError("Custom section title is required")
            sections.append({'title': title[:200], 'description': description[:1000]})
        return sections

    def validate(self, data):
        if data['team_size_min'] > data['team_size_max']:
            raise serializers.ValidationError("Minimum team size cannot exceed maximum team size.")
        return data

    def create(self, validated_data):
        user = self.context['request'].user
        try:
            organizer_profile = Organizer.objects.get(user=user)
        except Organizer.DoesNotExist:
            raise serializers.ValidationError("Organizer profile not found")

        poster = validated_data.pop('poster', None)
        if poster:
            validated_data['poster_url'] = upload_image(poster, folder=settings.POSTER_UPLOAD_FOLDER)

        validated_data['event_type'] = validated_data.get('event_type') or 'Hackathon'
        validated_data['eligibility'] = validated_data.get('eligibility') or 'Everyone can apply'
        validated_data.setdefault('tags', [])
        validated_data.setdefault('custom_sections', [])
        return Event.objects.create(
            organizer_profile=organizer_profile,
            approval_status=Event.PENDING,
            **validated_data
        )


class RejectEventSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True)


class WishlistSerializer(serializers.ModelSerializer):
    event = EventSerializer(read_only=True)

    class Meta:
        model = Wishlist
        fields = ['id', 'event', 'created_at']


class RecentlyViewedSerializer(serializers.ModelSerializer):
    event = EventSerializer(read_only=True)

    class Meta:
        model = RecentlyViewed
        fields = ['id', 'event', 'viewed_at']
