from rest_framework import serializers

from accounts.validators import required_text, optional_url, email_field, validate_phone
from events.serializers import EventSerializer
from .models import Registration, TeamMember


class TeamMemberSerializer(serializers.ModelSerializer):
    name = required_text(100, "Name is required", label='Name')
    email = email_field()
    phone = serializers.CharField(
        error_messages={
            'blank': "Phone number must be exactly 10 digits",
            'required': "Phone number must be exactly 10 digits",
        },
    )
    college_name = required_text(200, "College name is required", label='College name')
    photo_url = optional_url()
    is_leader = serializers.BooleanField(default=False)
    additional_info = serializers.JSONField(required=False, allow_null=True)

    class Meta:
        model = TeamMember
        fields = ['id', 'name', 'email', 'phone', 'college_name', 'photo_url', 'is_leader', 'additional_info']
        read_only_fields = ['id']

    def validate_phone(self, value):
        return validate_phone(value)

    def validate_photo_url(self, value):
        return value or None


class RegisterTeamSerializer(serializers.Serializer):
    team_name = serializers.CharField(max_length=100, required=False, allow_blank=True, allow_null=True)
    members = serializers.ListField(
        child=serializers.DictField(),
        allow_empty=False,
        error_messages={'empty': "At least one team member is required"},
    )


class RegistrationSerializer(serializers.ModelSerializer):
    members = TeamMemberSerializer(many=True, read_only=True)
    event = EventSerializer(read_only=True)

    class Meta:
        model = Registration
        fields = ['id', 'event', 'team_name', 'status', 'payment_status', 'members', 'created_at']
        read_only_fields = fields
