from rest_framework import serializers

from accounts.validators import optional_url
from registrations.serializers import TeamMemberSerializer
from .models import Submission
from .services import (
    can_edit_submission, submission_status, team_display_name
)


class SubmissionSerializer(serializers.ModelSerializer):
    status = serializers.SerializerMethodField()
    can_edit = serializers.SerializerMethodField()

    class Meta:
        model = Submission
        fields = [
            'id', 'event', 'github_link', 'file_url', 'rating', 'is_selected_for_next_round',
            'result_published', 'evaluation_notes', 'status', 'can_edit', 'submitted_at', 'updated_at'
        ]
        read_only_fields = fields

    def get_status(self, obj):
        return submission_status(obj)

    def get_can_edit(self, obj):
        return can_edit_submission(obj)

    def to_representation(self, instance):
        data = super().to_representation(instance)
        # the owner sees the evaluation only once results are out
        if not instance.result_published:
            data['rating'] = None
            data['is_selected_for_next_round'] = None
            data['evaluation_notes'] = None
        return data


class SubmitProjectSerializer(serializers.Serializer):
    github_link = optional_url()
    file = serializers.FileField(required=False, allow_empty_file=False)


class ReviewSubmissionSerializer(serializers.ModelSerializer):
    display_name = serializers.SerializerMethodField()
    team_name = serializers.CharField(source='registration.team_name', read_only=True)
    members = TeamMemberSerializer(source='registration.members', many=True, read_only=True)

    class Meta:
        model = Submission
        fields = [
            'id', 'display_name', 'team_name', 'members', 'github_link', 'file_url', 'rating',
            'is_selected_for_next_round', 'evaluation_notes', 'result_published', 'submitted_at', 'updated_at'
        ]
        read_only_fields = fields

    def get_display_name(self, obj):
        return team_display_name(obj.registration)


class EvaluateSubmissionSerializer(serializers.Serializer):
    rating = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    is_selected_for_next_round = serializers.BooleanField(default=False)
    evaluation_notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)
