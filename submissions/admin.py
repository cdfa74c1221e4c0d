from django.contrib import admin
from .models import Submission


@admin.register(Submission)
class SubmissionAdmin(admin.ModelAdmin):
    list_display = ['id', 'event', 'registration', 'rating', 'is_selected_for_next_round', 'result_published', 'submitted_at']
    list_filter = ['result_published', 'is_selected_for_next_round', 'event']
    search_fields = ['event__title', 'registration__team_name', 'registration__user__email']
    readonly_fields = ['submitted_at', 'updated_at']
