from django.contrib import admin
from .models import Registration, TeamMember


class TeamMemberInline(admin.TabularInline):
    model = TeamMember
    extra = 0


@admin.register(Registration)
class RegistrationAdmin(admin.ModelAdmin):
    list_display = ['user', 'event', 'team_name', 'status', 'payment_status', 'created_at']
    list_filter = ['status', 'payment_status']
    search_fields = ['user__email', 'event__title', 'team_name']
    readonly_fields = ['created_at']
    inlines = [TeamMemberInline]
