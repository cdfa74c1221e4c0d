from django.contrib import admin
from .models import Event, Wishlist, RecentlyViewed


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ['title', 'organizer', 'event_type', 'event_date', 'registration_deadline', 'approval_status', 'registered_count', 'total_slots']
    list_filter = ['approval_status', 'event_type', 'submission_type', 'event_date']
    search_fields = ['title', 'organizer', 'location', 'description']
    readonly_fields = ['registered_count', 'impressions', 'created_at', 'updated_at']
    fieldsets = (
        ('Basic Information', {
            'fields': ('title', 'organizer', 'organizer_profile', 'location', 'event_type', 'poster_url', 'tags')
        }),
        ('Schedule and Capacity', {
            'fields': ('event_date', 'registration_deadline', 'team_size_min', 'team_size_max', 'total_slots', 'registered_count')
        }),
        ('Fees and Prizes', {
            'fields': ('registration_fee', 'prize_money', 'prizes')
        }),
        ('Content', {
            'fields': ('description', 'eligibility', 'stages', 'details', 'dates_deadlines', 'custom_sections')
        }),
        ('Review', {
            'fields': ('approval_status', 'rejection_reason', 'submission_type')
        }),
        ('Timestamps', {
            'fields': ('impressions', 'created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )


admin.site.register(Wishlist)
admin.site.register(RecentlyViewed)
