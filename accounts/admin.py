from django.contrib import admin
from .models import User, UserRole, Profile, Organizer


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ['email', 'full_name', 'is_active', 'is_staff', 'date_joined']
    search_fields = ['email', 'full_name']
    readonly_fields = ['date_joined', 'last_login']


@admin.register(UserRole)
class UserRoleAdmin(admin.ModelAdmin):
    list_display = ['user', 'role', 'created_at']
    list_filter = ['role']
    search_fields = ['user__email']


@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    list_display = ['full_name', 'college_name', 'degree', 'passout_year']
    search_fields = ['full_name', 'college_name', 'user__email']


@admin.register(Organizer)
class OrganizerAdmin(admin.ModelAdmin):
    list_display = ['organization_name', 'contact_email', 'user', 'created_at']
    search_fields = ['organization_name', 'contact_email', 'user__email']
