from django.urls import path
from .views import (
    EventListView, EventDetailView, EventCreateView, OrganizerEventsView,
    WishlistToggleView, WishlistView, ActivityView,
    AdminDashboardView, ApproveEventView, RejectEventView
)

urlpatterns = [
    path('', EventListView.as_view(), name='event_list'),
    path('create/', EventCreateView.as_view(), name='event_create'),
    path('wishlist/', WishlistView.as_view(), name='wishlist'),
    path('activity/', ActivityView.as_view(), name='activity'),
    path('organizer/', OrganizerEventsView.as_view(), name='organizer_events'),
    path('admin/dashboard/', AdminDashboardView.as_view(), name='admin_dashboard'),
    path('admin/<int:event_id>/approve/', ApproveEventView.as_view(), name='event_approve'),
    path('admin/<int:event_id>/reject/', RejectEventView.as_view(), name='event_reject'),
    path('<int:event_id>/', EventDetailView.as_view(), name='event_detail'),
    path('<int:event_id>/wishlist/', WishlistToggleView.as_view(), name='event_wishlist'),
]
