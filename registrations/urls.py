from django.urls import path
from .views import RegisterView, MyRegistrationsView, RegistrationDetailView

urlpatterns = [
    path('events/<int:event_id>/register/', RegisterView.as_view(), name='event_register'),
    path('mine/', MyRegistrationsView.as_view(), name='my_registrations'),
    path('<int:registration_id>/', RegistrationDetailView.as_view(), name='registration_detail'),
]
