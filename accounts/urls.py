from django.urls import path
from rest_framework_simplejwt.views import TokenRefreshView
from .views import (
    SignupView,
    LoginView,
    LogoutView,
    MeView,
    RoleCheckView,
    ProfileView,
    OrganizerProfileView
)

urlpatterns = [
    path('signup/', SignupView.as_view(), name='signup'),
    path('login/', LoginView.as_view(), name='login'),
    path('logout/', LogoutView.as_view(), name='logout'),
    path('token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),
    path('me/', MeView.as_view(), name='me'),
    path('role-check/', RoleCheckView.as_view(), name='role_check'),
    path('profile/', ProfileView.as_view(), name='profile'),
    path('organizer-profile/', OrganizerProfileView.as_view(), name='organizer_profile'),
]
