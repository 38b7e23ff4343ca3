from django.urls import path

from rest_framework_simplejwt.views import TokenRefreshView

from . import health, views

app_name = "core"

urlpatterns = [
    # Health checks
    path("health/", health.health_check, name="health_check"),
    path("health/detailed/", health.health_check_detailed, name="health_check_detailed"),
    # Authentication endpoints
    path("api/auth/login/", views.PosTokenObtainPairView.as_view(), name="token_obtain_pair"),
    path("api/auth/refresh/", TokenRefreshView.as_view(), name="token_refresh"),
    path("api/auth/logout/", views.LogoutView.as_view(), name="logout"),
    # Current user
    path("api/user/", views.current_user, name="current_user"),
    path("api/user/password/change/", views.PasswordChangeView.as_view(), name="password_change"),
    # User management (administrators)
    path("api/users/", views.UserListCreateView.as_view(), name="user_list"),
    path("api/users/<int:pk>/", views.UserDetailView.as_view(), name="user_detail"),
]
