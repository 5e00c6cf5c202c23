from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import CustomUserViewSet, LoginView, LogoutView, RegisterView, MeView

app_name = "users"

router = DefaultRouter()
router.register(r"users", CustomUserViewSet, basename="user")

urlpatterns = [
    path("", include(router.urls)),
    path("me/", MeView.as_view(), name="me"),
    path("login/", LoginView.as_view(), name="login"),
    path("logout/", LogoutView.as_view(), name="logout"),
    path("register/", RegisterView.as_view(), name="register"),
]
