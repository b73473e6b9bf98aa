from django.urls import include, path
from rest_framework.routers import DefaultRouter

from backend.trips.views import (
    RideRequestCreatedView,
    RideRequestViewSet,
    SendRideNotificationView,
    VolunteerViewSet,
)
from backend.users.views import RegisterView, SignInView, SignOutView, UserDetailView

router = DefaultRouter()
router.register(r'rides', RideRequestViewSet, basename='ride')
router.register(r'volunteers', VolunteerViewSet, basename='volunteer')

urlpatterns = [
    path('api/v1/', include(router.urls)),
    path('api/v1/events/ride-request-created/', RideRequestCreatedView.as_view(), name='ride-request-created'),
    path('api/v1/notifications/send/', SendRideNotificationView.as_view(), name='send-ride-notification'),
    path('api/v1/auth/register/', RegisterView.as_view(), name='register'),
    path('api/v1/auth/sign-in/', SignInView.as_view(), name='sign-in'),
    path('api/v1/auth/sign-out/', SignOutView.as_view(), name='sign-out'),
    path('api/v1/auth/me/', UserDetailView.as_view(), name='user-detail'),
]
