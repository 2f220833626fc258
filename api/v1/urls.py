from django.urls import path, include
from rest_framework_simplejwt.views import TokenRefreshView

from .routers import urlpatterns as router_urls
from apps.users.views_auth import CustomTokenObtainPairView

urlpatterns = [
    path('', include(router_urls)),
    path('auth/login/', CustomTokenObtainPairView.as_view(), name='login'),
    path('auth/refresh/', TokenRefreshView.as_view(), name='token-refresh'),
]
