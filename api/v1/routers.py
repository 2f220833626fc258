from rest_framework.routers import DefaultRouter

from apps.users.views import UserViewSet, EmployeeProfileViewSet
from apps.goals.views import GoalPlanViewSet
from apps.comms.views import NotificationViewSet

router = DefaultRouter()

# Users
router.register(r'users', UserViewSet, basename='user')
router.register(r'profiles', EmployeeProfileViewSet, basename='profile')

# Goals
router.register(r'goal-plans', GoalPlanViewSet, basename='goal-plans')

# Communication
router.register(r'comms/notifications', NotificationViewSet, basename='notifications')

urlpatterns = router.urls
