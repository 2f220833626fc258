from django.db.models.signals import post_save
from django.dispatch import receiver
from django.contrib.auth import get_user_model
from .models import EmployeeProfile

User = get_user_model()


@receiver(post_save, sender=User)
def ensure_profile_exists(sender, instance, created, **kwargs):
    """Every user gets a profile on creation; HR and managers own goal plans too"""
    if created:
        EmployeeProfile.objects.get_or_create(user=instance)
