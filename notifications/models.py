# notifications/models.py
from django.db import models
from django.conf import settings

class Notification(models.Model):
    class Type(models.TextChoices):
        ATTEMPT_EVALUATED = "ATTEMPT_EVALUATED", "Attempt Evaluated"
        EVALUATION_ASSIGNED = "EVALUATION_ASSIGNED", "Evaluation Assigned"
        SYSTEM = "SYSTEM", "System"

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='notifications')
    title = models.CharField(max_length=200)
    message = models.TextField()
    type = models.CharField(max_length=30, choices=Type.choices, default=Type.SYSTEM)
    is_read = models.BooleanField(default=False)
    action_data = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.user} - {self.title}"
