# payments/models.py
from django.db import models
from django.conf import settings
from exams.models import Exam, TestSeries

class Purchase(models.Model):
    class Type(models.TextChoices):
        INDIVIDUAL_EXAM = "INDIVIDUAL_EXAM", "Individual Exam"
        TEST_SERIES = "TEST_SERIES", "Test Series"
        COURSE = "COURSE", "Course"

    class Status(models.TextChoices):
        PENDING = "PENDING", "Pending"
        COMPLETED = "COMPLETED", "Completed"
        FAILED = "FAILED", "Failed"
        REFUNDED = "REFUNDED", "Refunded"

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='purchases')
    type = models.CharField(max_length=20, choices=Type.choices)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)

    exam = models.ForeignKey(Exam, on_delete=models.CASCADE, null=True, blank=True, related_name='purchases')
    test_series = models.ForeignKey(TestSeries, on_delete=models.CASCADE, null=True, blank=True, related_name='purchases')

    amount = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    reference = models.CharField(max_length=100, unique=True) # Gateway reference
    # Null means the purchase never expires
    valid_till = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.user} - {self.type} - {self.status}"
