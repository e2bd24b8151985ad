# exams/models.py
from decimal import Decimal

from django.conf import settings
from django.db import models

class TestSeries(models.Model):
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    teacher = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, related_name='test_series')
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name_plural = "test series"

    def __str__(self):
        return self.title

class Exam(models.Model):
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    teacher = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, related_name='exams')
    # Exams outside a series are sold individually (or free)
    test_series = models.ForeignKey(TestSeries, on_delete=models.SET_NULL, null=True, blank=True, related_name='exams')

    duration_minutes = models.PositiveIntegerField(default=60)
    total_marks = models.DecimalField(max_digits=10, decimal_places=4, default=Decimal("0"))

    # Marking scheme
    negative_marking = models.BooleanField(default=False)
    correct_mark = models.DecimalField(max_digits=10, decimal_places=4, default=Decimal("1"))
    incorrect_mark = models.DecimalField(
        max_digits=10, decimal_places=4, default=Decimal("0"),
        help_text="Signed value added for a wrong MCQ answer, e.g. -0.66"
    )

    is_free = models.BooleanField(default=False)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.title

class Question(models.Model):
    class QuestionType(models.TextChoices):
        MCQ = "MCQ", "Multiple Choice"
        DESCRIPTIVE = "DESCRIPTIVE", "Descriptive"

    exam = models.ForeignKey(Exam, related_name='questions', on_delete=models.CASCADE)
    question_number = models.PositiveIntegerField(default=1)
    text = models.TextField()
    question_type = models.CharField(max_length=20, choices=QuestionType.choices, default=QuestionType.MCQ)

    # MCQ: option labels such as ["a", "b", "c", "d"]
    options = models.JSONField(default=list, blank=True)
    correct_option = models.CharField(max_length=255, blank=True)

    # Null means "use the default of 1 mark"
    marks = models.DecimalField(max_digits=10, decimal_places=4, null=True, blank=True)
    word_limit = models.PositiveIntegerField(null=True, blank=True)

    class Meta:
        ordering = ['question_number', 'id']

    @property
    def is_mcq(self):
        return self.question_type == self.QuestionType.MCQ

    def __str__(self):
        return f"Q{self.question_number}: {self.text[:50]}"
