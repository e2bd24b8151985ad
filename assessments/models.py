# assessments/models.py
from django.conf import settings
from django.db import models
from django.db.models import Q

from exams.models import Exam, Question
from .transitions import AttemptStatus

class Attempt(models.Model):
    """Tracks one student's timed run through an exam."""
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='attempts')
    exam = models.ForeignKey(Exam, on_delete=models.CASCADE, related_name='attempts')
    status = models.CharField(max_length=20, choices=AttemptStatus.choices, default=AttemptStatus.IN_PROGRESS)

    start_time = models.DateTimeField()
    submit_time = models.DateTimeField(null=True, blank=True)
    end_time = models.DateTimeField(null=True, blank=True)
    time_spent = models.PositiveIntegerField(default=0, help_text="Seconds")

    # Copied from exam.total_marks when the attempt is created, never re-derived
    max_score = models.DecimalField(max_digits=10, decimal_places=4, editable=False)

    # Result (null until scored)
    score = models.DecimalField(max_digits=10, decimal_places=4, null=True, blank=True)
    percentage = models.DecimalField(max_digits=7, decimal_places=2, null=True, blank=True)
    correct_answers = models.PositiveIntegerField(null=True, blank=True)
    incorrect_answers = models.PositiveIntegerField(null=True, blank=True)
    unattempted = models.PositiveIntegerField(null=True, blank=True)
    accuracy = models.DecimalField(max_digits=5, decimal_places=2, null=True, blank=True)
    rank = models.PositiveIntegerField(null=True, blank=True)

    # Evaluation workflow
    answer_sheet_url = models.URLField(max_length=500, blank=True)
    evaluation_status = models.CharField(max_length=50, blank=True)
    evaluated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True,
        related_name='assigned_attempts'
    )
    feedback = models.JSONField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        constraints = [
            models.UniqueConstraint(
                fields=['user', 'exam'],
                condition=Q(status=AttemptStatus.IN_PROGRESS),
                name='one_in_progress_attempt_per_exam',
            ),
        ]

    @property
    def is_writable(self):
        return self.status == AttemptStatus.IN_PROGRESS

    def percentage_for(self, score):
        if score is None:
            return None
        if not self.max_score:
            return 0
        return round(score / self.max_score * 100, 2)

    def __str__(self):
        return f"{self.user} - {self.exam.title} ({self.status})"

class Answer(models.Model):
    attempt = models.ForeignKey(Attempt, related_name='answers', on_delete=models.CASCADE)
    question = models.ForeignKey(Question, related_name='answers', on_delete=models.CASCADE)

    # For MCQ
    selected_option = models.CharField(max_length=255, null=True, blank=True)

    # For descriptive
    answer_text = models.TextField(null=True, blank=True)

    # Seconds, accumulated across writes
    time_spent = models.PositiveIntegerField(default=0)

    # Grading (null until scored or evaluated)
    marks = models.DecimalField(max_digits=10, decimal_places=4, null=True, blank=True)
    feedback = models.TextField(blank=True)
    evaluated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True,
        related_name='evaluated_answers'
    )
    evaluated_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        unique_together = ('attempt', 'question')

    def __str__(self):
        return f"Answer {self.attempt_id}/{self.question_id}"
