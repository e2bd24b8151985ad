from rest_framework import serializers

from exams.serializers import ExamSummarySerializer, ExamDetailSerializer
from users.serializers import UserSummarySerializer
from .models import Attempt, Answer
from .transitions import AttemptStatus

# --- Attempt Serializers ---

class AttemptSerializer(serializers.ModelSerializer):
    """Lightweight serializer for lists / dashboards."""
    user = UserSummarySerializer(read_only=True)
    exam = ExamSummarySerializer(read_only=True)
    evaluator = UserSummarySerializer(source='evaluated_by', read_only=True)

    class Meta:
        model = Attempt
        fields = [
            'id', 'user', 'exam', 'status', 'start_time', 'submit_time', 'end_time',
            'time_spent', 'max_score', 'score', 'percentage', 'correct_answers',
            'incorrect_answers', 'unattempted', 'accuracy', 'rank',
            'answer_sheet_url', 'evaluation_status', 'evaluator', 'feedback', 'created_at'
        ]
        read_only_fields = fields

class AttemptDetailSerializer(AttemptSerializer):
    """Heavy serializer for taking the exam. Includes QUESTIONS."""
    exam = ExamDetailSerializer(read_only=True)

class AttemptCreateSerializer(serializers.Serializer):
    exam_id = serializers.IntegerField()
    time_spent = serializers.IntegerField(min_value=0, required=False, default=0)

class StudentAttemptUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=AttemptStatus.choices, required=False)
    time_spent = serializers.IntegerField(min_value=0, required=False)

class EvaluatorAttemptUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=AttemptStatus.choices, required=False)
    score = serializers.DecimalField(max_digits=10, decimal_places=4, required=False, allow_null=True)
    evaluation_status = serializers.CharField(max_length=50, required=False, allow_blank=True)
    feedback = serializers.JSONField(required=False, allow_null=True)
    correct_answers = serializers.IntegerField(min_value=0, required=False)
    incorrect_answers = serializers.IntegerField(min_value=0, required=False)
    unattempted = serializers.IntegerField(min_value=0, required=False)
    accuracy = serializers.DecimalField(max_digits=5, decimal_places=2, min_value=0, max_value=100, required=False)
    rank = serializers.IntegerField(min_value=1, required=False)
    answer_sheet_url = serializers.URLField(max_length=500, required=False, allow_blank=True)

# --- Answer Serializers ---

class AnswerSerializer(serializers.ModelSerializer):
    question_number = serializers.IntegerField(source='question.question_number', read_only=True)
    question_type = serializers.CharField(source='question.question_type', read_only=True)

    class Meta:
        model = Answer
        fields = [
            'id', 'attempt', 'question', 'question_number', 'question_type',
            'selected_option', 'answer_text', 'time_spent', 'marks', 'feedback',
            'evaluated_by', 'evaluated_at'
        ]
        read_only_fields = fields

class AnswerWriteSerializer(serializers.Serializer):
    attempt_id = serializers.IntegerField()
    question_id = serializers.IntegerField()
    selected_option = serializers.CharField(max_length=255, required=False, allow_null=True, allow_blank=True)
    answer_text = serializers.CharField(max_length=10000, required=False, allow_null=True, allow_blank=True)
    time_spent = serializers.IntegerField(min_value=0, required=False)

class AnswerUpdateSerializer(serializers.Serializer):
    selected_option = serializers.CharField(max_length=255, required=False, allow_null=True, allow_blank=True)
    answer_text = serializers.CharField(max_length=10000, required=False, allow_null=True, allow_blank=True)
    time_spent = serializers.IntegerField(min_value=0, required=False)

class EvaluateAnswerSerializer(serializers.Serializer):
    marks = serializers.DecimalField(max_digits=10, decimal_places=4, min_value=0)
    feedback = serializers.CharField(required=False, allow_blank=True, default="")

class BulkEvaluationItemSerializer(serializers.Serializer):
    question_id = serializers.IntegerField()
    marks = serializers.DecimalField(max_digits=10, decimal_places=4, min_value=0)
    feedback = serializers.CharField(required=False, allow_blank=True, default="")
