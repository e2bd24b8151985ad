# exams/serializers.py
from rest_framework import serializers
from .models import Exam, Question

# --- Question Serializers ---

class QuestionSerializer(serializers.ModelSerializer):
    """Question as shown to a candidate. Never exposes the correct option."""
    question_text = serializers.CharField(source='text', read_only=True)

    class Meta:
        model = Question
        fields = [
            'id', 'question_number', 'question_text', 'question_type',
            'options', 'marks', 'word_limit'
        ]
        read_only_fields = fields

# --- Exam Serializers ---

class ExamSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Exam
        fields = ['id', 'title', 'total_marks']

class ExamDetailSerializer(serializers.ModelSerializer):
    """Exam with marking scheme and questions, used when loading an attempt."""
    questions = QuestionSerializer(many=True, read_only=True)
    total_questions = serializers.IntegerField(source='questions.count', read_only=True)

    class Meta:
        model = Exam
        fields = [
            'id', 'title', 'duration_minutes', 'total_marks',
            'negative_marking', 'correct_mark', 'incorrect_mark',
            'total_questions', 'questions'
        ]
