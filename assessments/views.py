from rest_framework import viewsets, permissions, status, filters
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response

from cores.models import AuditLog
from .models import Attempt, Answer
from .permissions import IsTeacherOrAdmin, IsPlatformAdmin
from .serializers import (
    AttemptSerializer, AttemptDetailSerializer, AttemptCreateSerializer,
    StudentAttemptUpdateSerializer, EvaluatorAttemptUpdateSerializer,
    AnswerSerializer, AnswerWriteSerializer, AnswerUpdateSerializer,
    EvaluateAnswerSerializer, BulkEvaluationItemSerializer
)
from .services import AttemptService, AnswerService, EvaluationService
from .transitions import STAFF_ROLES, AttemptStatus

SORTABLE_FIELDS = {
    'created_at', 'start_time', 'submit_time', 'score', 'percentage',
    'accuracy', 'rank', 'status', 'time_spent'
}


class AttemptViewSet(viewsets.GenericViewSet):
    queryset = Attempt.objects.select_related('user', 'exam', 'evaluated_by')
    lookup_value_regex = r'\d+'

    # Enable search on student name/email and exam title
    filter_backends = [filters.SearchFilter]
    search_fields = ['user__first_name', 'user__last_name', 'user__email', 'exam__title']

    def get_serializer_class(self):
        if self.action == 'retrieve':
            return AttemptDetailSerializer
        return AttemptSerializer

    def get_permissions(self):
        if self.action in ['evaluations', 'by_exam']:
            return [IsTeacherOrAdmin()]
        if self.action == 'assign':
            return [IsPlatformAdmin()]
        return [permissions.IsAuthenticated()]

    @property
    def is_staff_user(self):
        return self.request.user.acting_role in STAFF_ROLES

    def get_queryset(self):
        queryset = super().get_queryset()
        params = self.request.query_params

        # Students only ever see their own attempts
        if not self.is_staff_user:
            queryset = queryset.filter(user=self.request.user)

        for param, lookup in [
            ('user_id', 'user_id'),
            ('exam_id', 'exam_id'),
            ('status', 'status'),
            ('evaluation_status', 'evaluation_status'),
            ('evaluated_by', 'evaluated_by_id'),
        ]:
            value = params.get(param)
            if value:
                queryset = queryset.filter(**{lookup: value})

        sort_by = params.get('sort_by', 'created_at')
        if sort_by not in SORTABLE_FIELDS:
            raise ValidationError(f"Cannot sort by '{sort_by}'")
        prefix = '' if params.get('sort_order', 'desc') == 'asc' else '-'
        return queryset.order_by(f"{prefix}{sort_by}", '-id')

    def _paginated(self, queryset):
        queryset = self.filter_queryset(queryset)
        page = self.paginate_queryset(queryset)
        serializer = AttemptSerializer(page if page is not None else queryset, many=True)
        if page is not None:
            return self.get_paginated_response(serializer.data)
        return Response(serializer.data)

    def list(self, request):
        return self._paginated(self.get_queryset())

    def retrieve(self, request, pk=None):
        return Response(AttemptDetailSerializer(self.get_object()).data)

    def create(self, request):
        serializer = AttemptCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        attempt = AttemptService.create(
            user=request.user,
            exam_id=serializer.validated_data['exam_id'],
            time_spent=serializer.validated_data['time_spent'],
        )
        return Response(AttemptDetailSerializer(attempt).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, pk=None):
        if self.is_staff_user:
            serializer = EvaluatorAttemptUpdateSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            attempt = AttemptService.evaluator_update(
                attempt_id=pk, actor=request.user, data=serializer.validated_data
            )
            if serializer.validated_data.get('status') == AttemptStatus.EVALUATED:
                AuditLog.record(request.user, 'GRADE', attempt, f"Attempt evaluated, score {attempt.score}")
        else:
            serializer = StudentAttemptUpdateSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            attempt = AttemptService.student_update(
                attempt_id=pk, user=request.user, **serializer.validated_data
            )
        return Response(AttemptSerializer(attempt).data)

    def destroy(self, request, pk=None):
        removed_id = AttemptService.remove(attempt_id=pk, actor=request.user)
        AuditLog.objects.create(
            actor=request.user,
            action='DELETE',
            target_model='Attempt',
            target_object_id=str(removed_id),
            details=f"Deleted attempt {removed_id}"
        )
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=['post'])
    def submit(self, request, pk=None):
        """Student submits the attempt; MCQ answers are scored immediately."""
        serializer = StudentAttemptUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        attempt = AttemptService.submit(
            attempt_id=pk, user=request.user, time_spent=serializer.validated_data.get('time_spent')
        )
        return Response(AttemptSerializer(attempt).data)

    @action(detail=False, methods=['get'])
    def mine(self, request):
        return self._paginated(self.get_queryset().filter(user=request.user))

    @action(detail=False, methods=['get'])
    def evaluations(self, request):
        """Attempts assigned to the logged-in teacher for evaluation."""
        return self._paginated(self.get_queryset().filter(evaluated_by=request.user))

    @action(detail=False, methods=['get'], url_path=r'exam/(?P<exam_id>\d+)')
    def by_exam(self, request, exam_id=None):
        return self._paginated(self.get_queryset().filter(exam_id=exam_id))

    @action(detail=True, methods=['post'], url_path=r'assign/(?P<evaluator_id>\d+)')
    def assign(self, request, pk=None, evaluator_id=None):
        attempt = AttemptService.assign_evaluator(
            attempt_id=pk, evaluator_id=evaluator_id, admin=request.user
        )
        AuditLog.record(request.user, 'ASSIGN', attempt, f"Assigned to evaluator {evaluator_id}")
        return Response(AttemptSerializer(attempt).data, status=status.HTTP_201_CREATED)


class AnswerViewSet(viewsets.GenericViewSet):
    queryset = Answer.objects.select_related('question')
    serializer_class = AnswerSerializer
    lookup_value_regex = r'\d+'

    def get_permissions(self):
        if self.action in ['evaluate', 'bulk_evaluate']:
            return [IsTeacherOrAdmin()]
        return [permissions.IsAuthenticated()]

    def create(self, request):
        """
        Save the answer to one question.
        Payload: { "attempt_id": 1, "question_id": 3, "selected_option": "b", "time_spent": 40 }
        """
        serializer = AnswerWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        answer, created = AnswerService.upsert(user=request.user, **serializer.validated_data)
        return Response(
            AnswerSerializer(answer).data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK
        )

    def retrieve(self, request, pk=None):
        answer = AnswerService.get(answer_id=pk, actor=request.user)
        return Response(AnswerSerializer(answer).data)

    def partial_update(self, request, pk=None):
        serializer = AnswerUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        answer = AnswerService.update(answer_id=pk, user=request.user, data=serializer.validated_data)
        return Response(AnswerSerializer(answer).data)

    @action(detail=True, methods=['post'])
    def evaluate(self, request, pk=None):
        serializer = EvaluateAnswerSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        answer = EvaluationService.evaluate_single(
            answer_id=pk, teacher=request.user, **serializer.validated_data
        )
        AuditLog.record(request.user, 'GRADE', answer, f"Awarded {answer.marks} marks")
        return Response(AnswerSerializer(answer).data)

    @action(detail=False, methods=['post'], url_path=r'bulk-evaluate/(?P<attempt_id>\d+)')
    def bulk_evaluate(self, request, attempt_id=None):
        """
        Grade several answers of an attempt and finalize it.
        Payload: [ { "question_id": 1, "marks": 7, "feedback": "..." }, ... ]
        """
        data = request.data
        if isinstance(data, dict):
            data = data.get('evaluations', [])
        serializer = BulkEvaluationItemSerializer(data=data, many=True)
        serializer.is_valid(raise_exception=True)

        result = EvaluationService.bulk_evaluate(
            attempt_id=attempt_id, teacher=request.user, evaluations=serializer.validated_data
        )
        AuditLog.objects.create(
            actor=request.user,
            action='GRADE',
            target_model='Attempt',
            target_object_id=str(attempt_id),
            details=f"Bulk evaluated {result['count']} answers, score {result['score']}"
        )
        return Response(result)

    @action(detail=False, methods=['get'], url_path=r'attempt/(?P<attempt_id>\d+)')
    def by_attempt(self, request, attempt_id=None):
        answers = AnswerService.list_for_attempt(attempt_id=attempt_id, actor=request.user)
        return Response(AnswerSerializer(answers, many=True).data)
