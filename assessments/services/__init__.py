from .attempt_service import AttemptService, get_attempt
from .answer_service import AnswerService
from .evaluation_service import EvaluationService

__all__ = ["AttemptService", "AnswerService", "EvaluationService", "get_attempt"]
