from cores.exceptions import ConflictError


class AttemptConflict(ConflictError):
    default_detail = "You already have an attempt in progress for this exam."
    default_code = "attempt_in_progress"


class AttemptLocked(ConflictError):
    default_detail = "Cannot modify answers for an attempt that is no longer in progress."
    default_code = "attempt_locked"
