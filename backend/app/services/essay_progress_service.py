"""Essay progress calculation for program essay prompts."""
import logging
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional
from uuid import UUID

from app.models.essay import EssayStatus
from app.utils.invariants import as_utc


# Share of the word limit at which an essay counts as complete
COMPLETION_WORD_RATIO = 0.98

REASON_STATUS = "status"
REASON_WORD_COUNT = "word_count_98_percent"
REASON_IN_PROGRESS = "in_progress"
REASON_NOT_COMPLETE = "not_complete"
REASON_NOT_STARTED = "not_started"

_NEVER_EDITED = datetime.min.replace(tzinfo=timezone.utc)


@dataclass(frozen=True)
class EssayProgress:
    """Progress of one essay prompt for the requesting user."""
    prompt_id: UUID
    prompt_title: str
    prompt_text: Optional[str]
    word_limit: Optional[int]
    min_word_count: Optional[int]
    is_mandatory: bool
    program_id: Optional[UUID]
    program_name: Optional[str]
    status: str
    progress_percent: int
    word_count: int
    content: str
    has_submission: bool
    submission_id: Optional[UUID]
    is_complete: bool
    completion_reason: str
    last_edited_at: Optional[datetime] = None
    submission_date: Optional[datetime] = None


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (2.5 -> 3)."""
    return int(math.floor(value + 0.5))


def progress_percent(word_count: int, word_limit: Optional[int]) -> int:
    """
    Word-count progress against the limit, clamped to [0, 100].
    
    Prompts without a positive word limit report 0.
    """
    if not word_limit or word_limit <= 0:
        return 0
    return max(0, min(100, round_half_up(word_count / word_limit * 100)))


def select_primary_essay(essays: List[EssayProgress]) -> Optional[EssayProgress]:
    """
    Pick the essay surfaced as "primary".
    
    First entry with submission history in list order; when no essay has
    been started, the first entry. Not a ranking.
    """
    for essay in essays:
        if essay.has_submission:
            return essay
    return essays[0] if essays else None


class EssayProgressCalculator:
    """
    Calculator for per-prompt essay progress.
    
    Rules:
    - At most one submission per prompt is considered (latest edit wins)
    - No submission: status not-started, progress 0, empty content
    - With submission: progress from word count, status as stored
    - Pure deterministic calculations, output follows prompt order
    """
    
    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize essay progress calculator.
        
        Args:
            logger: Diagnostic sink; defaults to the module logger
        """
        self.logger = logger or logging.getLogger(__name__)
    
    def calculate(
        self,
        prompts: Iterable[Any],
        submissions: Iterable[Any],
    ) -> List[EssayProgress]:
        """
        Calculate progress for each prompt.
        
        Args:
            prompts: EssayPrompt records in display order
            submissions: The requesting user's EssaySubmission records
            
        Returns:
            One EssayProgress per prompt, in prompt order
        """
        by_prompt = self._index_submissions(submissions or ())
        return [
            self._progress(prompt, by_prompt.get(prompt.id))
            for prompt in prompts or ()
        ]
    
    def _index_submissions(self, submissions: Iterable[Any]) -> Dict[UUID, Any]:
        by_prompt: Dict[UUID, Any] = {}
        for submission in submissions:
            prompt_id = submission.essay_prompt_id
            existing = by_prompt.get(prompt_id)
            if existing is not None:
                self.logger.warning(
                    "Multiple submissions for essay prompt %s, keeping the latest edit", prompt_id
                )
                if self._edited_key(submission) < self._edited_key(existing):
                    continue
            by_prompt[prompt_id] = submission
        return by_prompt
    
    @staticmethod
    def _edited_key(submission: Any) -> datetime:
        edited = getattr(submission, "last_edited_at", None)
        return as_utc(edited) if edited is not None else _NEVER_EDITED
    
    def _progress(self, prompt: Any, submission: Optional[Any]) -> EssayProgress:
        program = getattr(prompt, "program", None)
        common = dict(
            prompt_id=prompt.id,
            prompt_title=prompt.prompt_title,
            prompt_text=getattr(prompt, "prompt_text", None),
            word_limit=prompt.word_limit,
            min_word_count=getattr(prompt, "min_word_count", None),
            is_mandatory=bool(getattr(prompt, "is_mandatory", True)),
            program_id=getattr(prompt, "program_id", None),
            program_name=program.program_name if program is not None else None,
        )
        
        if submission is None:
            return EssayProgress(
                **common,
                status=EssayStatus.NOT_STARTED.value,
                progress_percent=0,
                word_count=0,
                content="",
                has_submission=False,
                submission_id=None,
                is_complete=False,
                completion_reason=REASON_NOT_STARTED,
            )
        
        word_count = submission.word_count or 0
        status = submission.status
        if isinstance(status, EssayStatus):
            status = status.value
        
        is_submitted = status == EssayStatus.SUBMITTED.value
        reaches_limit = bool(prompt.word_limit) and prompt.word_limit > 0 and (
            word_count / prompt.word_limit >= COMPLETION_WORD_RATIO
        )
        if is_submitted:
            reason = REASON_STATUS
        elif reaches_limit:
            reason = REASON_WORD_COUNT
        elif word_count > 0:
            reason = REASON_IN_PROGRESS
        else:
            reason = REASON_NOT_COMPLETE
        
        last_edited = getattr(submission, "last_edited_at", None)
        submitted_on = getattr(submission, "submission_date", None)
        
        return EssayProgress(
            **common,
            status=status,
            progress_percent=progress_percent(word_count, prompt.word_limit),
            word_count=word_count,
            content=submission.content or "",
            has_submission=True,
            submission_id=getattr(submission, "id", None),
            is_complete=is_submitted or reaches_limit,
            completion_reason=reason,
            last_edited_at=as_utc(last_edited) if last_edited is not None else None,
            submission_date=as_utc(submitted_on) if submitted_on is not None else None,
        )
