"""
Tests for EssayProgressCalculator and primary essay selection.

Verifies:
- Progress is word count against the limit, clamped to [0, 100]
- Prompts without submissions report not-started
- Completion detail (submitted status or 98% of the word limit)
- Primary essay selection
"""
from datetime import datetime, timezone
from types import SimpleNamespace
from uuid import uuid4

import pytest

from app.services.essay_progress_service import (
    EssayProgressCalculator,
    progress_percent,
    round_half_up,
    select_primary_essay,
)


def make_prompt(word_limit=500, **overrides):
    fields = dict(
        id=uuid4(),
        prompt_title="Career Goals",
        prompt_text="What are your goals?",
        word_limit=word_limit,
        min_word_count=None,
        is_mandatory=True,
        program_id=uuid4(),
        program=SimpleNamespace(program_name="Full-Time MBA"),
    )
    fields.update(overrides)
    return SimpleNamespace(**fields)


def make_submission(prompt, word_count, status="in-progress", **overrides):
    fields = dict(
        id=uuid4(),
        essay_prompt_id=prompt.id,
        content="Draft text",
        word_count=word_count,
        status=status,
        submission_date=None,
        last_edited_at=None,
    )
    fields.update(overrides)
    return SimpleNamespace(**fields)


class TestProgressPercent:
    """Tests for the percentage helper."""
    
    def test_half_written(self):
        assert progress_percent(250, 500) == 50
    
    def test_clamped_at_100(self):
        assert progress_percent(600, 500) == 100
    
    def test_zero_word_limit_reports_zero(self):
        assert progress_percent(250, 0) == 0
        assert progress_percent(250, None) == 0
    
    def test_halves_round_up(self):
        """5 of 8 words is 62.5%, reported as 63."""
        assert progress_percent(5, 8) == 63
    
    def test_round_half_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(2.4) == 2


class TestEssayProgressCalculator:
    """Tests for EssayProgressCalculator.calculate()."""
    
    def test_prompt_without_submission_is_not_started(self):
        prompt = make_prompt()
        
        essay = EssayProgressCalculator().calculate([prompt], [])[0]
        
        assert essay.status == "not-started"
        assert essay.progress_percent == 0
        assert essay.content == ""
        assert essay.word_count == 0
        assert essay.has_submission is False
        assert essay.submission_id is None
        assert essay.completion_reason == "not_started"
    
    def test_half_written_submission(self):
        prompt = make_prompt(word_limit=500)
        submission = make_submission(prompt, 250)
        
        essay = EssayProgressCalculator().calculate([prompt], [submission])[0]
        
        assert essay.progress_percent == 50
        assert essay.status == "in-progress"
        assert essay.content == "Draft text"
        assert essay.submission_id == submission.id
        assert essay.is_complete is False
        assert essay.completion_reason == "in_progress"
    
    def test_over_limit_submission_is_clamped(self):
        prompt = make_prompt(word_limit=500)
        
        essay = EssayProgressCalculator().calculate([prompt], [make_submission(prompt, 600)])[0]
        
        assert essay.progress_percent == 100
    
    def test_submitted_status_is_complete(self):
        prompt = make_prompt(word_limit=500)
        
        essay = EssayProgressCalculator().calculate([prompt], [make_submission(prompt, 100, status="submitted")])[0]
        
        assert essay.is_complete is True
        assert essay.completion_reason == "status"
    
    def test_ninety_eight_percent_of_limit_is_complete(self):
        prompt = make_prompt(word_limit=500)
        
        essay = EssayProgressCalculator().calculate([prompt], [make_submission(prompt, 490)])[0]
        
        assert essay.is_complete is True
        assert essay.completion_reason == "word_count_98_percent"
        assert essay.progress_percent == 98
    
    def test_just_below_threshold_is_not_complete(self):
        prompt = make_prompt(word_limit=500)
        
        essay = EssayProgressCalculator().calculate([prompt], [make_submission(prompt, 489)])[0]
        
        assert essay.is_complete is False
    
    def test_empty_submission_is_not_complete(self):
        prompt = make_prompt()
        
        essay = EssayProgressCalculator().calculate([prompt], [make_submission(prompt, 0)])[0]
        
        assert essay.has_submission is True
        assert essay.completion_reason == "not_complete"
    
    def test_output_follows_prompt_order(self):
        prompts = [make_prompt(prompt_title=title) for title in ("Leadership", "Career Goals", "Optional")]
        
        essays = EssayProgressCalculator().calculate(prompts, [])
        
        assert [e.prompt_title for e in essays] == ["Leadership", "Career Goals", "Optional"]
    
    def test_latest_edit_wins_for_duplicate_submissions(self):
        prompt = make_prompt(word_limit=500)
        newer = make_submission(prompt, 400, last_edited_at=datetime(2024, 3, 9, tzinfo=timezone.utc))
        older = make_submission(prompt, 100, last_edited_at=datetime(2024, 3, 1, tzinfo=timezone.utc))
        
        essay = EssayProgressCalculator().calculate([prompt], [newer, older])[0]
        
        assert essay.submission_id == newer.id
        assert essay.word_count == 400
    
    def test_submissions_for_other_prompts_are_ignored(self):
        prompt = make_prompt()
        other = make_prompt()
        
        essay = EssayProgressCalculator().calculate([prompt], [make_submission(other, 300)])[0]
        
        assert essay.status == "not-started"
    
    def test_prompt_metadata_is_copied(self):
        prompt = make_prompt(min_word_count=300, is_mandatory=False)
        
        essay = EssayProgressCalculator().calculate([prompt], [])[0]
        
        assert essay.prompt_id == prompt.id
        assert essay.prompt_text == "What are your goals?"
        assert essay.min_word_count == 300
        assert essay.is_mandatory is False
        assert essay.program_name == "Full-Time MBA"


class TestSelectPrimaryEssay:
    """Tests for select_primary_essay()."""
    
    def test_no_essays(self):
        assert select_primary_essay([]) is None
    
    def test_first_started_essay_is_primary(self):
        prompts = [make_prompt(prompt_title="A"), make_prompt(prompt_title="B"), make_prompt(prompt_title="C")]
        essays = EssayProgressCalculator().calculate(
            prompts,
            [make_submission(prompts[1], 100), make_submission(prompts[2], 300)],
        )
        
        assert select_primary_essay(essays).prompt_title == "B"
    
    def test_first_entry_when_nothing_started(self):
        prompts = [make_prompt(prompt_title="A"), make_prompt(prompt_title="B")]
        essays = EssayProgressCalculator().calculate(prompts, [])
        
        assert select_primary_essay(essays).prompt_title == "A"
    
    @pytest.mark.parametrize("count", [1, 3])
    def test_selection_is_stable(self, count):
        prompts = [make_prompt() for _ in range(count)]
        essays = EssayProgressCalculator().calculate(prompts, [])
        
        assert select_primary_essay(essays) is select_primary_essay(essays)
