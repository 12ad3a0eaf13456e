"""
Tests for UniversityTimelineOrchestrator.

Verifies:
- End-to-end view built from database records with a fixed clock
- Anonymous views carry deadlines and prompts but no user data
- Missing universities and broken clocks fail explicitly
- Execution trace records each step
"""
import os

# Set environment variables FIRST
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import json
import pytest
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.config import Settings
from app.database import Base
from app.models import (
    User, University, Program, Scholarship, Admission, Deadline,
    Application, Interview, CalendarEvent, Reminder, EssayPrompt,
    EssaySubmission
)
from app.orchestrators import (
    OrchestrationError,
    UniversityNotFoundError,
    UniversityTimelineOrchestrator,
)
from app.services.entity_store import SqlAlchemyEntityStore
from app.services.event_normalizer import InterviewDetails, ScholarshipDetails
from app.utils.clock import Clock, FixedClock
from app.utils.invariants import InvalidClockReadingError

# Setup test database
TEST_DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(TEST_DATABASE_URL)
TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

NOW = datetime(2024, 3, 10, tzinfo=timezone.utc)


class BrokenClock(Clock):
    """Clock returning a non-finite reading."""
    
    def now(self):
        return float("nan")


@pytest.fixture
def db():
    """Create test database session."""
    Base.metadata.create_all(bind=engine)
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def seeded(db):
    """
    Northfield with an MBA and a masters program.
    
    - Deadlines on 2024-03-05 (A) and 2024-03-10 (B)
    - Applicant events: interview on 2024-03-20 (C), scholarship note on
      2024-03-25, completed campus visit on 2024-03-01
    - Career Goals essay half written, Leadership essay not started
    """
    user = User(email="priya@example.com", full_name="Priya Natarajan", study_level="mba")
    university = University(
        university_name="Northfield School of Management",
        slug="northfield",
        city="Boston",
        state="MA",
        country="USA",
        average_deadlines="Jan 5, Mar 1",
    )
    db.add_all([user, university])
    db.flush()
    
    mba = Program(university_id=university.id, program_name="Full-Time MBA", program_slug="mba", degree_type="mba")
    msc = Program(university_id=university.id, program_name="MSc Finance", program_slug="msc", degree_type="masters")
    scholarship = Scholarship(university_id=university.id, scholarship_name="Dean's Fellowship",
                              amount=25000.0, currency="USD")
    admission = Admission(university_id=university.id, program_id=None, admission_name="Fall")
    db.add_all([mba, msc, scholarship, admission])
    db.flush()
    
    db.add_all([
        Deadline(admission_id=admission.id, title="A", deadline_date=datetime(2024, 3, 5, tzinfo=timezone.utc)),
        Deadline(admission_id=admission.id, title="B", deadline_date=datetime(2024, 3, 10, tzinfo=timezone.utc)),
    ])
    
    application = Application(user_id=user.id, university_id=university.id, program_id=mba.id,
                              applicant_name="Priya Natarajan")
    db.add(application)
    db.flush()
    interview = Interview(application_id=application.id, interview_type="video",
                          scheduled_at=datetime(2024, 3, 20, 14, 0, tzinfo=timezone.utc),
                          duration_minutes=45, location="Zoom")
    db.add(interview)
    db.flush()
    
    interview_event = CalendarEvent(
        user_id=user.id, university_id=university.id, program_id=mba.id,
        application_id=application.id, interview_id=interview.id,
        event_type="interview", title="C", start_date=interview.scheduled_at,
        timezone="America/New_York",
    )
    db.add_all([
        interview_event,
        CalendarEvent(
            user_id=user.id, university_id=university.id, scholarship_id=scholarship.id,
            event_type="scholarship", title="Fellowship essay", is_all_day=True,
            start_date=datetime(2024, 3, 25, tzinfo=timezone.utc),
        ),
        CalendarEvent(
            user_id=user.id, university_id=university.id, title="Campus visit",
            start_date=datetime(2024, 3, 1, 15, 0, tzinfo=timezone.utc), completion_status="completed",
        ),
    ])
    db.flush()
    db.add(Reminder(calendar_event_id=interview_event.id,
                    remind_at=interview.scheduled_at - timedelta(days=1)))
    
    career = EssayPrompt(program_id=mba.id, prompt_title="Career Goals", word_limit=500,
                         created_at=datetime(2024, 1, 1, tzinfo=timezone.utc))
    leadership = EssayPrompt(program_id=mba.id, prompt_title="Leadership", word_limit=400,
                             created_at=datetime(2024, 1, 2, tzinfo=timezone.utc))
    finance = EssayPrompt(program_id=msc.id, prompt_title="Why finance", word_limit=300,
                          created_at=datetime(2024, 1, 1, tzinfo=timezone.utc))
    db.add_all([career, leadership, finance])
    db.flush()
    db.add(EssaySubmission(user_id=user.id, essay_prompt_id=career.id, content="Draft",
                           word_count=250, status="in-progress",
                           last_edited_at=datetime(2024, 3, 8, tzinfo=timezone.utc)))
    db.commit()
    
    return SimpleNamespace(user=user, university=university, mba=mba)


def make_orchestrator(db, clock=None):
    return UniversityTimelineOrchestrator(
        store=SqlAlchemyEntityStore(db),
        clock=clock or FixedClock(NOW),
        settings=Settings(),
    )


class TestBuildView:
    """Tests for build_view() with a signed-in user."""
    
    def test_timeline_order_and_statuses(self, db, seeded):
        view = make_orchestrator(db).build_view("northfield", user_id=seeded.user.id)
        
        assert [(i.title, i.status, i.days_left) for i in view.timeline] == [
            ("Campus visit", "completed", 0),
            ("A", "overdue", 0),
            ("B", "due-today", 0),
            ("C", "upcoming", 11),
            ("Fellowship essay", "upcoming", 15),
        ]
    
    def test_event_enrichment(self, db, seeded):
        view = make_orchestrator(db).build_view("northfield", user_id=seeded.user.id)
        events = {e.title: e for e in view.calendar_events}
        
        interview = events["C"]
        assert isinstance(interview.details, InterviewDetails)
        assert interview.location == "Zoom"
        assert interview.time == "10:00 AM"
        assert interview.reminder_count == 1
        assert interview.applicant_name == "Priya Natarajan"
        assert interview.program_name == "Full-Time MBA"
        
        scholarship = events["Fellowship essay"]
        assert scholarship.time == "All Day"
        assert scholarship.details == ScholarshipDetails(
            scholarship_name="Dean's Fellowship", amount=25000.0, currency="USD"
        )
    
    def test_essays_and_progress(self, db, seeded):
        view = make_orchestrator(db).build_view("northfield", user_id=seeded.user.id)
        
        assert [(e.prompt_title, e.progress_percent) for e in view.essay_prompts] == [
            ("Career Goals", 50),
            ("Leadership", 0),
        ]
        assert view.primary_essay.prompt_title == "Career Goals"
        assert view.progress.application_status == "in-progress"
        assert view.progress.next_deadline_label == "Mar 20, 2024"
        assert view.progress.tasks.completed == 1
    
    def test_study_level_filters_programs_and_prompts(self, db, seeded):
        view = make_orchestrator(db).build_view("northfield", user_id=seeded.user.id, study_level="mba")
        
        assert [p.name for p in view.programs] == ["Full-Time MBA"]
        assert [e.prompt_title for e in view.essay_prompts] == ["Career Goals", "Leadership"]
    
    def test_user_study_level_is_the_default_filter(self, db, seeded):
        view = make_orchestrator(db).build_view("northfield", user_id=seeded.user.id)
        
        assert [p.name for p in view.programs] == ["Full-Time MBA"]
        assert [e.prompt_title for e in view.essay_prompts] == ["Career Goals", "Leadership"]
        assert view.filtered_by_study_level == "mba"
        assert view.to_dict()["filtered_by_study_level"] == "mba"
    
    def test_explicit_study_level_overrides_user_level(self, db, seeded):
        view = make_orchestrator(db).build_view("northfield", user_id=seeded.user.id, study_level="Masters")
        
        assert [p.name for p in view.programs] == ["MSc Finance"]
        assert [e.prompt_title for e in view.essay_prompts] == ["Why finance"]
        assert view.filtered_by_study_level == "masters"
    
    def test_user_without_study_level_sees_all_programs(self, db, seeded):
        seeded.user.study_level = None
        db.commit()
        
        view = make_orchestrator(db).build_view("northfield", user_id=seeded.user.id)
        
        assert [p.name for p in view.programs] == ["Full-Time MBA", "MSc Finance"]
        assert view.filtered_by_study_level is None
    
    def test_view_is_deterministic(self, db, seeded):
        first = make_orchestrator(db).build_view("northfield", user_id=seeded.user.id).to_dict()
        second = make_orchestrator(db).build_view("northfield", user_id=seeded.user.id).to_dict()
        
        assert json.dumps(first, sort_keys=True) == json.dumps(second, sort_keys=True)
    
    def test_read_only(self, db, seeded):
        before = db.query(CalendarEvent).count(), db.query(EssaySubmission).count()
        
        make_orchestrator(db).build_view("northfield", user_id=seeded.user.id)
        
        assert not db.new and not db.dirty
        assert (db.query(CalendarEvent).count(), db.query(EssaySubmission).count()) == before


class TestAnonymousView:
    """Tests for build_view() without a user."""
    
    def test_no_user_data(self, db, seeded):
        view = make_orchestrator(db).build_view("northfield")
        
        assert [i.title for i in view.timeline] == ["A", "B"]
        assert view.calendar_events == []
        assert all(e.status == "not-started" for e in view.essay_prompts)
        assert view.primary_essay.prompt_title == "Career Goals"
        assert view.progress.next_deadline_label == "Jan 5"
        assert view.filtered_by_study_level is None
        assert len(view.programs) == 2


class TestFailures:
    """Tests for explicit failures."""
    
    def test_unknown_university(self, db, seeded):
        with pytest.raises(UniversityNotFoundError):
            make_orchestrator(db).build_view("southfield")
    
    def test_not_found_is_an_orchestration_error(self, db, seeded):
        with pytest.raises(OrchestrationError):
            make_orchestrator(db).build_view("southfield")
    
    def test_broken_clock(self, db, seeded):
        orchestrator = make_orchestrator(db, clock=BrokenClock())
        
        with pytest.raises(InvalidClockReadingError):
            orchestrator.build_view("northfield", user_id=seeded.user.id)
        
        trace = orchestrator.get_trace()
        assert trace["result"] == "failed"
        assert trace["steps"][0]["action"] == "read_clock"
    
    def test_store_failure_is_wrapped(self, db, seeded):
        class FailingStore(SqlAlchemyEntityStore):
            def find_deadlines(self, admission_ids):
                raise RuntimeError("connection lost")
        
        orchestrator = UniversityTimelineOrchestrator(
            store=FailingStore(db), clock=FixedClock(NOW), settings=Settings()
        )
        
        with pytest.raises(OrchestrationError) as exc_info:
            orchestrator.build_view("northfield")
        
        assert isinstance(exc_info.value.__cause__, RuntimeError)


class TestTrace:
    """Tests for execution tracing."""
    
    def test_trace_records_each_step(self, db, seeded):
        orchestrator = make_orchestrator(db)
        orchestrator.build_view("northfield", user_id=seeded.user.id)
        
        trace = orchestrator.get_trace()
        
        assert trace["orchestrator"] == "university_timeline_orchestrator"
        assert trace["result"] == "success"
        assert [s["action"] for s in trace["steps"]] == [
            "read_clock", "load_university", "load_records", "aggregate"
        ]
        assert trace["steps"][2]["details"] == {
            "deadlines": 2,
            "calendar_events": 3,
            "essay_prompts": 2,
            "submissions": 1,
        }
    
    def test_each_run_replaces_the_trace(self, db, seeded):
        orchestrator = make_orchestrator(db)
        orchestrator.build_view("northfield", user_id=seeded.user.id)
        
        with pytest.raises(UniversityNotFoundError):
            orchestrator.build_view("southfield")
        
        trace = orchestrator.get_trace()
        assert trace["result"] == "failed"
        assert [s["action"] for s in trace["steps"]] == ["read_clock", "load_university"]
        assert [s["step"] for s in trace["steps"]] == [1, 2]
