"""
Demo Seed Data Script

Creates a demo university with two programs, an admission cycle with
deadlines, and one applicant with calendar events of every subtype and
essay submissions, then prints the aggregated timeline view:
- Priya Natarajan applying to the Northfield School of Management MBA
"""

import json
import uuid
from datetime import datetime, timedelta, timezone

from sqlalchemy.orm import Session

from app.config import configure_logging
from app.database import SessionLocal, engine, Base
from app.models import (
    User, University, Program, Scholarship, Admission, Deadline,
    Application, Interview, CalendarEvent, Reminder, EssayPrompt,
    EssaySubmission
)
from app.orchestrators import UniversityTimelineOrchestrator
from app.services import SqlAlchemyEntityStore
from app.utils.clock import SystemClock


UNIVERSITY_SLUG = 'northfield-school-of-management'


def clear_all_data(db: Session):
    """Clear all existing data (for demo purposes only)"""
    print("Clearing existing data...")
    db.query(Reminder).delete()
    db.query(CalendarEvent).delete()
    db.query(EssaySubmission).delete()
    db.query(EssayPrompt).delete()
    db.query(Interview).delete()
    db.query(Application).delete()
    db.query(Deadline).delete()
    db.query(Admission).delete()
    db.query(Scholarship).delete()
    db.query(Program).delete()
    db.query(University).delete()
    db.query(User).delete()
    db.commit()
    print("✓ Data cleared")


def create_university(db: Session):
    """
    Northfield School of Management
    - Full-time MBA and MSc Finance programs
    - Fall intake with round 1, round 2 and fee deadlines
    - One merit scholarship
    """
    print("\nCreating university: Northfield School of Management...")
    today = datetime.now(timezone.utc).replace(hour=23, minute=59, second=0, microsecond=0)
    
    university = University(
        id=uuid.UUID('aaaaaaaa-1111-1111-1111-111111111111'),
        university_name='Northfield School of Management',
        slug=UNIVERSITY_SLUG,
        city='Boston',
        state='MA',
        country='USA',
        average_deadlines='Jan 5, Mar 1',
    )
    db.add(university)
    
    mba = Program(
        id=uuid.UUID('aaaaaaaa-2222-1111-1111-111111111111'),
        university_id=university.id,
        program_name='Full-Time MBA',
        program_slug='full-time-mba',
        degree_type='mba',
    )
    msc = Program(
        id=uuid.UUID('aaaaaaaa-2222-2222-1111-111111111111'),
        university_id=university.id,
        program_name='MSc Finance',
        program_slug='msc-finance',
        degree_type='masters',
    )
    db.add_all([mba, msc])
    
    scholarship = Scholarship(
        id=uuid.UUID('aaaaaaaa-3333-1111-1111-111111111111'),
        university_id=university.id,
        scholarship_name='Dean\'s Merit Fellowship',
        amount=25000.0,
        currency='USD',
    )
    db.add(scholarship)
    
    admission = Admission(
        id=uuid.UUID('aaaaaaaa-4444-1111-1111-111111111111'),
        university_id=university.id,
        program_id=mba.id,
        admission_name='Fall Intake',
    )
    db.add(admission)
    
    deadlines = [
        Deadline(
            admission_id=admission.id,
            deadline_type='application',
            deadline_date=today - timedelta(days=12),
            deadline_time='23:59',
            timezone='America/New_York',
            title='Round 1 Application',
            priority='high',
        ),
        Deadline(
            admission_id=admission.id,
            deadline_type='application',
            deadline_date=today + timedelta(days=40),
            deadline_time='23:59',
            timezone='America/New_York',
            title='Round 2 Application',
            priority='high',
            is_extended=True,
            original_deadline=today + timedelta(days=33),
        ),
        Deadline(
            admission_id=admission.id,
            deadline_type='fee',
            deadline_date=today + timedelta(days=55),
            deadline_time='17:00',
            timezone='America/New_York',
            title='Application Fee',
            priority='medium',
        ),
    ]
    db.add_all(deadlines)
    
    prompts = [
        EssayPrompt(
            id=uuid.UUID('aaaaaaaa-5555-1111-1111-111111111111'),
            program_id=mba.id,
            prompt_title='Career Goals',
            prompt_text='What are your post-MBA goals and why now?',
            word_limit=500,
            min_word_count=300,
        ),
        EssayPrompt(
            id=uuid.UUID('aaaaaaaa-5555-2222-1111-111111111111'),
            program_id=mba.id,
            prompt_title='Leadership',
            prompt_text='Describe a time you led a team through change.',
            word_limit=400,
            is_mandatory=False,
        ),
    ]
    db.add_all(prompts)
    db.flush()
    
    print("✓ University created")
    return university, mba, scholarship, deadlines, prompts


def create_applicant(db: Session, university, program, scholarship, deadlines, prompts):
    """
    Applicant: Priya Natarajan
    - Round 2 applicant with a video interview booked
    - Career Goals essay half written, Leadership essay not started
    """
    print("\nCreating applicant: Priya Natarajan...")
    now = datetime.now(timezone.utc)
    
    user = User(
        id=uuid.UUID('bbbbbbbb-1111-1111-1111-111111111111'),
        email='priya.natarajan@example.com',
        full_name='Priya Natarajan',
        study_level='mba',
    )
    db.add(user)
    
    application = Application(
        id=uuid.UUID('bbbbbbbb-2222-1111-1111-111111111111'),
        user_id=user.id,
        university_id=university.id,
        program_id=program.id,
        applicant_name='Priya Natarajan',
        application_status='in-progress',
    )
    db.add(application)
    
    interview = Interview(
        id=uuid.UUID('bbbbbbbb-3333-1111-1111-111111111111'),
        application_id=application.id,
        interview_type='video',
        scheduled_at=now + timedelta(days=20, hours=3),
        duration_minutes=45,
        location='Zoom',
    )
    db.add(interview)
    
    common = dict(user_id=user.id, university_id=university.id, program_id=program.id)
    events = [
        CalendarEvent(
            **common,
            event_type='deadline',
            title='Submit Round 2 application',
            start_date=deadlines[1].deadline_date,
            is_all_day=True,
            priority='high',
            deadline_id=deadlines[1].id,
        ),
        CalendarEvent(
            **common,
            event_type='interview',
            title='Admissions interview',
            start_date=interview.scheduled_at,
            end_date=interview.scheduled_at + timedelta(minutes=45),
            timezone='America/New_York',
            application_id=application.id,
            interview_id=interview.id,
        ),
        CalendarEvent(
            **common,
            event_type='scholarship',
            title='Fellowship essay due',
            start_date=now + timedelta(days=30),
            is_all_day=True,
            scholarship_id=scholarship.id,
        ),
        CalendarEvent(
            **common,
            event_type='event',
            title='Campus visit',
            start_date=now - timedelta(days=5),
            completion_status='completed',
            completed_at=now - timedelta(days=5),
            location='Main Hall',
            timezone='America/New_York',
        ),
        CalendarEvent(
            **common,
            event_type='reminder',
            title='Request recommendation letters',
            start_date=now + timedelta(days=7),
            is_system_generated=True,
            timezone='America/New_York',
        ),
    ]
    db.add_all(events)
    db.flush()
    
    db.add_all([
        Reminder(calendar_event_id=events[1].id, remind_at=interview.scheduled_at - timedelta(days=1)),
        Reminder(calendar_event_id=events[1].id, remind_at=interview.scheduled_at - timedelta(hours=1)),
        Reminder(calendar_event_id=events[4].id, remind_at=now + timedelta(days=6), is_active=False),
    ])
    
    db.add(EssaySubmission(
        user_id=user.id,
        essay_prompt_id=prompts[0].id,
        content='Draft: I want to lead product strategy at a climate-tech company...',
        word_count=250,
        status='in-progress',
        last_edited_at=now - timedelta(days=1),
    ))
    
    print("✓ Applicant created")
    return user


def main():
    """Seed demo data and print the aggregated timeline view."""
    configure_logging()
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    
    try:
        print("="*60)
        print("Seeding admissions timeline demo data")
        print("="*60)
        
        clear_all_data(db)
        
        university, program, scholarship, deadlines, prompts = create_university(db)
        user = create_applicant(db, university, program, scholarship, deadlines, prompts)
        db.commit()
        
        orchestrator = UniversityTimelineOrchestrator(
            store=SqlAlchemyEntityStore(db),
            clock=SystemClock(),
        )
        view = orchestrator.build_view(UNIVERSITY_SLUG, user_id=user.id)
        
        print("\n" + "="*60)
        print("✓ Demo data successfully seeded!")
        print("="*60)
        print(json.dumps(view.to_dict(), indent=2))
        
    except Exception as e:
        print(f"\n❌ Error seeding data: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == '__main__':
    main()
