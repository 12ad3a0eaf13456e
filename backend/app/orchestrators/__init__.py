"""
Orchestrators package.

Orchestrators coordinate collaborators and services to implement
request-level workflows. They load records, hand them to pure services,
and return the result.

Orchestrators should:
    - Coordinate multiple services
    - Read through injected collaborators (entity store, clock)
    - Trace their steps
    - Leave derivation logic to services

Example:
    orchestrator = UniversityTimelineOrchestrator(
        store=SqlAlchemyEntityStore(db),
        clock=SystemClock(),
    )
    view = orchestrator.build_view("stanford-gsb", user_id=user.id)

Difference between Services and Orchestrators:
    - Services: Single-responsibility, pure derivations over records
    - Orchestrators: Multi-service coordination, record loading
"""

from app.orchestrators.base import (
    BaseOrchestrator,
    ExecutionStep,
    OrchestrationError,
)
from app.orchestrators.university_timeline_orchestrator import (
    UniversityTimelineOrchestrator,
    UniversityNotFoundError,
)

__all__ = [
    "BaseOrchestrator",
    "ExecutionStep",
    "OrchestrationError",
    "UniversityTimelineOrchestrator",
    "UniversityNotFoundError",
]
