"""
Base Orchestrator

Abstract base class for read-side orchestrators with built-in support for:
- Step-by-step execution tracing (kept in memory, logged at DEBUG)
- A shared error base (OrchestrationError)

Orchestrators load records through collaborators and hand them to pure
services; they never persist anything themselves.
"""

import logging
import time
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Dict, List, Optional


class ExecutionStep:
    """Represents a single execution step in the trace"""
    def __init__(self, action: str, step_number: int):
        self.step = step_number
        self.action = action
        self.status = "in_progress"
        self.duration_ms = None
        self.details = {}
        self.error = None
        self._start_time = time.monotonic()
    
    def complete(self, status: str = "success", details: Optional[Dict[str, Any]] = None):
        """Mark step as completed"""
        self.status = status
        self.duration_ms = int((time.monotonic() - self._start_time) * 1000)
        if details:
            self.details = details
    
    def fail(self, error: str, details: Optional[Dict[str, Any]] = None):
        """Mark step as failed"""
        self.status = "failed"
        self.duration_ms = int((time.monotonic() - self._start_time) * 1000)
        self.error = error
        if details:
            self.details = details
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization"""
        result = {
            "step": self.step,
            "action": self.action,
            "status": self.status,
            "duration_ms": self.duration_ms,
        }
        if self.details:
            result["details"] = self.details
        if self.error:
            result["error"] = self.error
        return result


class OrchestrationError(Exception):
    """Base exception for orchestration errors"""
    pass


class BaseOrchestrator(ABC):
    """
    Abstract base orchestrator with execution tracing.
    
    Subclasses must implement:
    - orchestrator_name: str property
    
    Trace state lives on the instance and is reset by each run, so an
    instance serves one run at a time. Create one orchestrator per request.
    
    Usage:
        class MyOrchestrator(BaseOrchestrator):
            @property
            def orchestrator_name(self) -> str:
                return "my_orchestrator"
            
            def run(self, ...):
                self._start_trace()
                with self._trace_step("load_records"):
                    ...
    """
    
    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize base orchestrator.
        
        Args:
            logger: Diagnostic sink; defaults to the module logger
        """
        self.logger = logger or logging.getLogger(__name__)
        self._start_time = None
        self._execution_steps: List[ExecutionStep] = []
        self._step_counter = 0
    
    @property
    @abstractmethod
    def orchestrator_name(self) -> str:
        """
        Name of this orchestrator.
        
        Returns:
            Orchestrator name (e.g., "university_timeline_orchestrator")
        """
        pass
    
    def _start_trace(self):
        """Reset the trace for a new run."""
        self._start_time = time.monotonic()
        self._execution_steps = []
        self._step_counter = 0
    
    @contextmanager
    def _trace_step(self, action: str):
        """
        Context manager for automatic step tracing.
        
        Usage:
            with self._trace_step("validate_input"):
                # do validation
                pass
        """
        self._step_counter += 1
        step = ExecutionStep(action, self._step_counter)
        self._execution_steps.append(step)
        
        try:
            yield step
            step.complete(details=step.details)
        except Exception as e:
            step.fail(str(e))
            self.logger.debug(
                "%s step %d (%s) failed after %sms: %s",
                self.orchestrator_name, step.step, action, step.duration_ms, e
            )
            raise
        self.logger.debug(
            "%s step %d (%s) completed in %sms",
            self.orchestrator_name, step.step, action, step.duration_ms
        )
    
    def get_trace(self) -> Dict[str, Any]:
        """Trace of the most recent run on this instance."""
        failed = any(step.status == "failed" for step in self._execution_steps)
        return {
            "orchestrator": self.orchestrator_name,
            "duration_ms": self.get_elapsed_time_ms(),
            "steps": [step.to_dict() for step in self._execution_steps],
            "result": "failed" if failed else "success",
        }
    
    def get_elapsed_time_ms(self) -> int:
        """Get elapsed time since the run started in milliseconds"""
        if self._start_time:
            return int((time.monotonic() - self._start_time) * 1000)
        return 0
