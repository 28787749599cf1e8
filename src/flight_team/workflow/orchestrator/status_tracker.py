"""
Stage Tracker

Helper for logging provisioning progress and the resources created so far.
"""

from typing import Dict
from typing import List
from typing import Optional

from loguru import logger

from flight_team.workflow.enums import WorkflowOperation


class StageTracker:
    """
    Helper for tracking one workflow run.

    Keeps the current step label and every resource id created during the run, so that a
    failure can be reported with the step that failed and the resources left behind.
    Nothing is persisted; the tracker lives as long as the run.
    """

    def __init__(self, operation: WorkflowOperation, subject: str, total_steps: int):
        """
        Initialize stage tracker.

        Args:
            operation: Workflow operation being run
            subject: Flight or workspace the run is about (used as log prefix)
            total_steps: Number of steps that will run
        """
        self.operation = operation
        self.subject = subject
        self.total_steps = total_steps
        self.step_number = 0
        self.current_step = ""
        self.created_resources: Dict[str, List[str]] = {}

    def update(self, message: str) -> str:
        """
        Start the next step.

        Args:
            message: Step description

        Returns:
            The step label, e.g. "Step 2/6: Creating group"
        """
        self.step_number += 1
        self.current_step = f"Step {self.step_number}/{self.total_steps}: {message}"
        logger.info("[{}] {}", self.subject, self.current_step, operation=self.operation.value)
        return self.current_step

    def skip(self, message: str, reason: Optional[str] = None):
        """Log a step that is not run in this configuration."""
        logger.info("[{}] Skipping: {}", self.subject, message, operation=self.operation.value, reason=reason)

    def record(self, kind: str, resource_id: Optional[str]):
        """Remember a resource created during this run."""
        if resource_id:
            self.created_resources.setdefault(kind, []).append(resource_id)

    def complete(self, message: str = "All steps completed successfully"):
        logger.success(f"[{self.subject}] {self.operation.value} COMPLETED: {message}")

    def fail(self, error: Exception):
        """
        Log a failed run.

        No rollback is attempted; the resources created before the failure are logged so an
        operator can clean them up.

        Args:
            error: The exception that aborted the run
        """
        step = self.current_step or "before first step"
        logger.error(f"[{self.subject}] {self.operation.value} FAILED at {step}: {error}")
        if self.created_resources:
            logger.warning(
                "[{}] Resources created before failure were left in place",
                self.subject,
                created_resources=self.created_resources,
            )
