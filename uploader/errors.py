"""
Errors that stop an upload batch.
"""


class WorkflowError(Exception):
    """A step of the episode workflow could not complete."""


class ElementNotFound(WorkflowError):
    """A required page element was missing on a single lookup."""

    def __init__(self, what: str):
        super().__init__(f"{what} not found")
        self.what = what


class WaitTimeout(WorkflowError):
    """A bounded poll ran out of attempts."""

    def __init__(self, what: str, attempts: int, interval: float):
        super().__init__(f"Timed out waiting for {what} ({attempts} x {interval:g}s)")
        self.what = what
        self.attempts = attempts
        self.interval = interval
