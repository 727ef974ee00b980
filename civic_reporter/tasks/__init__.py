"""Background tasks module.

FastAPI BackgroundTasks for quick operations that should not block the
request, such as notifications.
"""

from civic_reporter.tasks.notifications import notify_issue_creation

__all__ = ["notify_issue_creation"]
