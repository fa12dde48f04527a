"""
Custom exceptions for the batch workflows with user-friendly error messages.
"""

INTERNAL_ERROR_MESSAGE = "An internal error occurred while running the batch job. Please check the server logs."

class BatchException(Exception):
    """Base exception for batch-related errors."""
    def __init__(self, message: str, user_message: str = None):
        super().__init__(message)
        self.user_message = user_message or message

class StoreError(BatchException):
    """Raised when a store read or write fails."""
    def __init__(self, operation: str, details: str = None):
        super().__init__(
            f"Store error during {operation}: {details}",
            "❌ Database error occurred. Please try again later."
        )
        self.operation = operation

class NotificationNotFoundError(BatchException):
    """Raised when there is no open notification to resolve."""
    def __init__(self, admin_id: str):
        super().__init__(
            f"No pending notification for admin '{admin_id}'",
            "ℹ️ There is no open ranking notification."
        )
        self.admin_id = admin_id

class BatchInvocationError(BatchException):
    """Raised to callers of a manual run; the cause is only logged server-side."""
    def __init__(self, workflow: str):
        super().__init__(
            f"Manual run of {workflow} failed",
            INTERNAL_ERROR_MESSAGE
        )
        self.workflow = workflow

class WorkflowBusyError(BatchException):
    """Raised when another run of the same workflow holds the run lock."""
    def __init__(self, workflow: str):
        super().__init__(
            f"Workflow {workflow} is already running",
            "⏳ This batch job is already running. Please try again shortly."
        )
        self.workflow = workflow
