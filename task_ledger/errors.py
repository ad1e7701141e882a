"""Errors raised by the task store.

Every error rejects the whole call: nothing is written when one is raised.
``status_code`` is the HTTP status the API answers with.
"""

MAX_CONTENT_BYTES = 500


class TaskStoreError(Exception):
    status_code = 400
    message = "Task store error"

    def __init__(self, message=None):
        super().__init__(message or self.message)


class InvalidContent(TaskStoreError):
    status_code = 422
    message = "Invalid task content"


class EmptyContent(InvalidContent):
    message = "Content cannot be empty"


class ContentTooLong(InvalidContent):
    message = f"Content too long (max {MAX_CONTENT_BYTES} bytes)"


class TaskNotFound(TaskStoreError):
    status_code = 404
    message = "Task does not exist"


class AlreadyDeleted(TaskStoreError):
    status_code = 409
    message = "Task already deleted"
