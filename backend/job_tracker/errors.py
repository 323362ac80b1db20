# backend/job_tracker/errors.py


class NotFoundError(Exception):
    """A referenced record does not exist. Rendered as a 404."""

    def __init__(self, entity: str):
        self.entity = entity
        super().__init__(f"{entity} not found")


class AnalysisUnavailableError(Exception):
    """The generative model call failed or returned output we cannot use.

    Covers transport errors, empty responses and responses that do not match
    the expected shape. Rendered as a 500.
    """
