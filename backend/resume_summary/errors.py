class ResumeProcessingError(Exception):
    """Raised by the background pipeline; turns a job into the error state."""


class TextExtractionError(ResumeProcessingError):
    pass


class SummaryGenerationError(ResumeProcessingError):
    pass


class JobStoreError(Exception):
    pass


class DuplicateJobError(JobStoreError):
    pass


class InvalidTransitionError(JobStoreError):
    pass
