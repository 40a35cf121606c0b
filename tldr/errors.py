"""Exceptions raised by the transcript summarization pipeline."""


class TldrError(Exception):
    """Base class for all tldr exceptions."""

    pass


class ConfigurationError(TldrError):
    """Required configuration is missing or invalid."""

    pass


class BackendInitializationError(TldrError):
    """A tokenizer or completion backend could not be constructed."""

    pass


class BackendCallError(TldrError):
    """A call to the completion backend failed."""

    pass


class EmptyResponseError(TldrError):
    """The completion backend returned no message for its first choice."""

    def __init__(self, completion_id: str | None):
        self.completion_id = completion_id
        super().__init__(f"No message returned for completion_id: {completion_id}")


class TranscriptNotFoundError(TldrError):
    """No transcript text is available for an identifier."""

    pass
