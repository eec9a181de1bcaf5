"""
Pre-Pro exceptions.

Every failure a pipeline stage can surface to a caller is one of these.
The API layer maps them to HTTP responses in ``prepro.main``.
"""


class PreProError(Exception):
    """Base exception for all Pre-Pro errors."""

    status_code = 500

    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self):
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class UnauthorizedError(PreProError):
    """Raised when a request carries no authenticated actor."""

    status_code = 401

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class NotFoundError(PreProError):
    """Raised when a project, scene, shot or reference does not exist."""

    status_code = 404

    def __init__(self, entity: str, entity_id=None):
        message = f"{entity} not found"
        details = {"entity": entity.lower()}
        if entity_id is not None:
            details["id"] = entity_id
        super().__init__(message, details)
        self.entity = entity
        self.entity_id = entity_id


class MissingInputError(PreProError):
    """Raised when a required input (script text, search prompts, ...) is absent."""

    status_code = 400


class UpstreamGenerationError(PreProError):
    """Raised when the language model returns nothing usable."""

    status_code = 502


class CandidateSourceError(PreProError):
    """Raised when the image search provider call fails."""

    status_code = 502


class NoCandidatesError(PreProError):
    status_code = 404

    def __init__(self, message: str = "No images found from Pexels"):
        super().__init__(message)


class NoSelectionError(PreProError):
    status_code = 404

    def __init__(self, message: str = "No suitable images could be selected"):
        super().__init__(message)
