"""Domain exceptions for the Content Generator Service.

Pure domain exceptions with no framework dependencies. They represent
rule violations detected while validating an inbound generation request,
before any upstream work is attempted.

Exception Hierarchy:
    - DomainError: Base exception for all domain errors
    - InvalidPromptError: Prompt validation failures
    - InvalidRequestError: General request validation failures
"""


class DomainError(Exception):
    """Base exception for all domain errors.

    Catching DomainError catches every domain exception, which is how the
    request handler turns them into ``InvalidRequest`` errors.
    """


class InvalidPromptError(DomainError):
    """Raised when a prompt is missing, not a string, or blank."""


class InvalidRequestError(DomainError):
    """Raised when a request body violates the request contract.

    Common causes:
        - Body is not valid JSON
        - Body is not a JSON object
        - Body exceeds the accepted payload size
    """
