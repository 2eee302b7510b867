"""Domain-specific exceptions — framework-independent."""


class DomainValidationError(Exception):
    """Raised when caller input is missing or malformed."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class MissingFieldsError(DomainValidationError):
    """Raised when one or more required fields are absent or blank."""

    def __init__(self, message: str, fields: list[str] | None = None):
        self.fields = fields or []
        super().__init__(message)


class InvalidIdError(DomainValidationError):
    """Raised when an identifier is not well-formed."""

    def __init__(self, entity_type: str, entity_id: str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"Invalid {entity_type.lower()} ID format")


class InvalidQueryError(DomainValidationError):
    """Raised when a search query is too short to run."""


class NoRecipientsError(DomainValidationError):
    """Raised when a newsletter has nobody to go to."""

    def __init__(self):
        super().__init__("No clients with email addresses found")


class EntityNotFoundError(Exception):
    """Raised when a requested entity does not exist."""

    def __init__(self, entity_type: str, entity_id: int | str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} with id '{entity_id}' not found")


class DuplicateEntityError(Exception):
    """Raised when attempting to create a duplicate entity."""

    def __init__(self, entity_type: str, field: str, value: str):
        self.entity_type = entity_type
        self.field = field
        self.value = value
        super().__init__(f"{entity_type} with {field}='{value}' already exists")


class DuplicateEmailError(DuplicateEntityError):
    """Raised when a client email is already used within the same law firm."""

    def __init__(self, email: str):
        super().__init__("Client", "email", email)


class ForbiddenError(Exception):
    """Raised when the actor may not touch a resource (other firm, or role)."""

    def __init__(self, message: str = "You don't have access to this client"):
        self.message = message
        super().__init__(message)


class ClientHasCasesError(Exception):
    """Raised when deleting a client that is still referenced by cases."""

    def __init__(self, client_id: str, case_count: int):
        self.client_id = client_id
        self.case_count = case_count
        super().__init__(
            f"Client '{client_id}' is referenced by {case_count} case(s) and cannot be deleted"
        )


class MailboxNotConfiguredError(Exception):
    """Raised when the mailbox gateway has no OAuth app credentials."""

    def __init__(self):
        super().__init__("Gmail service is not configured")


class MailboxNotAuthenticatedError(Exception):
    """Raised when mailbox tokens are missing, expired or revoked."""

    def __init__(self, message: str = "Gmail account not connected. Please connect your Gmail account first."):
        self.message = message
        super().__init__(message)


class AuthExchangeFailedError(Exception):
    """Raised when the provider rejects an authorization code."""

    def __init__(self, message: str = "Failed to exchange authorization code for tokens"):
        self.message = message
        super().__init__(message)


class MailboxProviderError(Exception):
    """Raised when the mailbox provider returns an unexpected error."""

    def __init__(self, provider: str, status_code: int, message: str):
        self.provider = provider
        self.status_code = status_code
        self.message = message
        super().__init__(f"[{provider}] {status_code}: {message}")


class MailDeliveryError(Exception):
    """Raised by a mail sender when a single message could not be sent.

    Caught per recipient by the newsletter dispatcher; never fatal to a run.
    """

    def __init__(self, recipient: str, message: str):
        self.recipient = recipient
        self.message = message
        super().__init__(message)
