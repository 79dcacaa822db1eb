"""
DOMAIN EXCEPTIONS - Business rule violations

These exceptions are raised by domain logic and caught by presentation layer.
Presentation layer maps them to HTTP status codes.
"""

from chatsync.domain.exceptions.entity_not_found import EntityNotFoundError
from chatsync.domain.exceptions.access_denied import AccessDeniedError
from chatsync.domain.exceptions.validation_error import DomainValidationError
from chatsync.domain.exceptions.invalid_participants import InvalidParticipantsError
from chatsync.domain.exceptions.unsupported_conversation_kind import (
    UnsupportedConversationKindError,
)
from chatsync.domain.exceptions.external_service import (
    ExternalServiceFailure,
    RateLimitedError,
)
from chatsync.domain.exceptions.subscription_failure import SubscriptionFailure
from chatsync.domain.exceptions.document_exists import DocumentExistsError

__all__ = [
    "EntityNotFoundError",
    "AccessDeniedError",
    "DomainValidationError",
    "InvalidParticipantsError",
    "UnsupportedConversationKindError",
    "ExternalServiceFailure",
    "RateLimitedError",
    "SubscriptionFailure",
    "DocumentExistsError",
]
