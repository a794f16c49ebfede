"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidCommandError(DomainException):
    """Command payload is missing fields its command type requires"""

    pass


class DeliveryError(DomainException):
    """Replies could not be handed to the delivery collaborator"""

    pass
