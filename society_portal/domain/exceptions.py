"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidTransitionError(DomainException):
    """Status change not permitted from the record's current state"""

    pass


class BillAlreadyPaidError(DomainException):
    """Bill is already settled"""

    pass
