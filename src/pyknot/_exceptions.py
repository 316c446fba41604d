"""Exceptions raised by PyKnot."""


class DomainError(ValueError):
    """Evaluation point lies outside the knot range of a polynomial."""

    pass


class PreconditionError(ValueError):
    """Input violates a precondition of a builder or the root finder.

    Raised for malformed knot sequences (too short, mismatched lengths,
    non-finite or not strictly increasing) and for root brackets whose
    endpoint values share the same sign.
    """

    pass
