"""Error types for mhbayes."""


class MHBayesError(Exception):
    """Base exception for mhbayes errors."""
    pass


class InvalidParameterError(MHBayesError, ValueError):
    """A parameter is outside of its admissible range."""
    pass


class DegeneratePosteriorError(MHBayesError, ArithmeticError):
    """Both the true-positive and the false-positive rate terms are zero, so nobody tests positive."""
    pass
