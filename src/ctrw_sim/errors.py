"""Exceptions raised while setting up or running a DTSM simulation."""


class DTSMError(ValueError):
    """Base class for invalid simulation input."""


class InvalidParameter(DTSMError):
    """Non-positive spacing, negative diffusivity or a malformed snapshot list."""


class NegativeSurvival(DTSMError):
    """The survival function built from the tail function went negative."""


class InvalidTailFunction(DTSMError):
    """Survival probabilities outside [0, 1]; the tail is not non-increasing in age."""


__all__ = ["DTSMError", "InvalidParameter", "NegativeSurvival", "InvalidTailFunction"]
