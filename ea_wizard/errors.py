"""Error taxonomy for Expert Advisor generation."""

from __future__ import annotations

from enum import Enum


class FailureKind(str, Enum):
    """Why a generation attempt failed."""
    CONFIGURATION = "configuration_error"
    GENERATION = "generation_error"
    COMPOSITION = "composition_error"


class ConfigurationError(RuntimeError):
    """Raised when the credential for the generation service is missing."""
    pass


class GenerationError(RuntimeError):
    """Raised when the call to the generation service fails."""
    pass


class SubmissionRejected(ValueError):
    """Raised when a submission is refused before any request is built."""
    pass


GENERIC_GENERATION_MESSAGE = "Failed to generate Expert Advisor. Please try again."
GENERIC_COMPOSITION_MESSAGE = "Could not build the generation request. Please check your inputs and try again."
