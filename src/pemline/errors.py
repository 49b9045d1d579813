from __future__ import annotations


class PemlineError(RuntimeError):
    """Base class for pemline errors. `user_message` is safe to display."""

    user_message = "Something went wrong."


class EngineUnavailable(PemlineError):
    """Exception raised when the cryptographic engine cannot be used."""

    user_message = "The cryptographic engine is not available in this environment."


class GenerationFailed(PemlineError):
    """Exception raised when key generation or key export fails."""

    user_message = "Failed to generate keys. Please try again."


class AlreadyInProgress(PemlineError):
    """Exception raised when a generation is requested while one is running."""

    user_message = "Key generation is already in progress."


class ClipboardWriteFailed(PemlineError):
    """Exception raised when the clipboard refuses a write."""

    user_message = "Failed to copy to clipboard."


class PemFormatError(PemlineError):
    """Exception raised when PEM text cannot be parsed back into key bytes."""

    user_message = "Not a valid PEM block."
