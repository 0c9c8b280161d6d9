"""Error taxonomy shared by the capabilities, the pipeline and the API."""

from __future__ import annotations


class AdForgeError(Exception):
    """Base error carrying the failing stage and the tool's diagnostic text."""

    def __init__(
        self,
        message: str,
        stage: str | None = None,
        diagnostic: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.stage = stage
        self.diagnostic = diagnostic

    def to_dict(self) -> dict:
        return {
            "error": type(self).__name__,
            "details": self.message,
            "stage": self.stage,
            "diagnostic": self.diagnostic,
        }


class UploadError(AdForgeError):
    """Missing, oversized or unreadable upload."""


class AnalysisError(AdForgeError):
    """Vision capability failed (transport, quota, empty answer)."""


class DraftError(AdForgeError):
    """Script drafting capability failed."""


class SynthesisError(AdForgeError):
    """Speech synthesis failed or produced no audio."""


class MediaToolError(AdForgeError):
    """The media tool exited non-zero, timed out, or is not installed."""

    def __init__(
        self,
        message: str,
        stage: str | None = None,
        diagnostic: str | None = None,
        exit_code: int | None = None,
    ):
        super().__init__(message, stage=stage, diagnostic=diagnostic)
        self.exit_code = exit_code


class ConfigurationError(AdForgeError):
    """A required credential or setting is missing."""


class RunCancelledError(AdForgeError):
    """The caller signalled cancellation before the run finished."""


class PipelineError(AdForgeError):
    """A pipeline run aborted; ``cause`` holds the originating stage error."""

    def __init__(
        self,
        message: str,
        stage: str | None = None,
        diagnostic: str | None = None,
        cause: AdForgeError | None = None,
    ):
        super().__init__(message, stage=stage, diagnostic=diagnostic)
        self.cause = cause
