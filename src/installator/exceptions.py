"""Exception hierarchy for installation snippet extraction and migration."""

from typing import Optional


class InstallatorError(Exception):
    """Base exception for all installator errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ParsingError(InstallatorError):
    """Raised when the Lua parser cannot be set up or used."""

    def __init__(self, message: str, source: Optional[str] = None, **kwargs):
        super().__init__(message, kwargs)
        self.source = source


class LanguageNotSupportedError(InstallatorError):
    """Raised when a grammar binding is not available."""

    def __init__(self, language: str, details: Optional[dict] = None):
        message = f"Language '{language}' is not supported"
        error_details = {"language": language}
        if details:
            error_details.update(details)
        super().__init__(message, error_details)
        self.language = language


class ChunkRejectedError(InstallatorError):
    """A chunk was rejected for one plugin manager.

    Rejections are expected for ordinary README content. They drop the
    chunk/manager combination and never abort the repository run.
    """

    stage = "unknown"

    def __init__(self, message: str, manager: Optional[str] = None,
                 details: Optional[dict] = None):
        error_details = {"manager": manager, "stage": self.stage}
        if details:
            error_details.update(details)
        super().__init__(message, error_details)
        self.manager = manager


class ExtractionError(ChunkRejectedError):
    """Raised when no plugin declaration can be isolated from a chunk."""

    stage = "extractor"


class MigrationRejectedError(ChunkRejectedError):
    """Raised when an extracted declaration cannot be translated faithfully."""

    stage = "migrator"


class IncompatibleFieldError(MigrationRejectedError):
    """Raised when a source table carries a key with no lazy.nvim equivalent."""

    def __init__(self, field: str, manager: Optional[str] = None):
        super().__init__(
            f"Field '{field}' has no lazy.nvim equivalent",
            manager=manager,
            details={"field": field},
        )
        self.field = field


class FormattingError(ChunkRejectedError):
    """Raised when generated source cannot be pretty-printed or re-validated."""

    stage = "formatter"


class GenerationDefectError(InstallatorError):
    """Raised when a migration rule produced source that does not parse.

    This signals a bug in the translation rules, not bad input, so it is
    kept outside the ChunkRejectedError branch and propagates to the caller.
    """

    def __init__(self, manager: str, target: str, source: str):
        message = f"Migration from {manager} produced unparseable {target} source"
        super().__init__(message, {
            "manager": manager,
            "target": target,
            "source": source,
        })
        self.manager = manager
        self.target = target
        self.source = source


class ReadmeFetchError(InstallatorError):
    """Raised when a README could not be fetched after retries."""

    def __init__(self, repository: str, url: Optional[str] = None,
                 status_code: Optional[int] = None):
        message = f"Failed to fetch README for {repository}"
        super().__init__(message, {
            "repository": repository,
            "url": url,
            "status_code": status_code,
        })
        self.repository = repository
        self.url = url
        self.status_code = status_code
