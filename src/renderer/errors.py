"""Typed exception hierarchy for block rendering.

Render errors are recoverable: the block renderer catches them at block
granularity, converts them into RenderWarning records and renders a
fallback fragment so sibling blocks and other pages are unaffected.
"""

from src.models.render_result import RenderWarning, WarningCode
from src.notion_api.errors import SiteGenError


class RenderError(SiteGenError):
    """Base exception for all rendering errors."""

    code: WarningCode = WarningCode.MALFORMED_BLOCK_FIELD

    def __init__(self, message: str, block_id: str = "", block_kind: str = ""):
        super().__init__(message)
        self.block_id = block_id
        self.block_kind = block_kind
        self.original_message = message

    def to_warning(self) -> RenderWarning:
        """Convert this error into a warning record."""
        return RenderWarning(
            code=self.code,
            block_id=self.block_id,
            block_kind=self.block_kind,
            message=self.original_message,
        )


class UnsupportedBlockKindError(RenderError):
    """Raised when a block's kind has no renderer."""

    code = WarningCode.UNSUPPORTED_BLOCK_KIND

    def __init__(self, block_kind: str, block_id: str = ""):
        super().__init__(
            f"Unsupported block type '{block_kind}'",
            block_id=block_id,
            block_kind=block_kind,
        )


class MalformedBlockFieldError(RenderError):
    """Raised when a block lacks a field required to render it."""

    code = WarningCode.MALFORMED_BLOCK_FIELD

    def __init__(self, block_kind: str, field_name: str, reason: str = "missing", block_id: str = ""):
        super().__init__(
            f"Field '{field_name}' is {reason}",
            block_id=block_id,
            block_kind=block_kind,
        )
        self.field_name = field_name
        self.reason = reason
