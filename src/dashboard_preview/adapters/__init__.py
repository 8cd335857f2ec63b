"""Host adapters that drive the preview outside an editor."""

from .file_host import FilePreviewHost

__all__ = ["FilePreviewHost"]
