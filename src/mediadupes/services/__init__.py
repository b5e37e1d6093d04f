from .file_service import FileService, PathProbe

__all__ = ["FileService", "PathProbe"]
