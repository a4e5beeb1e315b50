from learnability.boundary.storage.file_store import FileStore, sanitize_filename

__all__ = ["FileStore", "sanitize_filename"]
