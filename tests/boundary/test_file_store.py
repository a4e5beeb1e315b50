"""
Tests for local upload storage.

System role: Verification of upload persistence and filename hygiene
"""

from pathlib import Path

import pytest

from learnability.boundary.storage.file_store import FileStore, sanitize_filename


class TestSanitizeFilename:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("notes.pdf", "notes.pdf"),
            ("../../etc/passwd", "passwd"),
            ("C:\\Users\\me\\lecture 1.txt", "lecture_1.txt"),
            (".hidden", "hidden"),
            ("", "upload"),
        ],
    )
    def test_sanitize(self, raw: str, expected: str) -> None:
        assert sanitize_filename(raw) == expected


class TestFileStore:
    def test_save_writes_under_tenant_directory(self, upload_dir: Path, tenant_id: str) -> None:
        store = FileStore(upload_dir)

        path = store.save(tenant_id, "notes.txt", b"Lecture notes")

        assert path.read_bytes() == b"Lecture notes"
        assert path.parent == upload_dir / tenant_id
        assert path.name.endswith("_notes.txt")

    def test_same_name_does_not_collide(self, upload_dir: Path, tenant_id: str) -> None:
        store = FileStore(upload_dir)

        first = store.save(tenant_id, "notes.txt", b"one")
        second = store.save(tenant_id, "notes.txt", b"two")

        assert first != second
        assert first.read_bytes() == b"one"

    def test_delete(self, upload_dir: Path, tenant_id: str) -> None:
        store = FileStore(upload_dir)
        path = store.save(tenant_id, "notes.txt", b"text")

        assert store.delete(path) is True
        assert not path.exists()
        assert store.delete(path) is False
        assert store.delete(None) is False
