import mimetypes

import pytest

from notes_restore.core.classifier import KEY_MIN_SIZE, classify, is_archive, is_key
from notes_restore.core.types import FileKind, InputFile


def _file(media_type: str, name: str, size: int = 10) -> InputFile:
    return InputFile(media_type=media_type, name=name, size=size, data=b"")


class TestClassify:
    @pytest.mark.parametrize(
        "media_type, name",
        [
            ("application/zip", "backup.zip"),
            ("application/zip", "backup"),
            ("application/octet-stream", "backup.zip"),
            ("", "notes.2024.01.01.zip"),
        ],
    )
    def test_archive(self, media_type: str, name: str):
        assert classify(_file(media_type, name)) == FileKind.ARCHIVE

    def test_key(self):
        f = _file("text/plain", "private.asc", size=KEY_MIN_SIZE)
        assert is_key(f)
        assert classify(f) == FileKind.KEY

    def test_small_key_is_unknown(self):
        f = _file("text/plain", "private.asc", size=KEY_MIN_SIZE - 1)
        assert classify(f) == FileKind.UNKNOWN

    def test_key_needs_plain_text_media_type(self):
        f = _file("application/pgp-keys", "private.asc", size=5000)
        assert classify(f) == FileKind.UNKNOWN

    def test_key_needs_asc_suffix(self):
        f = _file("text/plain", "private.txt", size=5000)
        assert classify(f) == FileKind.UNKNOWN

    def test_zip_named_file_wins_over_key_rules(self):
        f = _file("text/plain", "private.zip", size=100)
        assert classify(f) == FileKind.ARCHIVE

    def test_only_last_suffix_counts(self):
        assert not is_archive(_file("text/plain", "backup.zip.bak"))

    def test_name_without_dot(self):
        # The last dotted part of "zip" is "zip" itself.
        assert is_archive(_file("", "zip"))
        assert classify(_file("", "notes")) == FileKind.UNKNOWN


class TestInputFile:
    def test_from_bytes_guesses_media_type(self):
        f = InputFile.from_bytes("backup.zip", b"PK")
        assert f.media_type == "application/zip"
        assert f.size == 2
        assert f.suffix == "zip"

    def test_from_bytes_unknown_suffix(self):
        f = InputFile.from_bytes("mystery.qqq", b"abc")
        assert f.media_type == "application/octet-stream"

    def test_from_path(self, tmp_path):
        p = tmp_path / "private.asc"
        p.write_text("k" * 3000)
        f = InputFile.from_path(p)
        assert f.media_type == "text/plain"
        assert f.name == "private.asc"
        assert f.size == 3000
        assert classify(f) == FileKind.KEY

    def test_key_suffix_ignores_platform_table(self, monkeypatch):
        monkeypatch.setattr(
            mimetypes, "guess_type", lambda name: ("application/pgp-keys", None)
        )
        f = InputFile.from_bytes("private.asc", b"k" * KEY_MIN_SIZE)
        assert f.media_type == "text/plain"
        assert classify(f) == FileKind.KEY
