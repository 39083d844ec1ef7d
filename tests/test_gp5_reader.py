"""Tests for the GP5 file reader."""

import pytest

from conftest import info_header
from gptab import GP5Reader
from gptab.utils.validation import UnsupportedVersionError


class TestGP5Reader:
    """Test cases for the file-level reader."""

    def test_read(self, song_file):
        """Test reading a file from disk."""
        score = GP5Reader.read(song_file)

        assert score.title == "Test Song"
        assert score.track_count == 3
        assert score.measure_count == 2

    def test_read_str_path(self, song_file):
        """Test a string path is accepted."""
        score = GP5Reader.read(str(song_file))

        assert score.artist == "Tester"

    def test_missing_file(self, tmp_path):
        """Test a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError, match="File not found"):
            GP5Reader.read(tmp_path / "missing.gp5")

    def test_parse_bytes(self, song_data):
        """Test decoding from memory."""
        reader = GP5Reader()

        score = reader.parse_bytes(song_data)

        assert score.info.title == "Test Song"
        assert score.info.instructions == "Play it"

    def test_compressed_file(self, tmp_path):
        """Test a BCFZ file is rejected."""
        path = tmp_path / "new.gp5"
        path.write_bytes(b"BCFZ" + bytes(64))

        with pytest.raises(UnsupportedVersionError):
            GP5Reader.read(path)


class TestCanRead:
    """Test cases for GP5Reader.can_read."""

    def test_gp5_file(self, song_file):
        """Test a synthetic GP5 file is recognised."""
        assert GP5Reader.can_read(song_file)

    def test_gp3_header(self, tmp_path):
        """Test older versions are recognised by their signature."""
        path = tmp_path / "old.gp3"
        path.write_bytes(info_header("FICHIER GUITAR PRO v3.00", ["Old"]))

        assert GP5Reader.can_read(path)

    def test_wrong_extension(self, tmp_path, song_data):
        """Test files with another extension are skipped."""
        path = tmp_path / "song.txt"
        path.write_bytes(song_data)

        assert not GP5Reader.can_read(path)

    def test_wrong_magic(self, tmp_path):
        """Test files without a signature are rejected."""
        path = tmp_path / "fake.gp5"
        path.write_bytes(b"not a guitar pro file at all, really")

        assert not GP5Reader.can_read(path)

    def test_missing(self, tmp_path):
        """Test a missing path is not readable."""
        assert not GP5Reader.can_read(tmp_path / "nothing.gp5")


class TestGetFileInfo:
    """Test cases for GP5Reader.get_file_info."""

    def test_valid(self, tmp_path):
        """Test metadata of a valid file."""
        data = info_header("FICHIER GUITAR PRO v5.10", ["Song", "Band"] + [""] * 7)
        path = tmp_path / "song.gp5"
        path.write_bytes(data)

        info = GP5Reader.get_file_info(path)

        assert info["valid"]
        assert info["size"] == len(data)
        assert info["version"] == "v5.1"
        assert info["title"] == "Song"
        assert info["artist"] == "Band"
        assert info["path"] == str(path)

    def test_invalid(self, tmp_path):
        """Test an invalid file reports its error."""
        path = tmp_path / "bad.gp4"
        path.write_bytes(bytes(40))

        info = GP5Reader.get_file_info(path)

        assert not info["valid"]
        assert "Invalid Guitar Pro file" in info["error"]
