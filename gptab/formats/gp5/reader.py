"""
Guitar Pro 5 file reader.

Loads .gp5 files and decodes them into the Score model.
"""

from pathlib import Path
from typing import Any, Dict, Union

from gptab.formats.gp5.decoder import GP5Decoder
from gptab.formats.header.reader import read_score_info
from gptab.models.score import Score
from gptab.utils.validation import TabFormatError, detect_signature, is_compressed_container


class GP5Reader:
    """
    Reader for Guitar Pro 5 tablature files.

    Example:
        score = GP5Reader.read("song.gp5")
        print(f"{score.title} by {score.artist}: {score.track_count} tracks")
    """

    EXTENSIONS = (".gp3", ".gp4", ".gp5")

    def __init__(self):
        self.decoder = GP5Decoder()

    @classmethod
    def read(cls, filepath: Union[str, Path]) -> Score:
        """
        Read a GP5 file and return a Score.

        Args:
            filepath: Path to .gp5 file

        Returns:
            Parsed Score object
        """
        reader = cls()
        return reader.parse_file(filepath)

    def parse_file(self, filepath: Union[str, Path]) -> Score:
        """
        Parse a GP5 file.

        Args:
            filepath: Path to .gp5 file

        Returns:
            Parsed Score object

        Raises:
            FileNotFoundError: If the file does not exist
        """
        filepath = Path(filepath)

        if not filepath.exists():
            raise FileNotFoundError(f"File not found: {filepath}")

        with open(filepath, "rb") as f:
            data = f.read()

        return self.parse_bytes(data)

    def parse_bytes(self, data: bytes) -> Score:
        """
        Parse GP5 data from bytes.

        Args:
            data: Raw file contents

        Returns:
            Parsed Score object
        """
        return self.decoder.decode(data)

    @staticmethod
    def can_read(filepath: Union[str, Path]) -> bool:
        """
        Check whether a file looks like a Guitar Pro file.

        Only the extension and the magic header are checked; the version
        may still be one the full decoder rejects.
        """
        filepath = Path(filepath)
        if filepath.suffix.lower() not in GP5Reader.EXTENSIONS or not filepath.is_file():
            return False

        with open(filepath, "rb") as f:
            head = f.read(32)
        return is_compressed_container(head) or detect_signature(head) is not None

    @staticmethod
    def get_file_info(filepath: Union[str, Path]) -> Dict[str, Any]:
        """
        Get metadata about a Guitar Pro file without decoding its music.

        Args:
            filepath: Path to a .gp3/.gp4/.gp5 file

        Returns:
            Dictionary with the file path, size and header text fields, or
            an "error" entry if the header cannot be read
        """
        filepath = Path(filepath)
        with open(filepath, "rb") as f:
            data = f.read()

        info: Dict[str, Any] = {
            "path": str(filepath),
            "size": len(data),
        }
        try:
            info.update(read_score_info(data).to_dict())
            info["valid"] = True
        except TabFormatError as e:
            info["valid"] = False
            info["error"] = str(e)
        return info
