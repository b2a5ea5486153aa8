"""Read formula sheets from text files and archives."""
from pathlib import Path
import tarfile
import tempfile
from typing import Callable, Dict, Iterable, List
import zipfile

import py7zr
from pydantic import BaseModel, ConfigDict, Field

SHEET_SUFFIX = ".txt"


def _sheet_member(names: Iterable[str], archive_path: Path) -> str:
    """Return the first archive member holding a text sheet."""
    for name in names:
        if name.endswith(SHEET_SUFFIX):
            return name
    raise ValueError(f"📄❌ No {SHEET_SUFFIX} sheet found in {archive_path.name}")


def _read_zip(archive_path: Path) -> bytes:
    with zipfile.ZipFile(archive_path) as archive:
        return archive.read(_sheet_member(archive.namelist(), archive_path))


def _read_tar_xz(archive_path: Path) -> bytes:
    with tarfile.open(archive_path, "r:xz") as archive:
        member = archive.getmember(_sheet_member(archive.getnames(), archive_path))
        return archive.extractfile(member).read()


def _read_7z(archive_path: Path) -> bytes:
    # The member is extracted to a scratch directory and read back from there
    with py7zr.SevenZipFile(archive_path, mode="r") as archive, tempfile.TemporaryDirectory() as tmpdir:
        name = _sheet_member(archive.getnames(), archive_path)
        archive.extract(path=tmpdir, targets=[name])
        return (Path(tmpdir) / name).read_bytes()


ARCHIVE_READERS: Dict[str, Callable[[Path], bytes]] = {
    ".zip": _read_zip,
    ".tar.xz": _read_tar_xz,
    ".7z": _read_7z,
}


class SheetLoader(BaseModel):
    """
    Load the formulas of a sheet, one per line.

    Supported inputs:
    - plain .txt files
    - .zip, .tar.xz and .7z archives, from which the first .txt member is read
    """

    model_config = ConfigDict(frozen=True)

    encoding: str = Field(default="utf-8", description="Encoding of the text content")

    def read(self, input_file: Path) -> List[str]:
        """
        Read a sheet and return its non-empty formulas.

        :param Path input_file: Path to the text file or archive

        :return: Stripped, non-empty lines
        :rtype: List[str]
        :raises ValueError: If the archive format is unsupported or contains no .txt file
        """
        input_file = Path(input_file)
        if input_file.name.endswith(SHEET_SUFFIX):
            data = input_file.read_bytes()
        else:
            data = self._read_archive(input_file)
        content = data.decode(self.encoding)
        return [line.strip() for line in content.splitlines() if line.strip()]

    def _read_archive(self, archive_path: Path) -> bytes:
        for suffix, reader in ARCHIVE_READERS.items():
            if archive_path.name.endswith(suffix):
                return reader(archive_path)
        raise ValueError(f"📄❌ Unsupported sheet format: {''.join(archive_path.suffixes)}")
