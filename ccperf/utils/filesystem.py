#!filepath: ccperf/utils/filesystem.py
from pathlib import Path

from ccperf.utils.logger import logs


class FileSystem:
    """
    File helpers
    - ensure_dir: create parents on demand
    - safe_write: tmp file -> rename
    """

    @staticmethod
    def ensure_dir(path: str | Path) -> Path:
        p = Path(path)
        if not p.exists():
            p.mkdir(parents=True, exist_ok=True)
            logs.debug(f"[FS] created directory: {p}")
        return p

    @staticmethod
    def safe_write(path: str | Path, data: bytes) -> None:
        """Write to `<path>.tmp` then rename, so readers never see a partial file."""
        path = Path(path)
        FileSystem.ensure_dir(path.parent)

        tmp_path = path.with_suffix(path.suffix + ".tmp")
        with open(tmp_path, "wb") as f:
            f.write(data)

        tmp_path.replace(path)
        logs.debug(f"[FS] wrote {path}")
