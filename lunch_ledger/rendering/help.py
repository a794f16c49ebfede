"""Static help document returned for the help command"""

from pathlib import Path

from lunch_ledger.config import settings


def load_help_text(path: Path | None = None) -> str:
    """Read the help document fresh on each call so edits show up without a restart"""
    help_path = Path(path) if path is not None else settings.help_path
    return help_path.read_text(encoding="utf-8")
