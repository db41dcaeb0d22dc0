"""Inbox folder scanning, brief parsing, and archive logic.

A brief is a markdown file whose YAML frontmatter names the job:

    ---
    kind: offer          # offer | hooks | score | analyze | sequence
    tier: pro
    coach_type: Fitness coach
    offer_type: 12-week program
    ---
    Optional body: the artifact to score/analyze, or extra context.
"""

import shutil
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

import frontmatter

BRIEF_KINDS = ("offer", "hooks", "score", "analyze", "sequence")


@dataclass
class Brief:
    kind: str
    body: str
    tier: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: str = "") -> str:
        value = self.metadata.get(key)
        return default if value is None else str(value)


def ensure_dirs(inbox_dir: Path, archive_dir: Path) -> None:
    """Create inbox and archive directories if they don't exist."""
    inbox_dir.mkdir(parents=True, exist_ok=True)
    archive_dir.mkdir(parents=True, exist_ok=True)


def scan_inbox(inbox_dir: Path) -> list[Path]:
    """Return all .md files in inbox_dir, sorted by mtime ascending (oldest first)."""
    files = list(inbox_dir.glob("*.md"))
    return sorted(files, key=lambda p: p.stat().st_mtime)


def parse_file(file_path: Path) -> tuple[str, dict]:
    """Parse a markdown file with optional YAML frontmatter.

    Returns:
        (content, metadata) where content is the body text. If no
        frontmatter, metadata is {}.
    """
    post = frontmatter.load(str(file_path))
    content = post.content.strip()
    metadata = dict(post.metadata)
    return content, metadata


def read_brief(file_path: Path) -> Brief:
    """Parse a brief file. Raises ValueError when ``kind`` is missing or unknown."""
    body, metadata = parse_file(file_path)
    kind = str(metadata.pop("kind", "")).strip().lower()
    if kind not in BRIEF_KINDS:
        raise ValueError(f"{file_path.name}: kind must be one of {', '.join(BRIEF_KINDS)}, got {kind!r}")
    tier = metadata.pop("tier", None)
    return Brief(kind=kind, body=body, tier=str(tier) if tier is not None else None, metadata=metadata)


def archive_file(file_path: Path, archive_dir: Path, *, failed: bool = False) -> Path:
    """Move file to archive_dir with a timestamp prefix.

    Args:
        file_path: Source file to archive.
        archive_dir: Destination directory.
        failed: If True, prefix filename with "FAILED_".

    Returns:
        Path to the archived file.
    """
    timestamp = datetime.now().strftime("%Y-%m-%dT%H%M")
    prefix = "FAILED_" if failed else ""
    dest_name = f"{prefix}{timestamp}_{file_path.name}"
    dest = archive_dir / dest_name
    shutil.move(str(file_path), str(dest))
    return dest
