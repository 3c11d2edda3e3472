"""
Version helpers for the Animica entropy accumulator.

Resolution order:
1) importlib.metadata, when `animica-entropy` is installed;
2) `git describe --tags --long --dirty --match "v*"` from the checkout;
3) BASE_VERSION with a local `+no-git` marker.

Returned versions are PEP 440.
"""
from __future__ import annotations

import re
import subprocess
from dataclasses import dataclass
from functools import lru_cache
from importlib.metadata import PackageNotFoundError, version as _pkg_version
from pathlib import Path
from typing import Optional

# Bump on intentional source-level releases.
BASE_VERSION = "0.2.0"

_DIST_NAME = "animica-entropy"

_DESCRIBE_RE = re.compile(
    r"^v(?P<tag>\d+\.\d+\.\d+(?:[abrc]\d+)?)-(?P<distance>\d+)-g(?P<commit>[0-9a-fA-F]+)(?P<dirty>-dirty)?$"
)


@dataclass(frozen=True)
class GitInfo:
    tag: str
    distance: int
    commit: str
    dirty: bool

    def pep440(self) -> str:
        if self.distance == 0 and not self.dirty:
            return self.tag
        local = f"+g{self.commit}" + (".dirty" if self.dirty else "")
        return f"{self.tag}.post{self.distance}{local}"


def _checkout_root(start: Path) -> Optional[Path]:
    for candidate in (start, *start.parents):
        if (candidate / ".git").exists():
            return candidate
    return None


@lru_cache(maxsize=1)
def _git_info() -> Optional[GitInfo]:
    root = _checkout_root(Path(__file__).resolve().parent)
    if root is None:
        return None
    try:
        out = subprocess.check_output(
            ["git", "-C", str(root), "describe", "--tags", "--long", "--dirty", "--match", "v*"],
            stderr=subprocess.DEVNULL,
            text=True,
        ).strip()
    except (OSError, subprocess.CalledProcessError):
        return None
    m = _DESCRIBE_RE.match(out)
    if not m:
        return None
    return GitInfo(
        tag=m.group("tag"),
        distance=int(m.group("distance")),
        commit=m.group("commit"),
        dirty=bool(m.group("dirty")),
    )


@lru_cache(maxsize=1)
def get_version() -> str:
    try:
        return _pkg_version(_DIST_NAME)
    except PackageNotFoundError:
        pass
    info = _git_info()
    if info is not None:
        return info.pep440()
    return f"{BASE_VERSION}+no-git"


__version__ = get_version()
__all__ = ["__version__", "get_version", "GitInfo", "BASE_VERSION"]
