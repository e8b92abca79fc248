"""
Merge conflict detection between two release catalogs.

`head` may add releases freely. Anything that would lose or rewrite a release
already in `base` is a conflict.
"""

import difflib
import json
from dataclasses import replace
from typing import Dict, List, Sequence, Set

from goreleases.constants import CATALOG_JSON_INDENT

from .assembler import sort_release_files
from .interfaces import Release


def _normalized(release: Release) -> Release:
    return replace(release, files=sort_release_files(release.files))


def _render(release: Release) -> List[str]:
    return json.dumps(release.to_dict(), indent=CATALOG_JSON_INDENT).splitlines()


def release_diff(base: Release, head: Release) -> str:
    """Return a unified diff between two releases rendered as JSON."""
    return "\n".join(
        difflib.unified_diff(
            _render(base),
            _render(head),
            fromfile="base",
            tofile="head",
            lineterm="",
        )
    )


def _quote(version: str) -> str:
    return json.dumps(version)


def find_conflicts(base: Sequence[Release], head: Sequence[Release]) -> List[str]:
    """
    Return the conflicts that prevent automatically merging `head` into `base`.

    Reported, without stopping at the first problem:
    - releases with no version, in either catalog;
    - duplicate versions within a catalog (the first occurrence is compared);
    - releases in `base` that `head` no longer has;
    - releases whose contents differ, ignoring file order.

    An empty list means `head` can be merged.
    """
    msgs: List[str] = []
    head_releases: Dict[str, Release] = {}
    for release in head:
        head_releases.setdefault(release.version, release)

    base_seen: Set[str] = set()
    for base_release in base:
        version = base_release.version
        if version == "":
            msgs.append("base has a release with no version")
            continue
        if version in base_seen:
            msgs.append(f"base has multiple releases with version {_quote(version)}")
            continue
        base_seen.add(version)

        head_release = head_releases.get(version)
        if head_release is None:
            msgs.append(f"head is missing release {_quote(version)}")
            continue
        normalized_base = _normalized(base_release)
        normalized_head = _normalized(head_release)
        if normalized_base != normalized_head:
            msgs.append(
                f"release {_quote(version)} differs:\n"
                f"{release_diff(normalized_base, normalized_head)}"
            )

    head_seen: Set[str] = set()
    for head_release in head:
        version = head_release.version
        if version == "":
            msgs.append("head has a release with no version")
            continue
        if version in head_seen:
            msgs.append(f"head has multiple releases with version {_quote(version)}")
            continue
        head_seen.add(version)
    return msgs
