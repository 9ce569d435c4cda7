"""
Change-log reading for release notes.

The change-log is a markdown file made of release sections:

    # Changelog

    ## vNext
    - Added something

    ## 2.0.0
    ### Fixed
    - A bug

A release section starts with a level-2 heading (``## ``). Its entries
are the following non-blank lines up to the next heading of level 1 or 2;
level-3+ headings belong to the section.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Union

from .exit_codes import PreconditionError

logger = logging.getLogger(__name__)

# Order matters: '%' must be escaped before the others introduce new ones
MSBUILD_ESCAPES = [
    ('%', '%25'),
    ('$', '%24'),
    ('@', '%40'),
    ("'", '%27'),
    (';', '%3B'),
    ('?', '%3F'),
    ('*', '%2A'),
    (',', '%2C'),
    ('"', '%22'),
    ('\r', '%0D'),
    ('\n', '%0A'),
]


@dataclass(frozen=True)
class ChangeLogSection:
    """One version-tagged block of release notes."""
    heading: str
    caption: str
    entries: tuple

    def render(self) -> str:
        return '\n'.join((self.heading,) + self.entries)


def _is_release_heading(line: str) -> bool:
    return line.startswith('## ')


def _is_section_content(line: str) -> bool:
    return line.startswith('###') or not line.startswith('#')


def _caption(heading: str) -> str:
    """'## [2.1.0] - 2024-01-01' -> '2.1.0'"""
    stripped = heading.lstrip('# [')
    return stripped.split(' ')[0].rstrip(']') if stripped else ''


def parse_sections(text: str) -> List[ChangeLogSection]:
    """
    Split change-log text into release sections.

    Blank lines are dropped. Content before the first level-2 heading
    (the document title, intro prose) is not part of any section.
    """
    lines = [line.rstrip() for line in text.splitlines() if line.strip()]

    sections = []
    index = 0
    while index < len(lines):
        line = lines[index]
        if not _is_release_heading(line):
            index += 1
            continue

        end = index + 1
        while end < len(lines) and _is_section_content(lines[end]):
            end += 1

        sections.append(ChangeLogSection(
            heading=line,
            caption=_caption(line),
            entries=tuple(lines[index + 1:end]),
        ))
        index = end

    return sections


def read_changelog(path: Union[str, Path]) -> str:
    """Read the change-log file; a missing file is a precondition failure."""
    changelog_path = Path(path)
    if not changelog_path.is_file():
        raise PreconditionError(f"Change-log file not found: {changelog_path}")
    return changelog_path.read_text(encoding='utf-8')


def get_complete_changelog(path: Union[str, Path]) -> str:
    """Return every release section, newest first, as one markdown text."""
    sections = parse_sections(read_changelog(path))
    return '\n\n'.join(section.render() for section in sections)


def extract_latest_section_notes(path: Union[str, Path]) -> List[str]:
    """
    Return the entries of the most recent release section that has any.

    Raises:
        PreconditionError: If the change-log has no non-empty section
    """
    for section in parse_sections(read_changelog(path)):
        if section.entries:
            logger.debug(f"Using change-log section '{section.caption}'")
            return list(section.entries)
    raise PreconditionError(f"No release notes found in change-log {path}")


def escape_for_msbuild(value: str) -> str:
    """Escape a string so it survives as an MSBuild /p: property value."""
    for char, escaped in MSBUILD_ESCAPES:
        value = value.replace(char, escaped)
    return value
