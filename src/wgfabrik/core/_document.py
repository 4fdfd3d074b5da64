# Copyright (C) 2026 Linuxfabrik <info@linuxfabrik.ch>
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.
#
# On Debian systems, the complete text of the GNU General Public License
# version 2 can be found in /usr/share/common-licenses/GPL-2.
#
# SPDX-License-Identifier: GPL-2.0-or-later

"""Line-oriented configuration documents with anchors and tags.

Supports:
- ``#!NAME`` on a line of its own: anchor, an insertion point that is
  never tagged and never deleted
- ``<text> #!TAG`` at the end of a line: tag, groups lines that are
  inserted and removed as one unit
- everything else is passed through untouched

Deleting a tag before inserting lines for it makes every edit
idempotent: the document never holds two generations of the same unit.
"""

from __future__ import annotations

import dataclasses
import re
from collections.abc import Iterable
from enum import StrEnum

from ._errors import NotFound

MARKER = '#!'

_ANCHOR_RE = re.compile(r'^#!(?P<name>\S+)$')
_TAGGED_RE = re.compile(r'^(?P<text>.*?\S)(?P<sep>\s+)#!(?P<tag>\S+)$')
_SETTING_RE = re.compile(r'^\s*(?P<key>[A-Za-z]+)\s*=\s*(?P<value>.*?)\s*$')


class Anchor(StrEnum):
    """Fixed insertion points of an interface document."""

    FIREWALL = 'IPTABLES'
    CLIENTS = 'CLIENTS'


RULE_TAG = 'RULE'
CLIENT_TAG_PREFIX = 'CLIENT-'


def client_tag(name: str) -> str:
    return f'{CLIENT_TAG_PREFIX}{name}'


@dataclasses.dataclass(frozen=True)
class DocumentLine:
    """One line: its text and, for tagged lines, the tag without marker."""

    text: str
    tag: str = ''
    # Whitespace between text and tag, kept as read.
    sep: str = dataclasses.field(default=' ', compare=False)

    @classmethod
    def parse(cls, raw: str) -> DocumentLine:
        if _ANCHOR_RE.match(raw):
            return cls(raw)
        m = _TAGGED_RE.match(raw)
        if m:
            return cls(m.group('text'), m.group('tag'), m.group('sep'))
        return cls(raw)

    @property
    def anchor(self) -> str:
        """The anchor name if this line is an anchor, else ''."""
        if self.tag:
            return ''
        m = _ANCHOR_RE.match(self.text)
        return m.group('name') if m else ''

    def render(self) -> str:
        if self.tag:
            return f'{self.text}{self.sep}{MARKER}{self.tag}'
        return self.text


class MarkedDocument:
    """An ordered arena of ``DocumentLine`` plus an index by tag."""

    def __init__(
        self,
        lines: Iterable[DocumentLine] = (),
        trailing_newline: bool = True,
        newline: str = '\n',
    ) -> None:
        self._lines: list[DocumentLine] = list(lines)
        self._trailing_newline = trailing_newline
        self.newline = newline
        self._tag_index: dict[str, list[int]] | None = None

    @classmethod
    def parse(cls, text: str) -> MarkedDocument:
        """Split *text* into lines so that ``render()`` gives it back unchanged.

        ``\\r\\n`` is used as the line ending if every ``\\n`` is preceded
        by ``\\r``; otherwise lines are split at ``\\n`` only.
        """
        newline = '\n'
        if '\r\n' in text and text.count('\r\n') == text.count('\n'):
            newline = '\r\n'
        raws = text.split(newline)
        trailing_newline = raws[-1] == ''
        if trailing_newline:
            raws.pop()
        return cls(
            (DocumentLine.parse(raw) for raw in raws),
            trailing_newline=trailing_newline,
            newline=newline,
        )

    def render(self) -> str:
        text = self.newline.join(line.render() for line in self._lines)
        if self._trailing_newline and self._lines:
            text += self.newline
        return text

    def __str__(self) -> str:
        return self.render()

    def __len__(self) -> int:
        return len(self._lines)

    @property
    def lines(self) -> list[DocumentLine]:
        return list(self._lines)

    # -- Index --

    def _index(self) -> dict[str, list[int]]:
        if self._tag_index is None:
            index: dict[str, list[int]] = {}
            for pos, line in enumerate(self._lines):
                if line.tag:
                    index.setdefault(line.tag, []).append(pos)
            self._tag_index = index
        return self._tag_index

    def _invalidate(self) -> None:
        self._tag_index = None

    # -- Queries --

    def anchor_exists(self, anchor: str) -> bool:
        return any(line.anchor == anchor for line in self._lines)

    def tag_exists(self, tag: str) -> bool:
        return tag in self._index()

    def tags(self) -> list[str]:
        """All tags in order of first appearance."""
        return list(self._index())

    def lines_with_tag(self, tag: str) -> list[DocumentLine]:
        return [self._lines[pos] for pos in self._index().get(tag, [])]

    def value(self, key: str) -> str | None:
        """Return the value of the first untagged ``key = value`` line."""
        for line in self._lines:
            if line.tag:
                continue
            m = _SETTING_RE.match(line.text)
            if m and m.group('key') == key:
                return m.group('value')
        return None

    # -- Mutations --

    def insert_after(self, anchor: str, lines: Iterable[str | DocumentLine]) -> None:
        """Insert *lines* right after every occurrence of *anchor*.

        The inserted lines keep the order in which they are given.
        """
        new_lines = [
            line if isinstance(line, DocumentLine) else DocumentLine.parse(line)
            for line in lines
        ]
        for line in new_lines:
            if line.anchor:
                msg = f'Refusing to insert anchor line {line.text!r}'
                raise ValueError(msg)

        positions = [pos for pos, line in enumerate(self._lines) if line.anchor == anchor]
        if not positions:
            msg = f'Anchor {MARKER}{anchor} not found'
            raise NotFound(msg)
        if not new_lines:
            return

        # Work backwards so earlier positions stay valid.
        for pos in reversed(positions):
            self._lines[pos + 1 : pos + 1] = new_lines
        self._invalidate()

    def delete_by_tag(self, tag: str) -> int:
        """Remove every line carrying *tag*. Returns the number removed."""
        if not tag:
            # Untagged lines, anchors among them, have tag ''.
            msg = 'Refusing to delete by an empty tag'
            raise ValueError(msg)
        before = len(self._lines)
        self._lines = [line for line in self._lines if line.tag != tag]
        removed = before - len(self._lines)
        if removed:
            self._invalidate()
        return removed

