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

"""Key registry: one WireGuard key pair per interface identity.

The registry file holds one ``identity:private:public`` record per line.
WireGuard keys are base64 and never contain a colon.
"""

from __future__ import annotations

import dataclasses
import logging
from pathlib import Path
from typing import Protocol

from ._errors import AlreadyExists, NotFound
from ._files import atomic_write

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class KeyPair:
    private_key: str
    public_key: str
    owner: str = ''


class KeySource(Protocol):
    """Anything that can produce a fresh key pair."""

    def generate(self) -> KeyPair: ...


class KeyRegistry:
    """File-backed mapping from interface identity to key pair."""

    def __init__(self, path: Path | str, generator: KeySource) -> None:
        self.path = Path(path)
        self._generator = generator

    def _read(self) -> list[KeyPair]:
        if not self.path.exists():
            return []
        records = []
        for lineno, line in enumerate(
            self.path.read_text(encoding='utf-8').splitlines(), start=1
        ):
            if not line.strip():
                continue
            parts = line.split(':')
            if len(parts) != 3:
                logger.warning('Skipping malformed key record at %s:%d', self.path, lineno)
                continue
            owner, private_key, public_key = parts
            records.append(KeyPair(private_key, public_key, owner))
        return records

    def _find(self, identity) -> KeyPair | None:
        key = str(identity)
        for record in self._read():
            if record.owner == key:
                return record
        return None

    def exists(self, identity) -> bool:
        return self._find(identity) is not None

    def identities(self) -> list[str]:
        return [record.owner for record in self._read()]

    def create(self, identity) -> KeyPair:
        """Generate and store a key pair for *identity*.

        Raises ``AlreadyExists`` without touching the file if the identity
        already has a pair.
        """
        key = str(identity)
        if self.exists(key):
            msg = f'Key pair for interface wg{key} already exists'
            raise AlreadyExists(msg)

        generated = self._generator.generate()
        pair = KeyPair(generated.private_key, generated.public_key, key)

        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open('a', encoding='utf-8') as f:
            f.write(f'{pair.owner}:{pair.private_key}:{pair.public_key}\n')
        self.path.chmod(0o600)
        logger.info('Created key pair for wg%s', key)
        return pair

    def get(self, identity) -> KeyPair:
        pair = self._find(identity)
        if pair is None:
            msg = f'Key pair for interface wg{identity} not found'
            raise NotFound(msg)
        return pair

    def delete(self, identity) -> None:
        """Remove the record for *identity* by rewriting the file."""
        key = str(identity)
        records = self._read()
        remaining = [r for r in records if r.owner != key]
        if len(remaining) == len(records):
            msg = f'Key pair for interface wg{key} not found'
            raise NotFound(msg)

        text = ''.join(f'{r.owner}:{r.private_key}:{r.public_key}\n' for r in remaining)
        atomic_write(self.path, text, mode=0o600)
        logger.info('Deleted key pair for wg%s', key)
