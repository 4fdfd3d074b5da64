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

"""File-backed store for interface and client documents.

Layout below the deployment root::

    wg<N>.conf                  interface document (marked)
    <client_dir>/<name>.conf    standalone client document
"""

from __future__ import annotations

import contextlib
import logging
import re
from collections.abc import Iterator
from pathlib import Path

from ._document import MarkedDocument
from ._errors import AlreadyExists, ClientNotFound, InterfaceNotFound
from ._files import atomic_write
from .options import Settings

logger = logging.getLogger(__name__)

_INTERFACE_FILE_RE = re.compile(r'^wg(\d+)\.conf$')


class DocumentStore:
    """Loads, saves and deletes documents below the deployment root."""

    def __init__(self, settings: Settings) -> None:
        self.root = settings.root
        self.client_root = settings.client_root

    # -- Interface documents --

    def interface_path(self, index: int) -> Path:
        return self.root / f'wg{index}.conf'

    def exists(self, index: int) -> bool:
        return self.interface_path(index).is_file()

    def interface_indices(self) -> list[int]:
        """Indices of all interface documents, ascending."""
        if not self.root.is_dir():
            return []
        indices = []
        for path in self.root.iterdir():
            m = _INTERFACE_FILE_RE.match(path.name)
            if m and path.is_file():
                indices.append(int(m.group(1)))
        return sorted(indices)

    def load(self, index: int) -> MarkedDocument:
        path = self.interface_path(index)
        if not path.is_file():
            msg = f'Interface wg{index} does not exist'
            raise InterfaceNotFound(msg)
        return MarkedDocument.parse(path.read_text(encoding='utf-8'))

    def save(self, index: int, doc: MarkedDocument) -> None:
        atomic_write(self.interface_path(index), doc.render())

    def create(self, index: int, doc: MarkedDocument) -> None:
        if self.exists(index):
            msg = f'Interface wg{index} already exists'
            raise AlreadyExists(msg)
        self.save(index, doc)
        logger.debug('Wrote %s', self.interface_path(index))

    def delete(self, index: int) -> None:
        path = self.interface_path(index)
        if not path.is_file():
            msg = f'Interface wg{index} does not exist'
            raise InterfaceNotFound(msg)
        path.unlink()
        logger.debug('Deleted %s', path)

    @contextlib.contextmanager
    def edit(self, index: int) -> Iterator[MarkedDocument]:
        """Yield the document of *index* and save it when the block succeeds.

        An exception inside the block leaves the file untouched.
        """
        doc = self.load(index)
        before = doc.render()
        yield doc
        if doc.render() != before:
            self.save(index, doc)
            logger.debug('Saved %s', self.interface_path(index))

    # -- Client documents --

    def client_path(self, name: str) -> Path:
        return self.client_root / f'{name}.conf'

    def client_exists(self, name: str) -> bool:
        return self.client_path(name).exists()

    def read_client(self, name: str) -> str:
        path = self.client_path(name)
        if not path.is_file():
            msg = f'No configuration for client {name} in {self.client_root}'
            raise ClientNotFound(msg)
        return path.read_text(encoding='utf-8')

    def write_client(self, name: str, text: str) -> Path:
        path = self.client_path(name)
        if path.exists():
            msg = f'Configuration for client {name} already exists in {self.client_root}'
            raise AlreadyExists(msg)
        atomic_write(path, text)
        logger.debug('Wrote %s', path)
        return path

    def delete_client(self, name: str) -> bool:
        """Delete the client document. Returns False if there was none."""
        path = self.client_path(name)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        logger.debug('Deleted %s', path)
        return True
