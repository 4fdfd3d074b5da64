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

"""WireGuard key generation through the ``wg`` tool."""

from __future__ import annotations

from wgfabrik.core import KeyPair

from ._command import run_command


class KeyGenerator:
    """Produces fresh key pairs with ``wg genkey`` and ``wg pubkey``."""

    def __init__(self, wg: str = 'wg') -> None:
        self.wg = wg

    def generate(self) -> KeyPair:
        private_key = run_command([self.wg, 'genkey'])
        public_key = run_command([self.wg, 'pubkey'], input_data=private_key + '\n')
        return KeyPair(private_key=private_key, public_key=public_key)
