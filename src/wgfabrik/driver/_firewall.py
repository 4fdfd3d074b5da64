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

"""Creates and removes the dedicated WIREGUARD_* chains on the host."""

from __future__ import annotations

import logging
from collections.abc import Callable

from wgfabrik.compiler import compile_chain_setup, compile_chain_teardown
from wgfabrik.core import CommandError

from ._command import run_command

logger = logging.getLogger(__name__)


class FirewallChains:
    def __init__(
        self,
        iptables: str = 'iptables',
        runner: Callable[[list[str]], str] = run_command,
    ) -> None:
        self.iptables = iptables
        self._run = runner

    def setup(self) -> None:
        """Recreate the chains from scratch."""
        self.teardown()
        for cmd in compile_chain_setup(self.iptables):
            self._run(cmd)
        logger.info('Created WIREGUARD chains')

    def teardown(self) -> None:
        """Remove the chains. Missing chains or hooks are not an error."""
        for cmd in compile_chain_teardown(self.iptables):
            try:
                self._run(cmd)
            except CommandError as e:
                logger.debug('Ignoring: %s', e)
        logger.info('Removed WIREGUARD chains')
