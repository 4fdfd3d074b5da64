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

"""Synchronous execution of external tools."""

from __future__ import annotations

import logging
import subprocess

from wgfabrik.core import CommandError

logger = logging.getLogger(__name__)


def run_command(cmd: list[str], input_data: str | None = None) -> str:
    """Run *cmd* and return its stripped stdout.

    Blocks until the tool exits. Raises ``CommandError`` on a non-zero
    exit status or if the tool cannot be started.
    """
    logger.debug('Running: %s', ' '.join(cmd))
    try:
        result = subprocess.run(
            cmd,
            input=input_data,
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as e:
        raise CommandError(cmd, 127, str(e)) from e
    if result.returncode != 0:
        raise CommandError(cmd, result.returncode, result.stderr)
    return result.stdout.strip()
