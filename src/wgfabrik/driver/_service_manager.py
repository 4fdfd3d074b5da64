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

"""Service manager collaborator: starts and stops interface units."""

from __future__ import annotations

import logging
from typing import Protocol

from wgfabrik.core import CommandError

from ._command import run_command

logger = logging.getLogger(__name__)


class ServiceManager(Protocol):
    def enable(self, index: int) -> None: ...

    def disable(self, index: int) -> None: ...

    def start(self, index: int) -> None: ...

    def stop(self, index: int) -> None: ...

    def restart(self, index: int) -> None: ...

    def is_active(self, index: int) -> bool: ...


class SystemdServiceManager:
    """Drives ``wg-quick@wg<N>.service`` units through systemctl."""

    def __init__(
        self,
        systemctl: str = 'systemctl',
        unit_template: str = 'wg-quick@wg{index}.service',
    ) -> None:
        self.systemctl = systemctl
        self.unit_template = unit_template

    def unit(self, index: int) -> str:
        return self.unit_template.format(index=index)

    def _systemctl(self, action: str, index: int) -> str:
        return run_command([self.systemctl, action, self.unit(index)])

    def enable(self, index: int) -> None:
        self._systemctl('enable', index)

    def disable(self, index: int) -> None:
        self._systemctl('disable', index)

    def start(self, index: int) -> None:
        self._systemctl('start', index)

    def stop(self, index: int) -> None:
        self._systemctl('stop', index)

    def restart(self, index: int) -> None:
        self._systemctl('restart', index)

    def is_active(self, index: int) -> bool:
        try:
            return self._systemctl('is-active', index) == 'active'
        except CommandError:
            # is-active exits non-zero for inactive and unknown units
            return False
