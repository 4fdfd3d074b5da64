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

"""Typed settings schemas with shared defaults.

The dataclasses below are the single source of truth for what can be
configured in ``wgfabrik.yml`` and for the values used when a key is
absent. Both the CLI and the managers receive a ``Settings`` instance
explicitly; nothing reads global state.
"""

from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class ToolPaths:
    """Default tool paths for Linux systems."""

    wg: str = 'wg'
    iptables: str = 'iptables'
    systemctl: str = 'systemctl'


@dataclass
class Settings:
    """Deployment settings."""

    # Deployment root and the files below it
    config_dir: str = '/etc/wireguard'
    client_dir: str = 'client_configs'
    key_file: str = 'keys.txt'

    # Values written into client documents. An empty endpoint blocks
    # client creation, there is no sensible default.
    client_dns: str = ''
    default_endpoint: str = ''
    persistent_keepalive: int = 25

    # Device that carries shared internet traffic
    outbound_device: str = 'eth0'

    # Systemd unit per interface
    unit_template: str = 'wg-quick@wg{index}.service'

    paths: ToolPaths = field(default_factory=ToolPaths)

    @property
    def root(self) -> Path:
        return Path(self.config_dir)

    @property
    def client_root(self) -> Path:
        return self.root / self.client_dir

    @property
    def key_path(self) -> Path:
        return self.root / self.key_file


DEFAULT_SETTINGS = Settings()
