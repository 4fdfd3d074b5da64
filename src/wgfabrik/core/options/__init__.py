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

"""Deployment settings.

Usage::

    from wgfabrik.core.options import load_settings

    settings = load_settings('/etc/wgfabrik/wgfabrik.yml', missing_ok=True)
    settings.client_root  # -> Path('/etc/wireguard/client_configs')
"""

from wgfabrik.core.options._loader import load_settings, settings_from_dict
from wgfabrik.core.options._schemas import DEFAULT_SETTINGS, Settings, ToolPaths

__all__ = [
    'DEFAULT_SETTINGS',
    'Settings',
    'ToolPaths',
    'load_settings',
    'settings_from_dict',
]
