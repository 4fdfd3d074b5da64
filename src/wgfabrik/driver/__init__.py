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

"""Adapters to the host: templates, wg, systemctl and iptables."""

from ._command import run_command
from ._firewall import FirewallChains
from ._jinja2_template import Jinja2Template, TemplateRenderer
from ._keygen import KeyGenerator
from ._service_manager import ServiceManager, SystemdServiceManager

__all__ = [
    'FirewallChains',
    'Jinja2Template',
    'KeyGenerator',
    'ServiceManager',
    'SystemdServiceManager',
    'TemplateRenderer',
    'run_command',
]
