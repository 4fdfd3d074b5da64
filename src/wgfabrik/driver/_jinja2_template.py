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

"""Jinja2 template loader and renderer.

Templates are looked up in ``~/wgfabrik/templates/<platform>/`` first,
so an operator can override the shipped documents, then in the
package's ``resources/templates/<platform>/`` directory.
"""

from __future__ import annotations

import importlib.resources
from pathlib import Path

import jinja2

PLATFORM = 'wireguard'


def _get_package_resources_dir() -> Path:
    ref = importlib.resources.files('wgfabrik') / 'resources'
    return Path(str(ref))


class Jinja2Template:
    """Load and render a Jinja2 template by platform and name."""

    def __init__(
        self,
        template_name: str,
        platform: str = PLATFORM,
        user_dir: Path | None = None,
    ) -> None:
        search_paths: list[str] = []

        if user_dir is None:
            user_dir = Path.home() / 'wgfabrik' / 'templates' / platform
        if user_dir.is_dir():
            search_paths.append(str(user_dir))

        pkg_dir = _get_package_resources_dir() / 'templates' / platform
        search_paths.append(str(pkg_dir))

        self._env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(search_paths),
            undefined=jinja2.StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        self._template = self._env.get_template(template_name)

    def render(self, context: dict) -> str:
        return self._template.render(context)


class TemplateRenderer:
    """Renders the interface and client documents."""

    INTERFACE_TEMPLATE = 'interface.conf.j2'
    CLIENT_TEMPLATE = 'client.conf.j2'

    def __init__(self, user_dir: Path | None = None) -> None:
        self._user_dir = user_dir

    def _render(self, name: str, context: dict) -> str:
        return Jinja2Template(name, user_dir=self._user_dir).render(context)

    def interface(self, context: dict) -> str:
        return self._render(self.INTERFACE_TEMPLATE, context)

    def client(self, context: dict) -> str:
        return self._render(self.CLIENT_TEMPLATE, context)
