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

"""Policy compilation into iptables hook lines."""

from ._chains import (
    CHAIN_PREFIX,
    FILTER_CHAINS,
    POSTROUTING_CHAIN,
    compile_chain_setup,
    compile_chain_teardown,
)
from ._interface_properties import InterfaceProperties, check_interface_names
from ._policy import (
    ALLOWED_OPTIONS,
    CHOICES,
    AcceptAll,
    ChainDefault,
    Direction,
    InterfaceAddressOnly,
    Policy,
    PolicyOption,
    SameInterfaceOnly,
    SpecificInterfaces,
    SpecificNetworks,
    check_option,
    choices_for,
    parse_option,
)
from ._policy_compiler import PolicyCompiler
from ._rule import Hook, Rule, RuleBlock, RulePair, Verb

__all__ = [
    'ALLOWED_OPTIONS',
    'CHAIN_PREFIX',
    'CHOICES',
    'FILTER_CHAINS',
    'POSTROUTING_CHAIN',
    'AcceptAll',
    'ChainDefault',
    'Direction',
    'Hook',
    'InterfaceAddressOnly',
    'InterfaceProperties',
    'Policy',
    'PolicyCompiler',
    'PolicyOption',
    'Rule',
    'RuleBlock',
    'RulePair',
    'SameInterfaceOnly',
    'SpecificInterfaces',
    'SpecificNetworks',
    'Verb',
    'check_interface_names',
    'check_option',
    'choices_for',
    'compile_chain_setup',
    'compile_chain_teardown',
    'parse_option',
]
