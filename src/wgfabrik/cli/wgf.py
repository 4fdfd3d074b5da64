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

"""CLI entry point for managing WireGuard interfaces, clients and chains."""

import argparse
import logging
import sys

import wgfabrik
from wgfabrik.compiler import Direction, Policy, choices_for, parse_option
from wgfabrik.core import WgFabrikError
from wgfabrik.core.options import load_settings
from wgfabrik.driver import FirewallChains
from wgfabrik.manager import ClientManager, InterfaceManager

__author__ = 'Linuxfabrik GmbH, Zurich/Switzerland'

DESCRIPTION = """Provisions WireGuard interfaces, compiles their INPUT/OUTPUT/FORWARD policy
into tagged PostUp/PostDown iptables rules and manages their clients. All
confirmations are the caller's job; every command runs non-interactively."""

DEFAULT_CONFIG = '/etc/wgfabrik/wgfabrik.yml'

LOG_LEVELS = (logging.WARNING, logging.INFO, logging.DEBUG)


def _split(values):
    """Flatten repeated and comma-separated option values."""
    return [
        part.strip()
        for value in values or ()
        for part in value.split(',')
        if part.strip()
    ]


def _add_index(parser):
    parser.add_argument(
        'INDEX',
        type=int,
        help='interface index, N in wgN',
    )


def _add_policy_args(parser):
    parser.add_argument(
        '--input',
        choices=choices_for(Direction.INPUT),
        default='default',
        dest='INPUT',
        help='INPUT policy. Default: %(default)s',
    )
    parser.add_argument(
        '--input-networks',
        action='append',
        default=[],
        dest='INPUT_NETWORKS',
        help='network for "--input networks", repeat or comma-separate',
    )
    parser.add_argument(
        '--output',
        choices=choices_for(Direction.OUTPUT),
        default='default',
        dest='OUTPUT',
        help='OUTPUT policy. Default: %(default)s',
    )
    parser.add_argument(
        '--output-networks',
        action='append',
        default=[],
        dest='OUTPUT_NETWORKS',
        help='network for "--output networks", repeat or comma-separate',
    )
    parser.add_argument(
        '--forward',
        choices=choices_for(Direction.FORWARD),
        default='default',
        dest='FORWARD',
        help='FORWARD policy. Default: %(default)s',
    )
    parser.add_argument(
        '--forward-interfaces',
        action='append',
        default=[],
        dest='FORWARD_INTERFACES',
        help='target device for "--forward interfaces", repeat or comma-separate',
    )
    parser.add_argument(
        '--internet',
        action=argparse.BooleanOptionalAction,
        default=False,
        dest='INTERNET',
        help='share the outbound device with the interface (NAT). Default: %(default)s',
    )
    parser.add_argument(
        '--enable',
        action='store_true',
        dest='ENABLE',
        help='enable and start the interface after applying the policy',
    )


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog='wgf',
        description=DESCRIPTION,
    )

    parser.add_argument(
        '-c',
        '--config',
        default=DEFAULT_CONFIG,
        dest='CONFIG',
        help='path to the settings file. Default: %(default)s',
    )

    parser.add_argument(
        '-v',
        '--verbose',
        action='count',
        default=0,
        dest='VERBOSE',
        help='verbose output (repeat for higher verbosity)',
    )

    parser.add_argument(
        '-V',
        '--version',
        action='version',
        version=f'%(prog)s: v{wgfabrik.__version__} by {__author__}',
    )

    groups = parser.add_subparsers(dest='GROUP', required=True)

    # interface
    interface = groups.add_parser('interface', help='manage interfaces')
    actions = interface.add_subparsers(dest='ACTION', required=True)

    p = actions.add_parser('add', help='provision a new interface')
    _add_index(p)
    p.add_argument('-p', '--port', type=int, required=True, dest='PORT', help='listen port')
    p.add_argument(
        '-a',
        '--address',
        required=True,
        dest='ADDRESS',
        help='interface address in prefix notation, e.g. 10.0.0.1/24',
    )

    p = actions.add_parser('modify', help='replace the firewall policy of an interface')
    _add_index(p)
    _add_policy_args(p)

    for action, text in (
        ('remove', 'remove an interface with its keys and clients'),
        ('enable', 'enable and start an interface'),
        ('disable', 'stop and disable an interface'),
        ('restart', 'restart an interface'),
        ('show', 'show an interface'),
    ):
        _add_index(actions.add_parser(action, help=text))

    actions.add_parser('list', help='list interface indices')

    # client
    client = groups.add_parser('client', help='manage clients')
    actions = client.add_subparsers(dest='ACTION', required=True)

    p = actions.add_parser('add', help='add a client to an interface')
    _add_index(p)
    p.add_argument('NAME', help='client name (case sensitive)')
    p.add_argument(
        '-a',
        '--address',
        required=True,
        dest='ADDRESS',
        help='client address in prefix notation',
    )
    p.add_argument(
        '-r',
        '--route',
        action='append',
        required=True,
        dest='ROUTES',
        help='network routed through the tunnel, repeat or comma-separate',
    )
    p.add_argument(
        '--allowed',
        action='append',
        required=True,
        dest='ALLOWED',
        help='address the client may use, repeat or comma-separate',
    )
    p.add_argument(
        '--restart',
        action='store_true',
        dest='RESTART',
        help='restart the interface afterwards',
    )

    p = actions.add_parser('remove', help='remove a client from an interface')
    _add_index(p)
    p.add_argument('NAME', help='client name (case sensitive)')
    p.add_argument(
        '--restart',
        action='store_true',
        dest='RESTART',
        help='restart the interface afterwards',
    )

    p = actions.add_parser('list', help='list the clients of an interface')
    _add_index(p)

    p = actions.add_parser('show', help='print the configuration of a client')
    p.add_argument('NAME', help='client name (case sensitive)')

    # chains
    chains = groups.add_parser('chains', help='manage the WIREGUARD iptables chains')
    chains.add_argument('ACTION', choices=('setup', 'teardown'))

    groups.add_parser('uninstall', help='remove all interfaces and the chains')

    return parser.parse_args(argv)


def build_policy(args):
    """Turn the policy flags of ``interface modify`` into a ``Policy``."""
    return Policy(
        input=parse_option(Direction.INPUT, args.INPUT, _split(args.INPUT_NETWORKS)),
        output=parse_option(Direction.OUTPUT, args.OUTPUT, _split(args.OUTPUT_NETWORKS)),
        forward=parse_option(
            Direction.FORWARD,
            args.FORWARD,
            _split(args.FORWARD_INTERFACES),
        ),
        internet_sharing=args.INTERNET,
    )


def _interface_command(args, interfaces):
    match args.ACTION:
        case 'add':
            iface = interfaces.provision(args.INDEX, args.PORT, args.ADDRESS)
            print(f'Interface {iface.name} created, public key: {iface.public_key}')
        case 'modify':
            policy = build_policy(args)
            interfaces.apply_policy(args.INDEX, policy)
            print(f'Policy applied to wg{args.INDEX}')
            if args.ENABLE:
                interfaces.enable(args.INDEX)
        case 'remove':
            interfaces.remove(args.INDEX)
        case 'enable':
            interfaces.enable(args.INDEX)
        case 'disable':
            interfaces.disable(args.INDEX)
        case 'restart':
            interfaces.restart(args.INDEX)
        case 'list':
            for index in interfaces.list():
                print(f'wg{index}')
        case 'show':
            iface = interfaces.get(args.INDEX)
            print(f'Interface:  {iface.name}')
            print(f'Address:    {iface.address}')
            print(f'ListenPort: {iface.port}')
            print(f'PublicKey:  {iface.public_key}')
            print(f'Clients:    {", ".join(iface.clients) or "-"}')


def _client_command(args, interfaces, clients):
    match args.ACTION:
        case 'add':
            client = clients.add_client(
                args.INDEX,
                args.NAME,
                args.ADDRESS,
                _split(args.ROUTES),
                _split(args.ALLOWED),
            )
            print(f'Client configuration saved to: {client.config_path}')
            if args.RESTART:
                interfaces.restart(args.INDEX)
        case 'remove':
            clients.remove_client(args.INDEX, args.NAME)
            if args.RESTART:
                interfaces.restart(args.INDEX)
        case 'list':
            for summary in clients.list_clients(args.INDEX):
                print(f'Client {summary.name} allowed IPs: {summary.allowed_ips}')
        case 'show':
            print(clients.client_config(args.NAME), end='')


def run(args, interfaces, clients, chains):
    """Dispatch parsed *args* to the managers."""
    match args.GROUP:
        case 'interface':
            _interface_command(args, interfaces)
        case 'client':
            _client_command(args, interfaces, clients)
        case 'chains':
            if args.ACTION == 'setup':
                chains.setup()
            else:
                chains.teardown()
        case 'uninstall':
            removed = interfaces.remove_all()
            print(f'Removed {len(removed)} interface(s) and the WIREGUARD chains')


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=LOG_LEVELS[min(args.VERBOSE, len(LOG_LEVELS) - 1)],
        format='%(levelname)s: %(message)s',
    )

    try:
        settings = load_settings(args.CONFIG, missing_ok=args.CONFIG == DEFAULT_CONFIG)
        run(
            args,
            InterfaceManager.from_settings(settings),
            ClientManager.from_settings(settings),
            FirewallChains(settings.paths.iptables),
        )
    except (WgFabrikError, OSError) as e:
        print(f'Error: {e}', file=sys.stderr)
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
