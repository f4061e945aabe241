#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Command line access to the playout device.

Usage:
    i2ctl -c config.yaml exec 'runPres("PresentationId=4")'
    i2ctl -c config.yaml store-data C:/i2/Localscan/temp/BERecord.i2m --priority
    i2ctl -c config.yaml restart-process I2jPipeline
    i2ctl -c config.yaml playlist request.json
"""
import argparse
import asyncio
import logging
import sys

from .client import I2Client
from .config import ConfigError, get_config, load_config_file
from .playlist import PlaylistRequest

logger = logging.getLogger('i2ctl')


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='i2ctl',
        description='Send commands to an i2 playout device'
    )
    parser.add_argument('-c', '--config', help='JSON or YAML config file')
    sub = parser.add_subparsers(dest='action', required=True)

    p = sub.add_parser('exec', help='Send a raw device command')
    p.add_argument('device_command')

    p = sub.add_parser('store-data', help='Store a data file')
    p.add_argument('path')
    p.add_argument('--priority', action='store_true')

    p = sub.add_parser('store-image', help='Store an image')
    p.add_argument('path')
    p.add_argument('--extension', required=True)
    p.add_argument('--issue-time', required=True)
    p.add_argument('--image-type', required=True)
    p.add_argument('--location', required=True)
    p.add_argument('--priority', action='store_true')

    p = sub.add_parser('send-bundle', help='Stage a star bundle')
    p.add_argument('path')

    sub.add_parser('restart-service', help='Restart the i2 service')

    p = sub.add_parser('restart-process', help='Restart a device process')
    p.add_argument('name')

    sub.add_parser('mpc', help='Print MachineProductCfg.xml')

    p = sub.add_parser('playlist', help='Handle a playlist request file')
    p.add_argument('request', help='JSON or YAML playlist request')

    return parser


async def run(args, client: I2Client) -> bool:
    """Dispatch one parsed command. Returns True on success."""
    if args.action == 'exec':
        output = await client.exec(args.device_command)
        if output:
            print(output, end='')
        return output is not None

    if args.action == 'store-data':
        return await client.data.store_data(args.path, args.priority) is True

    if args.action == 'store-image':
        return await client.data.store_image(
            args.path, args.priority, args.extension, args.issue_time,
            args.image_type, args.location
        ) is True

    if args.action == 'send-bundle':
        return await client.bundle.send(args.path) is True

    if args.action == 'restart-service':
        return await client.sys.restart_service() is True

    if args.action == 'restart-process':
        return await client.sys.restart_process(args.name) is True

    if args.action == 'mpc':
        config = client.sys.get_mpc()
        if config is None:
            return False
        print(config)
        return True

    if args.action == 'playlist':
        request = PlaylistRequest.from_dict(load_config_file(args.request))
        handled = await client.playlist.handle_playlist(request)
        if handled:
            # Keep the loop alive until the follow-on waves have fired
            logger.info(f"Waiting for {client.scheduler.pending_count} scheduled commands")
            await client.wait_idle()
        return handled is True

    raise ValueError(f'Unknown action: {args.action}')


async def _main(args) -> int:
    try:
        _, device = get_config(args.config)
    except ConfigError as e:
        print(f'ERROR: {e}', file=sys.stderr)
        return 1

    async with I2Client(device) as client:
        try:
            ok = await run(args, client)
        except (ConfigError, KeyError, TypeError, ValueError) as e:
            logger.error(f'Invalid playlist request: {e}')
            ok = False
    return 0 if ok else 1


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    try:
        return asyncio.run(_main(args))
    except KeyboardInterrupt:
        logger.info('Interrupted, pending commands cancelled')
        return 1


if __name__ == '__main__':
    sys.exit(main())
