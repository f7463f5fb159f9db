# pyESPControl Module - Command Line
# -*- coding: utf-8 -*-
"""
 Command line access to an ESP32 controller

 Usage:
    python -m pyespcontrol [-debug] <command> [options]

 Commands:
    status      Print device status
    watch       Poll the device and print connection banner changes
    restart     Reboot the controller
    actuators   List known actuators
    version     Print version information
"""

import argparse
import asyncio
import json
import sys

# Modules
from pyespcontrol import ControlPanel, Settings, version, set_debug
from pyespcontrol.exceptions import EspControlError
from pyespcontrol.views import BannerPrinter

settings = Settings()

# Setup parser and groups
p = argparse.ArgumentParser(prog="PyESPControl", description=f"PyESPControl Module v{version}")
subparsers = p.add_subparsers(dest="command", title='commands (run <command> -h to see usage information)',
                              required=True)


def add_connection_args(parser):
    parser.add_argument("-host", type=str, default=settings.host,
                        help=f"IP address of controller [Default={settings.host}]")
    parser.add_argument("-timeout", type=float, default=settings.timeout,
                        help=f"Seconds to wait for a response [Default={settings.timeout}]")


status_args = subparsers.add_parser("status", help='Print device status')
add_connection_args(status_args)

watch_args = subparsers.add_parser("watch", help='Poll device and report connection changes')
add_connection_args(watch_args)
watch_args.add_argument("-interval", type=float, default=settings.poll_interval,
                        help=f"Seconds between status polls [Default={settings.poll_interval}]")
watch_args.add_argument("-nocolor", action="store_true", default=False, help="Disable color text output.")

restart_args = subparsers.add_parser("restart", help='Reboot the controller')
add_connection_args(restart_args)

actuator_args = subparsers.add_parser("actuators", help='List known actuators')
add_connection_args(actuator_args)

version_args = subparsers.add_parser("version", help='Print version information')

# Add a global debug flag
p.add_argument("-debug", action="store_true", default=False, help="Enable debug output")


def make_panel(args) -> ControlPanel:
    s = settings.model_copy(update={"host": args.host, "timeout": args.timeout})
    if getattr(args, "interval", None):
        s.poll_interval = args.interval
    return ControlPanel(settings=s)


async def run_status(args):
    async with make_panel(args) as panel:
        print(json.dumps(await panel.api.status(), indent=4))


async def run_watch(args):
    async with make_panel(args) as panel:
        panel.monitor.add_listener(BannerPrinter(sys.stdout, color=not args.nocolor))
        panel.poller.add_listener(lambda s: print(json.dumps(s)))
        panel.poller.start()
        print(f"Watching {panel.host} - press Ctrl-C to stop")
        while True:
            await asyncio.sleep(3600)


async def run_restart(args):
    async with make_panel(args) as panel:
        await panel.api.restart()
        print(f"Restarting {panel.host}")


async def run_actuators(args):
    async with make_panel(args) as panel:
        for act in await panel.api.actuator_status():
            name = act.get('name') or 'Actuator #%s' % act.get('id')
            if act.get('connected'):
                print(f"{act.get('id'):>3}  {name:<20} Pos: {act.get('position')} | "
                      f"{act.get('current')}mA | {float(act.get('voltage', 0)):.1f}V")
            else:
                print(f"{act.get('id'):>3}  {name:<20} Disconnected")


def main():
    if len(sys.argv) == 1:
        p.print_help(sys.stderr)
        sys.exit(1)
    args = p.parse_args()
    if args.debug:
        set_debug(toggle=True, color=True)

    commands = {"status": run_status, "watch": run_watch, "restart": run_restart, "actuators": run_actuators}
    if args.command == "version":
        print(f"pyESPControl version {version}")
        return
    try:
        asyncio.run(commands[args.command](args))
    except KeyboardInterrupt:
        print("\nStopped")
    except EspControlError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
