# Example: pyESPControl Usage Demo
# --------------------------------
# This script connects to an ESP32 controller, loads the actuator tab and
# prints connection banner changes while it polls the device.
#
# Usage:
#   - Set ESP_HOST below or in a .env file (see pyespcontrol/config.py for all variables)
#   - Run: python example.py
#   - Unplug the controller's network to watch it reconnect (1s, 1.5s, 2.25s ... max 30s)

import asyncio
import os

import dotenv

import pyespcontrol

# Load environment variables from .env file if present
dotenv.load_dotenv()

# Enable debug logging for more verbose output (optional for learning)
# pyespcontrol.set_debug(True)

host = os.getenv('ESP_HOST', '192.168.4.1')  # Address of your controller


def show_banner(banner):
    print(f"[banner] {banner}")


async def main():
    async with pyespcontrol.ControlPanel(host) as panel:
        panel.monitor.add_listener(show_banner)

        # Modules served by the device call register(); in-process ones can too
        panel.register("system", lambda: print("System tab active"))

        status = await panel.api.status()
        print(f"Connected to {panel.host} (uptime {status.get('uptime_ms', 0) // 1000}s)")

        for act in await panel.api.actuator_status():
            print(f"  Actuator {act['id']}: {act.get('name') or 'unnamed'}")

        await panel.start()
        await panel.switch_tab("system")

        # Keep polling for a minute
        await asyncio.sleep(60)


if __name__ == "__main__":
    asyncio.run(main())
