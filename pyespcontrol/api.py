"""
 Device API

 Typed wrappers for the controller's /api endpoints. Every call goes through
 ConnectionMonitor.track(), so any response keeps the connection marked up
 and a network failure starts reconnection. A payload with "success": false
 raises ApplicationFailure and leaves the connection state alone.

 Functions
    status()                          # Device status (wifi, modbus, uptime, heap)
    restart()                         # Reboot the controller
    wifi_scan() / wifi_status()       # Visible networks / station state
    wifi_connect(ssid, password)      # Join a network
    rs485_config()                    # RS485 bus settings
    set_rs485_config(baud_rate)       # Change baud rate (takes effect after restart)
    actuator_status()                 # All known MightyZap actuators
    actuator_scan()                   # Scan the bus for actuators
    actuator_add(id) / actuator_remove(id)
    actuator_set_name(id, name)
    actuator_force(id, on)            # Enable / disable actuator force
    actuator_move(id, position, speed, current)
    ledmodbus_status(slave_id)        # LED Modbus slave state
    ledmodbus_control(slave_id, ...)  # led_on, blink_mode, blink_period
    ledmodbus_config(slave_id, ...)   # new_slave_id, save_config, reboot
    tasks()                           # FreeRTOS task list
    files_info()                      # Filesystem partition usage
"""
import logging
from typing import Any, Optional

from pyespcontrol.exceptions import ApplicationFailure

log = logging.getLogger(__name__)

LED_SLAVE_ID = 10


class DeviceAPI:

    def __init__(self, transport, monitor, led_slave_id: int = LED_SLAVE_ID):
        self.transport = transport
        self.monitor = monitor
        self.led_slave_id = led_slave_id

    async def call(self, endpoint: str, method: str = "GET", data: Optional[dict] = None) -> Any:
        """Call /api/<endpoint> and return the decoded payload."""
        path = "/api/" + endpoint.lstrip('/')
        payload = await self.monitor.track(self.transport.perform(method, path, data))
        if isinstance(payload, dict) and payload.get("success") is False:
            message = payload.get("message") or f"{endpoint} failed"
            log.debug(f"Application failure from {path}: {message}")
            raise ApplicationFailure(message, payload)
        return payload

    # System

    async def status(self) -> dict:
        return await self.call("status")

    async def restart(self):
        return await self.call("restart", "POST")

    async def tasks(self) -> dict:
        return await self.call("tasks")

    async def files_info(self) -> dict:
        return await self.call("files/info")

    # WiFi / RS485

    async def wifi_scan(self) -> list:
        return await self.call("wifi/scan")

    async def wifi_status(self) -> dict:
        return await self.call("wifi/status")

    async def wifi_connect(self, ssid: str, password: str = ""):
        return await self.call("wifi/connect", "POST", {"ssid": ssid, "password": password})

    async def rs485_config(self) -> dict:
        return await self.call("rs485/config")

    async def set_rs485_config(self, baud_rate: int):
        return await self.call("rs485/config", "POST", {"baud_rate": int(baud_rate)})

    # Actuators

    async def actuator_status(self) -> list:
        d = await self.call("actuator/status")
        return d.get("actuators", []) if isinstance(d, dict) else []

    async def actuator_scan(self) -> dict:
        return await self.call("actuator/scan")

    async def actuator_add(self, actuator_id: int):
        return await self.call("actuator/add", "POST", {"id": actuator_id})

    async def actuator_remove(self, actuator_id: int):
        return await self.call("actuator/remove", "POST", {"id": actuator_id})

    async def actuator_set_name(self, actuator_id: int, name: str):
        return await self.call("actuator/set-name", "POST", {"id": actuator_id, "name": name.strip()})

    async def actuator_force(self, actuator_id: int, on: bool):
        return await self.call("actuator/control", "POST", {"id": actuator_id, "force": bool(on)})

    async def actuator_move(self, actuator_id: int, position: int, speed: int, current: int):
        goal = {"position": int(position), "speed": int(speed), "current": int(current)}
        return await self.call("actuator/control", "POST", {"id": actuator_id, "goal": goal})

    # LED Modbus slave

    async def ledmodbus_status(self, slave_id: Optional[int] = None) -> dict:
        slave_id = slave_id or self.led_slave_id
        return await self.call(f"ledmodbus/status?id={slave_id}")

    async def ledmodbus_control(self, slave_id: Optional[int] = None, **fields):
        """fields: led_on, blink_mode, blink_period"""
        payload = {"slave_id": slave_id or self.led_slave_id}
        payload.update(fields)
        return await self.call("ledmodbus/control", "POST", payload)

    async def ledmodbus_config(self, slave_id: Optional[int] = None, **fields):
        """fields: new_slave_id, save_config, reboot"""
        payload = {"slave_id": slave_id or self.led_slave_id}
        payload.update(fields)
        return await self.call("ledmodbus/config", "POST", payload)
