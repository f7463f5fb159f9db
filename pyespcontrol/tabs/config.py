"""RS485 bus configuration."""

RS485_BAUDS = [9600, 19200, 38400, 57600, 115200]


def load(register, api, panel, notify, **_):

    async def init():
        config = await api.rs485_config()
        if config.get("baud_rate") not in RS485_BAUDS:
            notify(f"Unexpected RS485 baud rate {config.get('baud_rate')}", "warning")
        panel.tab_data["config"] = config

    register("config", init)
