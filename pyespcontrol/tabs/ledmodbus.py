"""LED controller on the RS485 bus (default slave id from ESP_LED_SLAVE_ID)."""


def load(register, api, panel, notify, **_):

    async def init():
        panel.tab_data["ledmodbus"] = await api.ledmodbus_status()

    register("ledmodbus", init)
