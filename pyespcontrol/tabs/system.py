"""System tab: firmware status and WiFi connection."""


def load(register, api, panel, notify, **_):

    async def init():
        panel.tab_data["system"] = {
            "status": await api.status(),
            "wifi": await api.wifi_status(),
        }

    register("system", init)
