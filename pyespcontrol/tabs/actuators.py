"""Actuator list: ids, names and feedback of every configured actuator."""


def load(register, api, panel, notify, **_):

    async def init():
        actuators = await api.actuator_status()
        panel.tab_data["actuators"] = {a.get("id"): a for a in actuators}

    register("actuators", init)
