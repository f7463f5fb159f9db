"""FreeRTOS task list."""


def load(register, api, panel, notify, **_):

    async def init():
        panel.tab_data["tasks"] = await api.tasks()

    register("tasks", init)
