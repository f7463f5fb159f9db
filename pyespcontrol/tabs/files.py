def load(register, api, panel, notify, **_):

    async def init():
        panel.tab_data["files"] = await api.files_info()

    register("files", init)
