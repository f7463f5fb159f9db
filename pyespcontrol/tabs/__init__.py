"""
 Code units for the feature module tabs

 One module per FeatureModule. The loader imports pyespcontrol.tabs.<name>
 the first time its tab is activated and calls

    load(register, api=..., panel=..., notify=...)

 which registers the tab's initializer. Initializers refresh the tab's data
 into panel.tab_data[<name>].
"""
