from __future__ import annotations

# Pipeline literals. Any of these can be overridden by a Django setting
# with the same name; see get_setting().

AGE_GAP_DATA_URL = "https://hollywoodagegap.com/movies.csv"

# old -> new, applied as literal substring replacements on participant names
AGE_GAP_NAME_CORRECTIONS = {"Ellen Page": "Elliot Page"}

AGE_GAP_COLORS = {
    "man": "#4e79a7",
    "woman": "#e15759",
    "segment": "#bab0ab",
}

AGE_GAP_PLOT_TITLE = "Hollywood Age Gaps"
AGE_GAP_PLOT_SUBTITLE = "Average age of men and women in on-screen couples, by release year"
AGE_GAP_PLOT_FOOTER = "Data: hollywoodagegap.com | Chart: age gap reporter"

AGE_GAP_OUTPUT_DIR = "output"

_DEFAULTS = {
    name: value
    for name, value in dict(globals()).items()
    if name.startswith("AGE_GAP_")
}


def get_setting(name: str):
    from django.conf import settings

    if name not in _DEFAULTS and not hasattr(settings, name):
        raise KeyError(f"Unknown age gap setting '{name}'")
    return getattr(settings, name, _DEFAULTS.get(name))
