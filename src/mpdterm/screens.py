"""Screens the client can show at startup, and the names used to pick them."""

from enum import Enum


class ScreenType(Enum):
    HELP = "help"
    PLAYLIST = "playlist"
    BROWSER = "browser"
    SEARCH_ENGINE = "search_engine"
    MEDIA_LIBRARY = "media_library"
    PLAYLIST_EDITOR = "playlist_editor"
    TAG_EDITOR = "tag_editor"
    OUTPUTS = "outputs"
    VISUALIZER = "visualizer"
    CLOCK = "clock"
    LYRICS = "lyrics"


STARTUP_SCREENS: dict[str, ScreenType] = {screen.value: screen for screen in ScreenType}


def screen_from_name(name: str) -> ScreenType | None:
    """Look up a startup screen by name. Returns None for unknown names."""
    return STARTUP_SCREENS.get(name)
