"""Key bindings file reader and generated defaults.

A bindings file maps keys to lists of actions:

    # comment
    def_key "q"
        quit

Bindings the file leaves unbound are filled from DEFAULT_BINDINGS by
generate_defaults(). What the actions do is up to the client; only their names
are stored here.
"""

import re
from dataclasses import dataclass, field
from pathlib import Path

from loguru import logger

from .errors import ResourceError

DEFAULT_BINDINGS: dict[str, tuple[str, ...]] = {
    "up": ("scroll_up",),
    "k": ("scroll_up",),
    "down": ("scroll_down",),
    "j": ("scroll_down",),
    "page_up": ("page_up",),
    "page_down": ("page_down",),
    "home": ("move_home",),
    "end": ("move_end",),
    "enter": ("enter_directory", "play_item"),
    "space": ("add_item_to_playlist",),
    "delete": ("delete_playlist_items",),
    "p": ("pause",),
    "s": ("stop",),
    ">": ("next",),
    "<": ("previous",),
    "+": ("volume_up",),
    "-": ("volume_down",),
    "r": ("toggle_repeat",),
    "z": ("toggle_random",),
    "/": ("find_item_forward",),
    "tab": ("next_screen",),
    "shift-tab": ("previous_screen",),
    "f1": ("show_help",),
    "1": ("show_playlist",),
    "2": ("show_browser",),
    "3": ("show_search_engine",),
    "4": ("show_media_library",),
    "5": ("show_playlist_editor",),
    "6": ("show_tag_editor",),
    "7": ("show_outputs",),
    "8": ("show_visualizer",),
    "=": ("show_clock",),
    "l": ("show_lyrics",),
    "q": ("quit",),
}

_DEF_KEY_RE = re.compile(r'^def_key\s+"(?P<key>[^"]+)"$')


@dataclass
class Bindings:
    """Keys mapped to the actions they trigger, in file order."""

    keys: dict[str, list[str]] = field(default_factory=dict)

    def actions(self, key: str) -> list[str]:
        return self.keys.get(key, [])

    def generate_defaults(self) -> int:
        """Bind every default key the user left unbound. Returns how many were added."""
        added = 0
        for key, actions in DEFAULT_BINDINGS.items():
            if key not in self.keys:
                self.keys[key] = list(actions)
                added += 1
        return added


def parse_bindings(text: str, path: Path) -> Bindings:
    """Parse bindings file contents.

    Raises:
        ResourceError: On a malformed line, naming the file and line number
    """
    bindings = Bindings()
    current: str | None = None
    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        if raw[0].isspace():
            if current is None:
                raise ResourceError(f"{path}:{lineno}: action {line!r} outside of a key definition")
            bindings.keys[current].append(line)
            continue
        if current is not None and not bindings.keys[current]:
            raise ResourceError(f"{path}:{lineno}: key {current!r} has no actions")
        m = _DEF_KEY_RE.match(line)
        if not m:
            raise ResourceError(f"{path}:{lineno}: invalid definition {line!r}")
        current = m["key"]
        # Redefining a key replaces its previous actions.
        bindings.keys[current] = []
    if current is not None and not bindings.keys[current]:
        raise ResourceError(f"{path}: key {current!r} has no actions")
    return bindings


def read_bindings(path: Path) -> Bindings | None:
    """Read the bindings file at `path`. Returns None if it does not exist.

    Raises:
        ResourceError: If the file exists but cannot be read or parsed
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    except (OSError, UnicodeDecodeError) as e:
        raise ResourceError(f"{path}: cannot read bindings: {e}")
    return parse_bindings(text, path)


def load_bindings(path: Path) -> Bindings:
    """Load bindings from `path`, falling back to defaults when the file is missing or broken."""
    try:
        bindings = read_bindings(path)
    except ResourceError as e:
        logger.warning(f"Ignoring bindings file: {e}")
        bindings = None
    if bindings is None:
        logger.debug(f"{path}: No usable bindings file, using defaults")
        bindings = Bindings()
    else:
        logger.debug(f"{path}: Loaded {len(bindings.keys)} key bindings")
    bindings.generate_defaults()
    return bindings
