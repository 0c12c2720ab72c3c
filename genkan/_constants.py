"""Common literal values used across genkan.

Default sizes, filenames, and placeholder artwork live here so the loader,
pipeline, builder, and tests import the same values without drifting.
Intended for internal use within the genkan package.

Examples
--------
>>> from genkan import _constants
>>> _constants.DEFAULT_IMAGE_SIZES["avatar_size"]
512
>>> _constants.OUTPUT_FILENAME
'index.html'
"""

DEFAULT_CONFIG_FILENAME = "config.toml"
OUTPUT_FILENAME = "index.html"
DEFAULT_THEME = "simple"

THEME_TEMPLATE = "template.html"
THEME_STYLESHEET = "style.css"
THEME_SCRIPT = "script.js"

DEFAULT_IMAGE_SIZES: dict[str, int] = {
    "avatar_size": 512,
    "link_icon_size": 128,
    "social_icon_size": 128,
    "favicon_size": 64,
}

QR_CODE_SIZE = 200

DEFAULT_MAX_FETCHES = 8
FETCH_TIMEOUT_SECONDS = 10.0
USER_AGENT = "Mozilla/5.0 (compatible; genkan/0.1)"

DARK_MODE_CHOICES = ("auto", "light", "dark", "disable")

# Neutral globe outline substituted for link icons that cannot be fetched.
PLACEHOLDER_ICON_SVG = (
    '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 24 24" fill="none" '
    'stroke="#888888" stroke-width="1.5" stroke-linecap="round">'
    '<circle cx="12" cy="12" r="9"/><path d="M3 12h18"/>'
    '<path d="M12 3a14 14 0 0 1 0 18a14 14 0 0 1 0-18"/></svg>'
)
