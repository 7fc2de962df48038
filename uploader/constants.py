"""
Selectors and timing for the target "new episode" page.

The page is third-party and changes without notice; every selector the
workflow depends on is listed here.
"""
from dataclasses import dataclass

DEFAULT_TARGET_URL = "https://creators.spotify.com/pod/dashboard/episode/new"

# Selectors
FILE_INPUT_SELECTOR = "input[type=file]"
TITLE_SELECTOR = "#title-input"
RICH_TEXT_DESCRIPTION_SELECTOR = 'div[role="textbox"]'
HTML_TOGGLE_SELECTOR = 'label[data-encore-id="FormToggle"]'
HTML_TOGGLE_CHECKBOX_SELECTOR = 'input[type="checkbox"]'
DESCRIPTION_TEXTAREA_SELECTOR = 'textarea[name="description"]'
NEXT_BUTTON_LABEL = "Next"
PUBLISH_BUTTON_LABEL = "Publish"

# Description editor variants
DESCRIPTION_RICH_TEXT = "rich-text"
DESCRIPTION_HTML_TOGGLE = "html-toggle"
DESCRIPTION_MODES = [DESCRIPTION_RICH_TEXT, DESCRIPTION_HTML_TOGGLE]

# Tab policies between files
TABS_REUSE = "reuse"
TABS_NEW = "new-tab"
TAB_POLICIES = [TABS_REUSE, TABS_NEW]

AUDIO_EXTENSIONS = [".mp3", ".m4a", ".wav", ".ogg"]


@dataclass(frozen=True)
class Timings:
    """Poll bounds and fixed delays, in seconds."""
    page_settle: float = 2.0
    file_input_interval: float = 1.0
    file_input_attempts: int = 20
    # Uploads can be slow: 45 x 6s = 4.5 minutes
    title_interval: float = 6.0
    title_attempts: int = 45
    toggle_interval: float = 1.0
    toggle_attempts: int = 15
    toggle_settle: float = 1.0
    description_interval: float = 1.0
    description_attempts: int = 10
    after_metadata: float = 2.0
    after_next: float = 5.0
    after_publish: float = 8.0
    before_close: float = 2.0


# Browser profile, kept between runs so the host login survives
DEFAULT_PROFILE_DIR = "~/.voicenote-uploader/profile"
