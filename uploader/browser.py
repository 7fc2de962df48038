"""
Tab handling for the upload batch.

The first file always runs in the tab the batch started from. Later files
either reuse that tab or get a fresh one, depending on policy. Only tabs
opened here are ever closed here.
"""
import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from uploader.constants import TABS_NEW, TABS_REUSE, TAB_POLICIES

logger = logging.getLogger(__name__)


@dataclass
class BrowserTab:
    page: object
    owned: bool = False


class TabOpener:
    def __init__(self, context, start_page, url: str, policy: str = TABS_NEW,
                 settle: float = 2.0, before_close: float = 2.0,
                 sleep: Callable[[float], None] = time.sleep):
        if policy not in TAB_POLICIES:
            raise ValueError(f"Unknown tab policy: {policy}")
        self.context = context
        self.start_page = start_page
        self.url = url
        self.policy = policy
        self.settle = settle
        self.before_close = before_close
        self.sleep = sleep

    def open_for(self, index: int, previous: Optional[BrowserTab] = None) -> BrowserTab:
        """Return a tab showing the target page, ready for the index-th file."""
        if index == 0:
            tab = BrowserTab(self.start_page, owned=False)
        elif self.policy == TABS_REUSE and previous is not None and not previous.page.is_closed():
            tab = previous
        else:
            tab = BrowserTab(self.context.new_page(), owned=True)

        logger.debug("Opening %s for file %d (owned=%s)", self.url, index + 1, tab.owned)
        tab.page.goto(self.url, wait_until='load')
        self.sleep(self.settle)
        return tab

    def release(self, tab: BrowserTab) -> Optional[BrowserTab]:
        """
        Finish with a tab after a successful file.

        Owned tabs are closed after a short pause and None is returned;
        the starting tab is handed back for reuse.
        """
        if not tab.owned:
            return tab
        self.sleep(self.before_close)
        tab.page.close()
        return None
