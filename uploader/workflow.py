"""
Episode upload workflow.

Each file walks the same steps on the target page:

    IDLE -> ATTACH_FILE -> AWAIT_UPLOAD_COMPLETE -> FILL_METADATA
         -> SUBMIT_NEXT -> AWAIT_REVIEW -> SUBMIT_PUBLISH -> DONE

Any step can end in FAILED. A failure stops the batch: the failed tab is
left open for inspection, the operator is notified once, and the
remaining files are reported as skipped.
"""
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional

from playwright.sync_api import Error as PlaywrightError

from uploader.browser import BrowserTab, TabOpener
from uploader.constants import (
    DESCRIPTION_HTML_TOGGLE,
    DESCRIPTION_MODES,
    DESCRIPTION_RICH_TEXT,
    DESCRIPTION_TEXTAREA_SELECTOR,
    FILE_INPUT_SELECTOR,
    HTML_TOGGLE_CHECKBOX_SELECTOR,
    HTML_TOGGLE_SELECTOR,
    NEXT_BUTTON_LABEL,
    PUBLISH_BUTTON_LABEL,
    RICH_TEXT_DESCRIPTION_SELECTOR,
    TITLE_SELECTOR,
    Timings,
)
from uploader.errors import ElementNotFound, WorkflowError
from uploader.items import UploadItem
from uploader.waits import poll

logger = logging.getLogger(__name__)

# Replace the editor content with a single paragraph; text is set, never parsed as HTML
_SET_PARAGRAPH_JS = """(el, text) => {
    el.innerHTML = '';
    const p = document.createElement('p');
    p.textContent = text;
    el.appendChild(p);
}"""


class Step(Enum):
    IDLE = "idle"
    ATTACH_FILE = "attach_file"
    AWAIT_UPLOAD_COMPLETE = "await_upload_complete"
    FILL_METADATA = "fill_metadata"
    SUBMIT_NEXT = "submit_next"
    AWAIT_REVIEW = "await_review"
    SUBMIT_PUBLISH = "submit_publish"
    DONE = "done"
    FAILED = "failed"


PUBLISHED = "published"
FAILED = "failed"
SKIPPED = "skipped"


@dataclass
class FileResult:
    name: str
    status: str
    failed_step: Optional[Step] = None
    error: Optional[str] = None


@dataclass
class BatchReport:
    results: List[FileResult] = field(default_factory=list)

    @property
    def published(self) -> List[FileResult]:
        return [r for r in self.results if r.status == PUBLISHED]

    @property
    def failure(self) -> Optional[FileResult]:
        for result in self.results:
            if result.status == FAILED:
                return result
        return None

    @property
    def ok(self) -> bool:
        return self.failure is None


Notifier = Callable[[UploadItem, Step, Exception], None]


def log_failure(item: UploadItem, step: Step, error: Exception) -> None:
    logger.error("Upload of %s failed during %s: %s", item.name, step.value, error)


class UploadWorkflow:
    """
    Runs a batch of files through the target page, strictly one at a time.
    """

    def __init__(self, tabs: TabOpener, description_mode: str = DESCRIPTION_RICH_TEXT,
                 timings: Timings = Timings(), notify: Notifier = log_failure,
                 sleep: Callable[[float], None] = time.sleep):
        if description_mode not in DESCRIPTION_MODES:
            raise ValueError(f"Unknown description mode: {description_mode}")
        self.tabs = tabs
        self.description_mode = description_mode
        self.timings = timings
        self.notify = notify
        self.sleep = sleep
        self.step = Step.IDLE

    def _enter(self, step: Step, item: UploadItem) -> None:
        self.step = step
        logger.info("[%s] %s", item.name, step.value)

    def run(self, items: List[UploadItem]) -> BatchReport:
        report = BatchReport()
        tab: Optional[BrowserTab] = None

        for index, item in enumerate(items):
            self.step = Step.IDLE
            try:
                tab = self.tabs.open_for(index, tab)
                self.process(tab, item)
            except (WorkflowError, PlaywrightError) as e:
                failed_step = self.step
                self.step = Step.FAILED
                report.results.append(FileResult(item.name, FAILED, failed_step, str(e)))
                self.notify(item, failed_step, e)
                report.results.extend(FileResult(rest.name, SKIPPED) for rest in items[index + 1:])
                return report

            report.results.append(FileResult(item.name, PUBLISHED))
            tab = self.tabs.release(tab)

        logger.info("Batch finished: %d of %d files published", len(report.published), len(items))
        return report

    def process(self, tab: BrowserTab, item: UploadItem) -> None:
        page = tab.page
        t = self.timings

        self._enter(Step.ATTACH_FILE, item)
        file_input = poll(lambda: page.query_selector(FILE_INPUT_SELECTOR),
                          t.file_input_interval, t.file_input_attempts,
                          sleep=self.sleep, what="file input")
        file_input.set_input_files(str(item.path))
        file_input.dispatch_event('change')

        # The title field only appears once the host has taken the audio
        self._enter(Step.AWAIT_UPLOAD_COMPLETE, item)
        title_field = poll(lambda: page.query_selector(TITLE_SELECTOR),
                           t.title_interval, t.title_attempts,
                           sleep=self.sleep, what="title field")

        self._enter(Step.FILL_METADATA, item)
        title_field.focus()
        title_field.fill(item.title)
        title_field.dispatch_event('input')
        title_field.dispatch_event('change')
        self._fill_description(page, item.title)
        self.sleep(t.after_metadata)

        self._enter(Step.SUBMIT_NEXT, item)
        self._click_button(page, NEXT_BUTTON_LABEL)

        self._enter(Step.AWAIT_REVIEW, item)
        self.sleep(t.after_next)

        self._enter(Step.SUBMIT_PUBLISH, item)
        self._click_button(page, PUBLISH_BUTTON_LABEL)
        self.sleep(t.after_publish)

        self._enter(Step.DONE, item)

    def _fill_description(self, page, text: str) -> None:
        if self.description_mode == DESCRIPTION_HTML_TOGGLE:
            self._fill_description_html(page, text)
            return

        box = page.query_selector(RICH_TEXT_DESCRIPTION_SELECTOR)
        if box is None:
            logger.warning("No description editor on the page; leaving the description empty")
            return
        box.evaluate(_SET_PARAGRAPH_JS, text)
        box.dispatch_event('input')
        box.dispatch_event('change')

    def _fill_description_html(self, page, text: str) -> None:
        t = self.timings
        toggle = poll(lambda: page.query_selector(HTML_TOGGLE_SELECTOR),
                      t.toggle_interval, t.toggle_attempts,
                      sleep=self.sleep, what="HTML toggle")
        checkbox = toggle.query_selector(HTML_TOGGLE_CHECKBOX_SELECTOR)
        if checkbox is None:
            raise ElementNotFound("HTML toggle checkbox")
        if not checkbox.is_checked():
            toggle.click()
            self.sleep(t.toggle_settle)

        textarea = poll(lambda: page.query_selector(DESCRIPTION_TEXTAREA_SELECTOR),
                        t.description_interval, t.description_attempts,
                        sleep=self.sleep, what="description textarea")
        textarea.fill(text)
        textarea.dispatch_event('input')
        textarea.dispatch_event('change')

    @staticmethod
    def _click_button(page, label: str) -> None:
        button = page.query_selector(f"xpath=//button[contains(., '{label}')]")
        if button is None:
            raise ElementNotFound(f"{label} button")
        button.click()
