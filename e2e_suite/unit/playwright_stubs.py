"""
Stub Playwright objects for the framework tests.

The stubs implement just the parts of the async Playwright API the framework
calls, record what was done to them, and can be told to fail or hang.
"""

import asyncio
import re
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional


PNG_BYTES = b"\x89PNG\r\n\x1a\nstub"
DEFAULT_WAIT_TIMEOUT_MS = 30000


class FakeLocator:
    def __init__(self, page: "FakePage", key: str, count: int = 1, visible: bool = True):
        self.page = page
        self.key = key
        self._count = count
        self.visible = visible
        self.value = ""
        self.checked = False
        self.options: List[str] = []
        self.selected: Optional[Dict[str, Any]] = None
        self.files: Any = None
        self.dropped_on: Optional["FakeLocator"] = None

    def __repr__(self) -> str:
        return f"<FakeLocator {self.key}>"

    async def wait_for(self, state: str = "visible", timeout: Optional[float] = None) -> None:
        if state == "visible" and not self.visible:
            raise TimeoutError(f"Timeout {timeout}ms exceeded waiting for {self.key}")

    async def fill(self, text: str) -> None:
        self.value = text
        self.page.filled[self.key] = text

    async def press_sequentially(self, text: str, delay: float = 0) -> None:
        self.value += text

    async def click(self, **options: Any) -> None:
        button = options.get("button", "left")
        self.page.clicked.append(self.key if button == "left" else f"{button}:{self.key}")
        target = self.page.navigate_on_click.get(self.key)
        if target:
            self.page.url = target

    async def dblclick(self) -> None:
        self.page.clicked.append(f"dblclick:{self.key}")

    async def hover(self) -> None:
        self.page.clicked.append(f"hover:{self.key}")

    async def drag_to(self, target: "FakeLocator") -> None:
        self.dropped_on = target

    async def select_option(self, **selection: Any) -> List[str]:
        self.selected = selection
        return [str(v) for v in selection.values()]

    async def is_checked(self) -> bool:
        return self.checked

    async def check(self) -> None:
        self.checked = True

    async def uncheck(self) -> None:
        self.checked = False

    async def set_input_files(self, files: Any) -> None:
        self.files = files

    async def all_text_contents(self) -> List[str]:
        return list(self.options)

    def locator(self, selector: str) -> "FakeLocator":
        return self.page.locator(f"{self.key} >> {selector}")

    async def count(self) -> int:
        return self._count


class FakeVideo:
    def __init__(self, path: Path):
        self._path = path

    async def path(self) -> str:
        return str(self._path)


class FakeKeyboard:
    def __init__(self):
        self.pressed: List[str] = []

    async def press(self, key: str) -> None:
        self.pressed.append(key)


class FakeRequest:
    def __init__(self, url: str):
        self.url = url


class FakeRoute:
    def __init__(self, url: str):
        self.request = FakeRequest(url)
        self.fulfilled: Optional[Dict[str, Any]] = None

    async def fulfill(self, **response: Any) -> None:
        self.fulfilled = response


class FakeDialog:
    def __init__(self, message: str):
        self.message = message
        self.outcome: Optional[str] = None

    async def accept(self) -> None:
        self.outcome = "accepted"

    async def dismiss(self) -> None:
        self.outcome = "dismissed"


class FakePage:
    def __init__(self, context: "FakeContext", record_video: bool = True):
        self.context = context
        self.url = "about:blank"
        self.closed = False
        self.default_timeout: Optional[float] = None
        self.goto_calls: List[Dict[str, Any]] = []
        self.wait_for_url_calls: List[Dict[str, Any]] = []
        self.filled: Dict[str, str] = {}
        self.clicked: List[str] = []
        self.navigate_on_click: Dict[str, str] = {}
        self.locators: Dict[str, FakeLocator] = {}
        self.screenshots: List[Dict[str, Any]] = []
        self.routes: List[Any] = []
        self.listeners: Dict[str, Callable] = {}
        self.evaluated: List[Any] = []
        self.load_states: List[str] = []
        self.keyboard = FakeKeyboard()
        self.fail_screenshot = False
        self.fail_close = False

        video_dir = context.options.get("record_video_dir")
        self.video = FakeVideo(Path(video_dir) / "page@1.webm") if video_dir and record_video else None

    def set_default_timeout(self, timeout: float) -> None:
        self.default_timeout = timeout

    def _locator(self, key: str) -> FakeLocator:
        if key not in self.locators:
            self.locators[key] = FakeLocator(self, key)
        return self.locators[key]

    def get_by_label(self, text, exact=None) -> FakeLocator:
        return self._locator(f"label={text}")

    def get_by_role(self, role, **options) -> FakeLocator:
        name = options.get("name")
        return self._locator(f"role={role}[name={name}]" if name else f"role={role}")

    def get_by_text(self, text, exact=None) -> FakeLocator:
        return self._locator(f"text={text}")

    def get_by_placeholder(self, text, exact=None) -> FakeLocator:
        return self._locator(f"placeholder={text}")

    def get_by_alt_text(self, text, exact=None) -> FakeLocator:
        return self._locator(f"alt={text}")

    def get_by_title(self, text, exact=None) -> FakeLocator:
        return self._locator(f"title={text}")

    def get_by_test_id(self, test_id) -> FakeLocator:
        return self._locator(f"testid={test_id}")

    def locator(self, selector: str) -> FakeLocator:
        return self._locator(selector)

    async def goto(self, url: str, wait_until: Optional[str] = None) -> None:
        self.goto_calls.append({"url": url, "wait_until": wait_until})
        self.url = url

    async def wait_for_url(self, url: Any, timeout: Optional[float] = None) -> None:
        """Wait until the URL matches, bounded by `timeout` or the page default."""
        self.wait_for_url_calls.append({"url": url, "timeout": timeout})
        limit = timeout if timeout is not None else (self.default_timeout or DEFAULT_WAIT_TIMEOUT_MS)
        loop = asyncio.get_running_loop()
        deadline = loop.time() + limit / 1000
        while not self._url_matches(url):
            if loop.time() >= deadline:
                raise TimeoutError(f"Timeout {limit}ms exceeded waiting for URL {url}")
            await asyncio.sleep(0.01)

    def _url_matches(self, url: Any) -> bool:
        if isinstance(url, re.Pattern):
            return url.search(self.url) is not None
        if callable(url):
            return bool(url(self.url))
        return self.url == url

    async def wait_for_load_state(self, state: str = "load", timeout: Optional[float] = None) -> None:
        self.load_states.append(state)

    async def evaluate(self, expression: str, arg: Any = None) -> None:
        self.evaluated.append((expression, arg))

    async def route(self, pattern: str, handler: Callable) -> None:
        self.routes.append((pattern, handler))

    def once(self, event: str, handler: Callable) -> None:
        self.listeners[event] = handler

    async def screenshot(self, path: Optional[str] = None, full_page: bool = False) -> bytes:
        if self.fail_screenshot:
            raise RuntimeError("Target page has been closed")
        self.screenshots.append({"path": path, "full_page": full_page})
        if path:
            Path(path).write_bytes(PNG_BYTES)
        return PNG_BYTES

    async def close(self) -> None:
        if self.fail_close:
            raise RuntimeError("page close failed")
        self.closed = True


class FakeTracing:
    def __init__(self):
        self.start_options: Optional[Dict[str, Any]] = None
        self.stop_path: Optional[str] = None
        self.fail_stop = False

    async def start(self, **options: Any) -> None:
        self.start_options = options

    async def stop(self, path: Optional[str] = None) -> None:
        if self.fail_stop:
            raise RuntimeError("trace write failed")
        self.stop_path = path
        if path:
            Path(path).write_bytes(b"PK\x05\x06")


class FakeEventInfo:
    def __init__(self):
        self.value = asyncio.get_running_loop().create_future()


class FakeContext:
    def __init__(self, browser: "FakeBrowser", options: Dict[str, Any]):
        self.browser = browser
        self.options = options
        self.tracing = FakeTracing()
        self.pages: List[FakePage] = []
        self.routes: List[Any] = []
        self.closed = False
        self.default_timeout: Optional[float] = None
        self.navigation_timeout: Optional[float] = None
        self.popup_url = "about:blank"

    def set_default_timeout(self, timeout: float) -> None:
        self.default_timeout = timeout

    def set_default_navigation_timeout(self, timeout: float) -> None:
        self.navigation_timeout = timeout

    async def new_page(self) -> FakePage:
        page = FakePage(self, record_video=self.browser.record_video)
        if self.browser.on_new_page:
            self.browser.on_new_page(page)
        self.pages.append(page)
        return page

    @asynccontextmanager
    async def expect_page(self):
        info = FakeEventInfo()
        yield info
        page = FakePage(self, record_video=False)
        page.url = self.popup_url
        self.pages.append(page)
        info.value.set_result(page)

    async def route(self, pattern: str, handler: Callable) -> None:
        self.routes.append((pattern, handler))

    async def close(self) -> None:
        self.closed = True


class FakeBrowser:
    def __init__(self):
        self.contexts: List[FakeContext] = []
        self.closed = False
        self.hang_on_close = False
        self.fail_close = False
        self.record_video = True
        self.on_new_page: Optional[Callable[[FakePage], None]] = None

    async def new_context(self, **options: Any) -> FakeContext:
        context = FakeContext(self, options)
        self.contexts.append(context)
        return context

    async def close(self) -> None:
        if self.fail_close:
            raise RuntimeError("Connection closed")
        if self.hang_on_close:
            await asyncio.sleep(3600)
        self.closed = True


class FakeBrowserType:
    def __init__(self, name: str):
        self.name = name
        self.launch_options: Optional[Dict[str, Any]] = None
        self.browser = FakeBrowser()

    async def launch(self, **options: Any) -> FakeBrowser:
        self.launch_options = options
        return self.browser


class FakePlaywright:
    def __init__(self):
        self.chromium = FakeBrowserType("chromium")
        self.firefox = FakeBrowserType("firefox")
        self.webkit = FakeBrowserType("webkit")
        self.started = False
        self.stopped = False

    async def start(self) -> "FakePlaywright":
        self.started = True
        return self

    async def stop(self) -> None:
        self.stopped = True
