"""Best-effort, non-blocking checks that person photos can be loaded."""

from concurrent.futures import Future, ThreadPoolExecutor, wait
import logging
from pathlib import Path
import re
import threading
from typing import Callable

import requests

logger = logging.getLogger(__name__)

PREFERRED_EXTENSIONS = ["jpg", "jpeg", "png"]
REDRAW_DELAY = 0.12

_EXTENSION = re.compile(r"^(.*)\.([a-z0-9]+)([?#].*)?$", re.IGNORECASE)


def alternate_urls(url: str) -> list[str]:
    """Same image under the other preferred extensions, query/fragment kept."""
    match = _EXTENSION.match((url or "").strip())
    if not match:
        return []
    base, ext, suffix = match.group(1), match.group(2).lower(), match.group(3) or ""
    return [f"{base}.{e}{suffix}" for e in PREFERRED_EXTENSIONS if e != ext]


def url_exists(url: str, base_dir: Path | None = None, timeout: float = 5.0) -> bool:
    """HEAD request for http(s) urls, file check for everything else."""
    if url.startswith(("http://", "https://")):
        try:
            response = requests.head(url, timeout=timeout, allow_redirects=True)
        except requests.RequestException as e:
            logger.debug("Image request failed for %s: %s", url, e)
            return False
        return response.status_code < 400

    path = Path(re.split(r"[?#]", url, maxsplit=1)[0])
    if not path.is_absolute() and base_dir is not None:
        path = Path(base_dir) / path
    return path.is_file()


class ImageProbe:
    """
    Fire-and-forget image reachability checks.

    A broken url is blanked on the next window build; alternates with other
    extensions are tried in the background and, when one loads, it is stored
    in ``replacements`` (keyed by person id) and a debounced redraw is
    scheduled through ``on_redraw``.
    """

    def __init__(
        self,
        checker: Callable[[str], bool] | None = None,
        on_redraw: Callable[[], None] | None = None,
        redraw_delay: float = REDRAW_DELAY,
        base_dir: Path | None = None,
        max_workers: int = 4,
    ):
        self.checker = checker or (lambda url: url_exists(url, base_dir))
        self.on_redraw = on_redraw
        self.redraw_delay = redraw_delay
        self.checked: set[str] = set()
        self.broken: set[str] = set()
        self.replacements: dict[str, str] = {}
        self._attempted: set[tuple[str, str]] = set()
        self._lock = threading.Lock()
        self._timer: threading.Timer | None = None
        self._last_timer: threading.Timer | None = None
        self._futures: set[Future] = set()
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="image-probe")

    def resolve(self, person_id: str, url: str) -> str:
        """Url to display right now: a found alternate, nothing if broken, else the url."""
        with self._lock:
            if person_id in self.replacements:
                return self.replacements[person_id]
            if url in self.broken:
                return ""
            return url

    def probe(self, url: str, person_id: str):
        url = (url or "").strip()
        if not url:
            return
        with self._lock:
            if url in self.checked or url in self.broken:
                return
            self.checked.add(url)
            future = self._executor.submit(self._check, url, person_id)
            self._futures.add(future)
        future.add_done_callback(self._finished)

    def _finished(self, future: Future):
        with self._lock:
            self._futures.discard(future)
        if future.exception() is not None:
            logger.error("Image probe failed", exc_info=future.exception())

    def _check(self, url: str, person_id: str):
        if self.checker(url):
            return
        with self._lock:
            self.checked.discard(url)
            self.broken.add(url)
        logger.warning("[Photos] Broken image detected: %s", url)
        self._try_alternates(person_id, url)
        self.schedule_redraw()

    def _try_alternates(self, person_id: str, failed_url: str):
        key = (person_id, failed_url)
        with self._lock:
            if key in self._attempted:
                return
            self._attempted.add(key)
            candidates = [u for u in alternate_urls(failed_url) if u not in self.broken]

        for candidate in candidates:
            with self._lock:
                known_good = candidate in self.checked
            if known_good or self.checker(candidate):
                with self._lock:
                    self.checked.add(candidate)
                    self.replacements[person_id] = candidate
                return
            with self._lock:
                self.broken.add(candidate)

    def schedule_redraw(self):
        """Coalesce redraw requests arriving within ``redraw_delay`` seconds."""
        if self.on_redraw is None:
            return
        with self._lock:
            if self._timer is not None:
                return
            self._timer = threading.Timer(self.redraw_delay, self._redraw)
            self._timer.daemon = True
            self._last_timer = self._timer
            self._timer.start()

    def _redraw(self):
        with self._lock:
            self._timer = None
        self.on_redraw()

    def drain(self):
        """Wait for outstanding probes and any pending redraw."""
        with self._lock:
            pending = list(self._futures)
        wait(pending)
        with self._lock:
            timer = self._last_timer
        if timer is not None:
            timer.join()

    def close(self):
        self.drain()
        self._executor.shutdown(wait=True)
