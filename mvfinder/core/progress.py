"""
Terminal progress bars for the long-running mvfinder commands.

All bars share BaseProgressBar: one Rich Progress with a description
column, a status column with per-outcome counters, the bar and a
percentage.

Bars:
    - SearchProgressBar: artist searches (search, import-text, playlist)
    - EnrichmentProgressBar: TheAudioDB detail lookups (enrich)
    - AssetProgressBar: thumbnail and artwork downloads (thumbnails)

Usage:
    from mvfinder.core.progress import SearchProgressBar

    with SearchProgressBar(total=len(names)) as bar:
        service.process_names(names, on_outcome=lambda o: bar.update(o.status))
"""

from abc import ABC, abstractmethod
from typing import Optional

from rich import get_console
from rich.console import JustifyMethod, OverflowMethod
from rich.highlighter import Highlighter
from rich.progress import (
    BarColumn,
    Progress,
    ProgressColumn,
    Task,
    TaskID,
)
from rich.style import StyleType
from rich.text import Text
from rich.theme import Theme


# =============================================================================
# Theme
# =============================================================================

PROGRESS_THEME = Theme({
    "bar.back": "grey23",
    "bar.complete": "rgb(204,0,0)",
    "bar.finished": "rgb(114,156,31)",
    "bar.pulse": "rgb(204,0,0)",
    "progress.percentage": "white",
})


# =============================================================================
# Columns
# =============================================================================

class SizedTextColumn(ProgressColumn):
    """Text column truncated (with ellipsis) or padded to a fixed width."""

    def __init__(
        self,
        text_format: str,
        style: StyleType = "none",
        justify: JustifyMethod = "left",
        markup: bool = True,
        highlighter: Optional[Highlighter] = None,
        overflow: Optional[OverflowMethod] = None,
        width: int = 20,
    ) -> None:
        self.text_format = text_format
        self.justify: JustifyMethod = justify
        self.style = style
        self.markup = markup
        self.highlighter = highlighter
        self.overflow: Optional[OverflowMethod] = overflow
        self.width = width
        super().__init__()

    def render(self, task: Task) -> Text:
        raw = self.text_format.format(task=task)
        if self.markup:
            text = Text.from_markup(raw, style=self.style, justify=self.justify)
        else:
            text = Text(raw, style=self.style, justify=self.justify)
        if self.highlighter:
            self.highlighter.highlight(text)

        text.truncate(max_width=self.width, overflow=self.overflow, pad=True)
        return text


# =============================================================================
# Base Progress Bar
# =============================================================================

class BaseProgressBar(ABC):
    """
    Shared behaviour of every mvfinder progress bar.

    Works as a context manager or through start()/stop(). log() prints
    above the bar without breaking it.

    Subclasses implement:
        _get_status_text(): the counters shown next to the description
        update(): record one finished item
    """

    def __init__(self, total: int, description: str, status_width: int = 35):
        """
        Args:
            total: Number of items the command will process.
            description: Label on the left (e.g. "Searching").
            status_width: Width of the counters column.
        """
        self.total = total
        self.description = description
        self.completed = 0

        self.console = get_console()
        self.console.push_theme(PROGRESS_THEME)

        self.progress = Progress(
            SizedTextColumn("[white]{task.description}", overflow="ellipsis", width=15),
            SizedTextColumn("{task.fields[status]}", width=status_width, style="white"),
            BarColumn(bar_width=40, finished_style="green"),
            "[progress.percentage]{task.percentage:>3.0f}%",
            console=self.console,
            transient=False,
            refresh_per_second=10,
        )

        self.task_id: Optional[TaskID] = None
        self._started = False

    def __enter__(self) -> "BaseProgressBar":
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()

    def start(self) -> None:
        if not self._started:
            self.progress.start()
            self.task_id = self.progress.add_task(
                description=self.description,
                total=self.total,
                status=self._get_status_text(),
            )
            self._started = True

    def stop(self) -> None:
        if self._started:
            self.progress.stop()
            self._started = False

    def log(self, message: str) -> None:
        """Print a message above the progress bar."""
        self.progress.console.print(message, highlight=False)

    def _update_progress(self) -> None:
        if self.task_id is not None:
            self.progress.update(
                self.task_id,
                completed=self.completed,
                status=self._get_status_text(),
            )

    @staticmethod
    def _counters(*parts: tuple[str, str, int], always: int = 2) -> str:
        # (color, symbol, count); parts past `always` are shown only when non-zero
        shown = [
            f"[{color}]{symbol} {count}[/{color}]"
            for index, (color, symbol, count) in enumerate(parts)
            if index < always or count > 0
        ]
        return "  ".join(shown)

    @abstractmethod
    def _get_status_text(self) -> str:
        """Status counters with Rich markup."""

    @abstractmethod
    def update(self, *args, **kwargs) -> None:
        """Record one finished item."""


# =============================================================================
# Search
# =============================================================================

class SearchProgressBar(BaseProgressBar):
    """
    Artist search progress.

    Example:
        Searching       ✓ 12  ✗ 3  ⚠ 1         ━━━━━━━━━━━━━━━━━  64%

    ✓ found, ✗ not found on MusicBrainz, ⚠ failed or videos unavailable.
    """

    def __init__(self, total: int, description: str = "Searching"):
        super().__init__(total=total, description=description)
        self.found = 0
        self.not_found = 0
        self.failed = 0

    def _get_status_text(self) -> str:
        return self._counters(
            ("green", "✓", self.found),
            ("red", "✗", self.not_found),
            ("yellow", "⚠", self.failed),
        )

    def update(self, status: str) -> None:
        """
        Args:
            status: A SearchStatus value ("found", "not_found",
                "videos_unavailable" or "failed").
        """
        self.completed += 1
        if status == "found":
            self.found += 1
        elif status == "not_found":
            self.not_found += 1
        else:
            self.failed += 1

        self._update_progress()


# =============================================================================
# Enrichment
# =============================================================================

class EnrichmentProgressBar(BaseProgressBar):
    """
    Artist enrichment progress.

    Example:
        Enriching       ✓ 30  ✗ 2              ━━━━━━━━━━━━━━━━━  40%
    """

    def __init__(self, total: int, description: str = "Enriching"):
        super().__init__(total=total, description=description)
        self.enriched = 0
        self.failed = 0

    def _get_status_text(self) -> str:
        return self._counters(("green", "✓", self.enriched), ("red", "✗", self.failed))

    def update(self, success: bool) -> None:
        self.completed += 1
        if success:
            self.enriched += 1
        else:
            self.failed += 1

        self._update_progress()

    def on_progress(self, current: int, total: int, success: int, failed: int) -> None:
        """Progress callback for enrich_all(); takes the running totals as-is."""
        self.completed = current
        self.enriched = success
        self.failed = failed
        if total != self.total and self.task_id is not None:
            self.total = total
            self.progress.update(self.task_id, total=total)

        self._update_progress()


# =============================================================================
# Assets
# =============================================================================

class AssetProgressBar(BaseProgressBar):
    """
    Thumbnail and artwork download progress.

    Example:
        Thumbnails      ✓ 80  ✗ 1  ⊘ 19        ━━━━━━━━━━━━━━━━━ 100%

    ⊘ counts files already on disk.
    """

    def __init__(self, total: int, description: str = "Downloading"):
        super().__init__(total=total, description=description)
        self.downloaded = 0
        self.failed = 0
        self.skipped = 0

    def _get_status_text(self) -> str:
        return self._counters(
            ("green", "✓", self.downloaded),
            ("red", "✗", self.failed),
            ("yellow", "⊘", self.skipped),
        )

    def update(self, status: str) -> None:
        """
        Args:
            status: "downloaded", "skipped" or "failed".
        """
        self.completed += 1
        if status == "downloaded":
            self.downloaded += 1
        elif status == "skipped":
            self.skipped += 1
        else:
            self.failed += 1

        self._update_progress()


__all__ = [
    "PROGRESS_THEME",
    "SizedTextColumn",
    "BaseProgressBar",
    "SearchProgressBar",
    "EnrichmentProgressBar",
    "AssetProgressBar",
]
