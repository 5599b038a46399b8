"""Terminal reporter with rich formatting."""

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from pubscan.core.models import CollectResult, Report, Section


class TerminalReporter:
    """Render a short summary of a usage report to the terminal."""

    SECTION_TITLES = {
        Section.DEPENDENCIES: "Dependencies",
        Section.DEV_DEPENDENCIES: "Dev dependencies",
        Section.DEPENDENCY_OVERRIDES: "Dependency overrides",
    }

    def __init__(self, console: Console | None = None, top: int = 10) -> None:
        self.console = console or Console()
        self.top = top

    def render(self, report: Report, result: CollectResult | None = None) -> None:
        """Print the most used packages of each section and a run summary."""
        for section in Section:
            entries = report.section(section)
            if not entries:
                continue
            self.console.print(self._section_table(section, report))

        if result is not None:
            self._render_summary(result)

    def _section_table(self, section: Section, report: Report) -> Table:
        entries = report.section(section)
        ranked = sorted(entries.items(), key=lambda item: (-item[1].count, item[0]))

        title = f"{self.SECTION_TITLES[section]} ({len(entries)})"
        table = Table(title=title, title_justify="left")
        table.add_column("Package", style="cyan")
        table.add_column("Repos", justify="right")
        for name, entry in ranked[: self.top]:
            table.add_row(escape(name), str(entry.count))
        return table

    def _render_summary(self, result: CollectResult) -> None:
        total = len(result.repositories)
        ok = len(result.succeeded)
        line = f"Scanned {ok}/{total} repositories in {result.elapsed_ms / 1000:.1f}s"
        if result.has_failures:
            line += f" [yellow]({len(result.failed)} failed)[/yellow]"
        self.console.print(line)
