"""Collect dependency usage across repositories."""

import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Sequence

from rich.console import Console
from rich.markup import escape

from pubscan.core.errors import PubscanError
from pubscan.core.models import CollectResult, Manifest, RepositoryRef, UsageCounters
from pubscan.github.fetcher import RepositoryFetcher
from pubscan.parsers.pubspec import PubspecParser


class Aggregator:
    """Fetch and parse manifests with a bounded worker pool and tally usage."""

    DEFAULT_LIMIT = 5
    DEFAULT_DELAY = 0.2

    def __init__(
        self,
        fetcher: RepositoryFetcher,
        parser: PubspecParser | None = None,
        console: Console | None = None,
        err_console: Console | None = None,
        delay: float = DEFAULT_DELAY,
    ) -> None:
        self.fetcher = fetcher
        self.parser = parser or PubspecParser()
        self.console = console or Console()
        self.err_console = err_console or Console(stderr=True)
        self.delay = delay

    def collect(
        self, repos: Sequence[RepositoryRef], limit: int = DEFAULT_LIMIT
    ) -> CollectResult:
        """Collect usage counts for every repository.

        Each repository runs as one task on a pool of ``limit`` threads. A
        failing task is logged and skipped; it never affects the others.

        Args:
            repos: Repositories to process, in order.
            limit: Maximum number of repositories processed concurrently.

        Returns:
            CollectResult with the counters and per-repository outcomes,
            once every task has finished.
        """
        if limit < 1:
            raise ValueError(f"limit must be a positive integer, got {limit}")

        start_time = time.time()
        result = CollectResult(counters=UsageCounters(), repositories=list(repos))

        if not repos:
            return result

        with ThreadPoolExecutor(max_workers=limit) as executor:
            future_to_repo = {
                executor.submit(self._collect_one, repo, result.counters): repo
                for repo in repos
            }

            for future in as_completed(future_to_repo):
                repo = future_to_repo[future]
                try:
                    ref, manifest = future.result()
                except PubscanError as e:
                    self._record_failure(result, repo, str(e))
                except Exception as e:
                    self._record_failure(result, repo, f"unexpected error: {e!r}")
                else:
                    result.succeeded.append(repo)
                    self.console.print(
                        f"[green]{escape(str(repo))}[/green]"
                        f" @ {escape(ref or 'default branch')}:"
                        f" {manifest.package_count} packages"
                    )

        result.elapsed_ms = (time.time() - start_time) * 1000
        return result

    def load_manifest(self, repo: RepositoryRef) -> tuple[str | None, Manifest]:
        """Resolve the ref, fetch and parse the manifest of one repository."""
        ref = self.fetcher.resolve_ref(repo)
        data = self.fetcher.fetch_manifest(repo, ref)
        return ref, self.parser.parse(data)

    def _collect_one(
        self, repo: RepositoryRef, counters: UsageCounters
    ) -> tuple[str | None, Manifest]:
        try:
            ref, manifest = self.load_manifest(repo)
            counters.record(manifest)
            return ref, manifest
        finally:
            if self.delay > 0:
                time.sleep(self.delay)

    def _record_failure(self, result: CollectResult, repo: RepositoryRef, cause: str) -> None:
        result.failed.append(repo)
        result.errors.append(f"{repo}: {cause}")
        self.err_console.print(f"[red]{escape(str(repo))}: {escape(cause)}[/red]")
