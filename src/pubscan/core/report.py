"""Build the usage report from aggregated counters."""

import urllib.parse

from pubscan.core.models import PackageEntry, Report, Section, UsageCounters

DEFAULT_REFERENCE_URL = "https://pub.dev/packages/{name}"


def reference_url(name: str, url_template: str = DEFAULT_REFERENCE_URL) -> str:
    """Return the metadata URL of a package, with the name percent-encoded."""
    return url_template.format(name=urllib.parse.quote(name, safe=""))


def build_report(
    counters: UsageCounters,
    min_usage: int = 1,
    url_template: str = DEFAULT_REFERENCE_URL,
) -> Report:
    """Keep packages used at least ``min_usage`` times, per section.

    Entries within a section are ordered by package name.
    """
    report = Report()
    for section in Section:
        counts = counters.section(section)
        report.sections[section] = {
            name: PackageEntry(count=count, reference_url=reference_url(name, url_template))
            for name, count in sorted(counts.items())
            if count >= min_usage
        }
    return report
