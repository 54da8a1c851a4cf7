# File: sitecrawl/report/html_report.py
"""sitecrawl.report.html_report: HTML report rendered with Jinja2."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Union

from jinja2 import BaseLoader, Environment, FileSystemLoader, PackageLoader, select_autoescape

from sitecrawl.report.aggregator import CrawlReport

TEMPLATE_NAME = "report.html.j2"


def render_html(
    report: CrawlReport,
    output_path: Union[Path, str],
    template_dir: Optional[Union[Path, str]] = None,
) -> Path:
    """Render the HTML report and save it at *output_path*.

    Args:
        report: CrawlReport to render.
        output_path: destination HTML file.
        template_dir: directory holding ``report.html.j2``; the packaged
            template is used when omitted.

    Returns:
        Path of the written file.

    Example:
    ```python
    from sitecrawl.report.html_report import render_html
    html_path = render_html(report, 'reports/crawl.html')
    ```
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    loader: BaseLoader
    if template_dir is None:
        loader = PackageLoader("sitecrawl", "report/templates")
    else:
        loader = FileSystemLoader(str(template_dir))
    env = Environment(loader=loader, autoescape=select_autoescape(["html", "xml", "j2"]))
    template = env.get_template(TEMPLATE_NAME)

    context: dict[str, Any] = {
        "seed": report.seed,
        "urls": report.urls,
        "failed": report.failed,
        "pages": report.pages,
        "peak_in_flight": report.peak_in_flight,
        "elapsed": report.elapsed,
    }

    output_path.write_text(template.render(**context), encoding="utf-8")
    return output_path
