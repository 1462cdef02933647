from __future__ import annotations

import subprocess
import tempfile
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, TemplateNotFound

from ..core.errors import ExternalProcessError
from ..core.logging_config import get_logger
from ..core.models import SeriesModel

logger = get_logger(__name__)


class PiePlotter:
    """Exports the first series as a gnuplot pie chart on the text terminal."""

    def __init__(
        self,
        templates_dir: Path | None = None,
        gnuplot_binary: str = "gnuplot",
        max_rows: int = 7,
        terminal: str = "dumb",
    ):
        if templates_dir is None:
            templates_dir = Path(__file__).parent / "templates"
        self.env = Environment(
            loader=FileSystemLoader(str(templates_dir)),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.gnuplot_binary = gnuplot_binary
        self.max_rows = max_rows
        self.terminal = terminal

    def render_data(self, series: SeriesModel) -> str:
        """CSV rows of ``label,value`` for the first series."""
        return "".join(
            f"{label.replace(',', ' ')},{row[0]:g}\n"
            for label, row in zip(series.labels, series.data)
        )

    def render_script(self, data_path: str, title: str | None = None) -> str:
        """Render the gnuplot script that reads ``data_path``.

        Raises:
            RuntimeError: If the script template is missing
        """
        try:
            template = self.env.get_template("pie.gnuplot.j2")
        except TemplateNotFound as e:
            logger.error("gnuplot template not found", extra={"error": str(e)})
            raise RuntimeError(
                f"gnuplot template not found: {e}. "
                "Ensure gitcontrib/render/templates/pie.gnuplot.j2 exists."
            ) from e
        return template.render(
            data_path=data_path,
            title=title,
            max_rows=self.max_rows,
            terminal=self.terminal,
        )

    def plot(self, series: SeriesModel, title: str | None = None) -> None:
        """Write the data and script to temp files and run gnuplot on them.

        Raises:
            ExternalProcessError: If gnuplot is missing or exits non-zero
        """
        with tempfile.TemporaryDirectory(prefix="gitcontrib-") as tmp:
            data_path = Path(tmp) / "data.csv"
            script_path = Path(tmp) / "pie.gnuplot"
            write_text(str(data_path), self.render_data(series))
            write_text(str(script_path), self.render_script(str(data_path), title))

            cmd = [self.gnuplot_binary, "-d", str(script_path)]
            logger.info("Running gnuplot", extra={"command": " ".join(cmd)})
            try:
                completed = subprocess.run(cmd, check=False)
            except OSError as e:
                raise ExternalProcessError(f"could not run {self.gnuplot_binary}: {e}", cmd) from e
            if completed.returncode != 0:
                raise ExternalProcessError(
                    f"gnuplot failed with exit code {completed.returncode}",
                    cmd,
                    completed.returncode,
                )


def write_text(path: str, content: str) -> None:
    """Write text content to file."""
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(content, encoding="utf-8")
