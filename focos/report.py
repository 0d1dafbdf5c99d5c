from __future__ import annotations

"""
FOCOS report generator
----------------------
This module generates a DOCX report from the records held by a FireEngine.

Design goals:
- Keep FOCOS usable even if report dependencies are missing (lazy imports).
- Only draw charts that have data behind them. Example: if every record
  has a year-only date, the month and season charts are skipped.
- Forecast sections appear only when at least 2 years are loaded.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple
import os
import tempfile

from .errors import InsufficientData


# -----------------------------
# Configuration / citation types
# -----------------------------

@dataclass
class DatasetCitation:
    """Minimal dataset citation metadata for the DOCX report."""
    database_name: str = "BDQueimadas - Programa Queimadas"
    institutional_author: str = "INPE"
    location: str = "Sao Jose dos Campos, Brazil"
    website: str = "https://terrabrasilis.dpi.inpe.br/queimadas/portal/"
    file_note: Optional[str] = "Yearly CSV exports merged by FOCOS."


@dataclass
class ReportConfig:
    """High-level knobs to control how the report is written."""
    title: str = "FOCOS Analytical Report"
    subtitle: str = "Fire occurrence counts, growth and trend"
    dataset_name: str = "merged dataset"
    citation: DatasetCitation = field(default_factory=DatasetCitation)

    # How many municipalities to rank
    top_n: int = 10

    # How many years ahead to forecast
    forecast_years: int = 5

    # Optional: list of CLI commands typed before the report
    command_log: Optional[List[str]] = None


# -----------------------------
# Main entry point used by CLI
# -----------------------------

def generate_docx_report(engine, out_path: str, *, config: Optional[ReportConfig] = None) -> str:
    """
    Generate a DOCX report + charts for the records of `engine`.

    Raises ValueError when the engine holds no records.
    """
    config = config or ReportConfig()

    # Lazy imports: only required when "report" is used.
    try:
        from docx import Document
        from docx.shared import Pt, Inches
        from docx.enum.text import WD_ALIGN_PARAGRAPH
    except ImportError as e:
        raise ImportError(
            "Missing dependency: python-docx.\n"
            "Install it with: python -m pip install python-docx"
        ) from e

    try:
        import matplotlib
        matplotlib.use("Agg")
        import matplotlib.pyplot as plt
        import numpy as np
    except ImportError as e:
        raise ImportError(
            "Missing dependency: matplotlib (and numpy).\n"
            "Install with: python -m pip install matplotlib numpy"
        ) from e

    if engine.size() == 0:
        raise ValueError("No records to report on (store is empty).")

    # -----------------------------
    # 1) Compute the numbers
    # -----------------------------
    by_year = engine.count_by_year()
    by_biome = engine.count_by_biome()
    by_month = engine.count_by_month()
    by_season = engine.count_by_season()
    growth = engine.growth_percent_by_year()
    top_muni = engine.top_municipalities(config.top_n)

    fit = forecast = None
    try:
        fit = engine.fit()
        forecast = engine.forecast(config.forecast_years)
    except InsufficientData:
        pass

    # -----------------------------
    # 2) Create charts
    # -----------------------------
    with tempfile.TemporaryDirectory(prefix="focos_report_") as tmpdir:
        # Each chart is: (title, file_path)
        chart_paths: List[Tuple[str, str]] = []

        def _save(filename: str) -> str:
            path = os.path.join(tmpdir, filename)
            plt.tight_layout()
            plt.savefig(path, dpi=150)
            plt.close()
            return path

        def _bar(title: str, data: Dict, xlabel: str, filename: str) -> None:
            if not data:
                return
            plt.figure()
            plt.bar([str(k) for k in data], list(data.values()))
            plt.xticks(rotation=45, ha="right")
            plt.title(title)
            plt.xlabel(xlabel)
            plt.ylabel("Occurrences")
            chart_paths.append((title, _save(filename)))

        _bar("Occurrences by year", by_year, "Year", "by_year.png")
        _bar("Occurrences by biome", by_biome, "Biome", "by_biome.png")
        _bar("Occurrences by month", by_month, "Month", "by_month.png")
        _bar("Occurrences by season", by_season, "Season", "by_season.png")

        if fit is not None:
            xs = np.array(list(by_year), dtype=float)
            plt.figure()
            plt.plot(xs, list(by_year.values()), marker="o", label="Observed")
            plt.plot(xs, [fit.predict(int(x)) for x in xs], linestyle="--", label="Linear fit")
            if forecast:
                plt.plot(list(forecast), [f.predicted_value for f in forecast.values()],
                         marker="x", linestyle=":", label="Forecast")
            plt.title("Yearly trend")
            plt.xlabel("Year")
            plt.ylabel("Occurrences")
            plt.legend()
            chart_paths.append(("Yearly trend", _save("trend.png")))

        # -----------------------------
        # 3) Build DOCX report
        # -----------------------------
        doc = Document()
        style = doc.styles["Normal"]
        style.font.name = "Calibri"
        style.font.size = Pt(11)

        def _center_title(text: str, size: int, bold: bool = False, italic: bool = False) -> None:
            p = doc.add_paragraph()
            r = p.add_run(text)
            r.bold = bold
            r.italic = italic
            r.font.size = Pt(size)
            p.alignment = WD_ALIGN_PARAGRAPH.CENTER

        def _kv(key: str, value: str) -> None:
            p = doc.add_paragraph()
            r = p.add_run(f"{key}: ")
            r.bold = True
            p.add_run(value)

        def _table(headers: Tuple[str, ...], rows: List[Tuple]) -> None:
            t = doc.add_table(rows=1, cols=len(headers))
            for i, h in enumerate(headers):
                t.rows[0].cells[i].text = h
            for row in rows:
                cells = t.add_row().cells
                for i, v in enumerate(row):
                    cells[i].text = str(v)

        _center_title(config.title, 22, bold=True)
        _center_title(config.subtitle, 12, italic=True)

        doc.add_paragraph("")
        _kv("Dataset", config.dataset_name)
        _kv("Records", str(engine.size()))
        if by_year:
            years = list(by_year)
            _kv("Years", f"{years[0]} to {years[-1]}")
        peak = engine.peak_season()
        if peak:
            _kv("Season with most occurrences", peak)

        doc.add_heading("Dataset citation", level=1)
        cit = config.citation
        if cit.file_note:
            doc.add_paragraph(cit.file_note)
        doc.add_paragraph(f"{cit.institutional_author}. {cit.database_name}. {cit.location}. {cit.website}.")

        if config.command_log:
            doc.add_heading("Command log", level=1)
            for line in config.command_log:
                doc.add_paragraph(line, style="List Bullet")

        doc.add_heading("Visualizations", level=1)
        for title, path in chart_paths:
            doc.add_paragraph(title)
            doc.add_picture(path, width=Inches(6.0))

        doc.add_heading("Year over year growth", level=1)
        if growth:
            _table(("Year", "Occurrences", "Growth"),
                   [(y, by_year[y], f"{g:+.2f}%") for y, g in growth.items()])
        else:
            doc.add_paragraph("Only one year loaded; no growth to report.")

        if top_muni:
            doc.add_heading(f"Top {len(top_muni)} municipalities", level=1)
            _table(("Rank", "Municipality", "Occurrences"),
                   [(i, name, n) for i, (name, n) in enumerate(top_muni.items(), start=1)])

        doc.add_heading("Trend forecast", level=1)
        if fit is None:
            doc.add_paragraph("At least 2 years of data are needed for a forecast.")
        else:
            _kv("Trend", fit.trend_label)
            _kv("Slope (occurrences per year)", f"{fit.slope:.2f}")
            _kv("r squared", f"{fit.r_squared * 100:.2f}%")
            _table(("Year", "Predicted", "Accuracy", "Margin of error", "Warning"),
                   [(y, f.predicted_value, f"{f.accuracy_percent:.2f}%", f"{f.margin_of_error:.2f}%", f.warning or "")
                    for y, f in forecast.items()])
            doc.add_paragraph(
                "Accuracy and margin of error are heuristics derived from r squared; "
                "they are not statistical confidence intervals."
            )

        # Reproducibility footer
        from . import __version__ as focos_version
        from datetime import datetime as _dt
        doc.add_heading("Reproducibility footer", level=1)
        doc.add_paragraph(f"FOCOS version: {focos_version}")
        doc.add_paragraph(f"Report generated at: {_dt.now().isoformat(timespec='seconds')}")

        os.makedirs(os.path.dirname(out_path) or ".", exist_ok=True)
        doc.save(out_path)
    return out_path
