import os
import io
import json
import csv
import html
from datetime import datetime, timezone
from typing import Dict

from dqdash.report.models import AnalysisReport, RECOMMENDATION_BUCKETS
from dqdash.reporting.charts import quality_scores, recommendation_lines

class Exporter:
    @staticmethod
    def to_json(report: AnalysisReport) -> str:
        data = report.model_dump()
        data["exported_at"] = datetime.now(timezone.utc).isoformat()
        return json.dumps(data, indent=2, ensure_ascii=False, default=str)

    @staticmethod
    def to_csv(report: AnalysisReport) -> str:
        """One row per column of column_statistics, statistic names as headers."""
        stats = {col: s for col, s in report.column_statistics.items() if isinstance(s, dict)}
        headers = []
        for values in stats.values():
            for key in values:
                if key not in headers:
                    headers.append(key)

        buf = io.StringIO()
        writer = csv.writer(buf)
        writer.writerow(["column"] + headers)
        for col, values in stats.items():
            writer.writerow([col] + [values.get(h, "") for h in headers])
        return buf.getvalue()

    @staticmethod
    def to_html(report: AnalysisReport) -> str:
        info = report.basic_info
        esc = lambda v: html.escape(str(v))

        scores = "\n".join(
            f"<li>{esc(metric.capitalize())}: {score:.1f}%</li>"
            for metric, score in quality_scores(report).items()
        )
        missing_columns = report.missing_data.get("columns_with_missing")
        if not isinstance(missing_columns, list):
            missing_columns = []
        missing = "\n".join(
            f"<li>{esc(m.get('column'))}: {esc(m.get('percentage'))}%</li>"
            for m in missing_columns if isinstance(m, dict)
        ) or "<li>-</li>"
        recs = "\n".join(
            f"<h4>{bucket.capitalize()}</h4><ul>"
            + "".join(f"<li>{esc(line)}</li>" for line in recommendation_lines(report, bucket))
            + "</ul>"
            for bucket in RECOMMENDATION_BUCKETS
        )

        return f"""
<html>
<head>
    <meta charset="utf-8">
    <title>Dataset Quality Report</title>
</head>
<body>
<h1>Dataset Quality Report{': ' + esc(report.name) if report.name else ''}</h1>
<p><b>Status:</b> {esc(report.analysis_status)}</p>

<h3>Basic Information</h3>
<ul>
<li>Rows: {esc(info.get('total_rows'))}</li>
<li>Columns: {esc(info.get('total_columns'))}</li>
<li>Size: {esc(info.get('file_size'))}</li>
</ul>

<h3>Quality Metrics</h3>
<ul>
{scores}
</ul>

<h3>Missing Values ({esc(report.missing_data.get('total_missing_percentage'))}% total)</h3>
<ul>
{missing}
</ul>

<h3>Duplicates</h3>
<p>{esc(report.duplicates.get('total_duplicates'))} rows ({esc(report.duplicates.get('percentage'))}%)</p>

<h3>Recommendations</h3>
{recs}
</body>
</html>
"""

    @staticmethod
    def save(report: AnalysisReport, out_dir: str = "outputs") -> Dict[str, str]:
        os.makedirs(out_dir, exist_ok=True)
        written = {}
        for fname, render in [("analysis.json", Exporter.to_json),
                              ("column_statistics.csv", Exporter.to_csv),
                              ("report.html", Exporter.to_html)]:
            path = os.path.join(out_dir, fname)
            with open(path, "w", newline="", encoding="utf-8") as f:
                f.write(render(report))
            written[fname] = path
        return written
