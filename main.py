import sys
import os
from dqdash.api.errors import ApiError
from dqdash.api.http_client import create_client
from dqdash.config import CONFIG
from dqdash.reporting.charts import quality_scores
from dqdash.reporting.exporter import Exporter
from dqdash.utils import setup_logging, get_logger

logger = get_logger(__name__)

def show_backend(client):
    try:
        health = client.check_health()
        print(f"[MAIN] API {CONFIG.api_url}: {health}")
        analyses = client.list_analyses()
    except ApiError as e:
        print(f"[MAIN] API {CONFIG.api_url} unavailable: {e}")
        return 1

    print(f"[MAIN] {len(analyses)} previous analyses")
    for summary in analyses:
        print(f"  - {summary.id}: {summary.label} [{summary.analysis_status or 'unknown'}]")
    return 0

def main():
    setup_logging(CONFIG.log_level)

    csv_files = sys.argv[1:]
    client = create_client(CONFIG)

    if not csv_files:
        print("[MAIN] No CSV provided. Usage: python main.py <file.csv> [...]")
        return show_backend(client)

    failed = 0
    for csv_file in csv_files:
        print(f"\n=== Analyzing {csv_file} ===")
        try:
            with open(csv_file, "rb") as f:
                report = client.upload_and_analyze(f)
        except (ApiError, OSError) as e:
            logger.error(f"Error analyzing {csv_file}: {e}")
            failed += 1
            continue

        info = report.basic_info
        print(f"Status: {report.analysis_status}")
        print(f"Rows: {info.get('total_rows')}  Columns: {info.get('total_columns')}")
        print("Quality:", {k: round(v, 1) for k, v in quality_scores(report).items()})

        stem = os.path.splitext(os.path.basename(csv_file))[0]
        saved = Exporter.save(report, out_dir=os.path.join(CONFIG.outputs_dir, stem))
        print("Saved:", ", ".join(saved.values()))

    return 1 if failed else 0

if __name__ == "__main__":
    sys.exit(main())
