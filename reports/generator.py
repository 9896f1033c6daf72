"""
Export of analysis results for download.
"""

from typing import Any, Dict, List, Optional, Sequence
from datetime import datetime
from analytics.config import AnalyticsConfig
from analytics.models import AnalysisResult, Observation
from validators import format_timestamp, utc_now
from logger import get_logger


class ReportGenerator:
    """Generates export documents from an analysis result bundle."""

    def __init__(self):
        self.logger = get_logger("reports")

    def build_export(
        self,
        result: AnalysisResult,
        config: AnalyticsConfig,
        window: Sequence[Observation],
        generated_at: Optional[datetime] = None
    ) -> Dict[str, Any]:
        """Flat export document: config, the analysed window, analytics bundle and timestamp."""
        return {
            "config": config.to_dict(),
            "data": [o.to_dict() for o in window],
            "analytics": result.to_dict(),
            "timestamp": format_timestamp(generated_at or utc_now()),
        }

    def generate_json_report(
        self,
        result: AnalysisResult,
        config: AnalyticsConfig,
        window: Sequence[Observation],
        generated_at: Optional[datetime] = None
    ) -> str:
        """Generate JSON export."""
        import json
        document = self.build_export(result, config, window, generated_at)
        self.logger.debug(f"Exporting {len(document['data'])} observations as JSON")
        return json.dumps(document, indent=2, default=str)

    def generate_csv_report(self, data: List[Dict[str, Any]]) -> str:
        """Generate CSV for a flat table such as anomalies or forecast points."""
        import csv
        import io

        if not data:
            return ""

        output = io.StringIO()
        writer = csv.DictWriter(output, fieldnames=list(data[0].keys()), extrasaction="ignore")
        writer.writeheader()
        writer.writerows(data)

        return output.getvalue()

    def anomalies_csv(self, result: AnalysisResult) -> str:
        return self.generate_csv_report([a.to_dict() for a in result.anomalies])

    def forecast_csv(self, result: AnalysisResult) -> str:
        return self.generate_csv_report(
            [{"timestamp": p.timestamp, "value": p.value} for p in result.forecast]
        )

    @staticmethod
    def export_filename(generated_at: Optional[datetime] = None) -> str:
        """Download name for a JSON export, e.g. analytics_2024-01-31.json."""
        return f"analytics_{(generated_at or utc_now()).strftime('%Y-%m-%d')}.json"
