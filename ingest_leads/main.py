"""
LeadMaps Qualification CLI.

Usage:
    python -m ingest_leads.main --file data/leads.csv
    python -m ingest_leads.main --file data/leads.json --channel call --top 5
    python -m ingest_leads.main --file data/leads.csv --region "São Paulo"
    python -m ingest_leads.main --url https://extractor.local/api/leads
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import Any, Dict, List, Optional, Sequence

import httpx

from config.settings import get_settings
from lead_scoring.copywriting import ScriptGenerator
from lead_scoring.market_strategy import MarketStrategyAnalyzer
from lead_scoring.models import Channel, RawLead
from lead_scoring.scoring_model import LeadScorer, qualification_stats
from llm.orchestrator import LeadMapsAssistant

from .lead_loader import LeadLoader

logger = logging.getLogger(__name__)


class QualificationPipeline:
    """Offline qualification run: load, qualify, optionally script and analyze."""

    def __init__(self):
        self.settings = get_settings()
        self.loader = LeadLoader()
        self.assistant = LeadMapsAssistant(
            lead_scorer=LeadScorer(
                hot_threshold=self.settings.lead_score_threshold_hot,
                warm_threshold=self.settings.lead_score_threshold_warm,
            ),
            market_analyzer=MarketStrategyAnalyzer(),
            script_generator=ScriptGenerator(),
            top_opportunities=self.settings.top_opportunities,
        )

    def build_report(
        self,
        leads: Sequence[RawLead],
        channel: Optional[Channel] = None,
        region: Optional[str] = None,
        top: int = 10,
    ) -> Dict[str, Any]:
        """Qualify ``leads`` and assemble the JSON report."""
        summary = self.assistant.ingest(leads)
        qualified = self.assistant.context.qualified_leads

        report: Dict[str, Any] = {
            "summary": summary.to_dict(),
            "stats": qualification_stats(qualified),
        }

        if channel is not None:
            scripts = self.assistant.script_generator.generate_top_leads_scripts(qualified, top, channel)
            report["scripts"] = [script.to_dict() for script in scripts]

        if region:
            report["market_analysis"] = self.assistant.analyze_region(region).to_dict()
            report["opportunities"] = [
                r.to_dict()
                for r in self.assistant.market_analyzer.find_best_opportunity_regions(leads)
            ]

        return report

    def load(self, file_path: Optional[str] = None, url: Optional[str] = None) -> List[RawLead]:
        if url:
            return asyncio.run(self.loader.load_from_api(url))
        return self.loader.load_from_file(file_path)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="LeadMaps lead qualification")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--file", help="CSV or JSON file with extracted leads")
    source.add_argument("--url", help="Extraction API returning leads as JSON")
    parser.add_argument(
        "--channel",
        choices=[c.value for c in Channel] + ["whatsapp"],
        help="Generate prospecting scripts for this channel",
    )
    parser.add_argument("--region", help="City or neighborhood to analyze")
    parser.add_argument("--top", type=int, default=None, help="Number of leads to script")
    parser.add_argument("--log-level", default=None, choices=["DEBUG", "INFO", "WARNING", "ERROR"])

    args = parser.parse_args(argv)

    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, (args.log_level or settings.log_level).upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )

    pipeline = QualificationPipeline()

    try:
        leads = pipeline.load(file_path=args.file, url=args.url)
    except (FileNotFoundError, ValueError, httpx.HTTPError) as e:
        logger.error(str(e))
        return 1

    report = pipeline.build_report(
        leads,
        channel=Channel(args.channel) if args.channel else None,
        region=args.region,
        top=args.top or settings.top_opportunities,
    )
    print(json.dumps(report, ensure_ascii=False, indent=2))

    logger.info("Qualification pipeline finished")
    return 0


if __name__ == "__main__":
    sys.exit(main())
