"""Command-line interface for the campaign correlator."""

import argparse
import json
import logging
from pathlib import Path
from typing import List, Optional

from campaign_correlator.config.settings import PROVIDER_NAMES, get_settings
from campaign_correlator.core import CorrelationOrchestrator
from campaign_correlator.models.correlation import CorrelationResult
from campaign_correlator.utils.logger import setup_logging


def print_summary(result: CorrelationResult, logger: logging.Logger) -> None:
    """Print correlation summary."""
    stats = result.stats

    logger.info("=" * 70)
    logger.info("CORRELATION SUMMARY")
    logger.info("=" * 70)
    logger.info(f"Samples: {stats.total_samples}")
    logger.info(f"Campaigns: {stats.total_campaigns} ({stats.active_threats} active)")
    logger.info(f"Correlation strength: {stats.correlation_strength}")

    if result.campaigns:
        logger.info("Campaigns:")
        for campaign in sorted(result.campaigns, key=lambda c: c.risk_score, reverse=True):
            logger.info(
                f"  {campaign.name:40s} | {campaign.codename or '':16s} | "
                f"Status: {campaign.status:9s} | Risk: {campaign.risk_score:3d} | "
                f"Samples: {len(campaign.samples):3d}"
            )

    if result.correlations:
        names = {c.id: c.name for c in result.campaigns}
        logger.info("Correlations:")
        for correlation in result.correlations:
            logger.info(
                f"  {correlation.correlation_type:16s} {names[correlation.campaign_a]} <-> "
                f"{names[correlation.campaign_b]} ({correlation.confidence}%): "
                f"{', '.join(correlation.evidence)}"
            )

    if result.infra_overlaps:
        logger.info("Shared infrastructure:")
        for overlap in result.infra_overlaps:
            logger.info(f"  {overlap.indicator:40s} families: {', '.join(overlap.families)}")


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Correlate malware campaigns from public threat-intelligence feeds",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Correlate campaigns for a malware family
  campaign-correlator RedLine

  # Query only ThreatFox and MalwareBazaar, with a 10 second deadline
  campaign-correlator LummaC2 --providers threatfox malwarebazaar --timeout 10

  # Save the full result as JSON
  campaign-correlator evil-c2.example.com --output result.json
        """,
    )

    parser.add_argument("query", help="Indicator to correlate (domain, hash, IP or family name)")

    parser.add_argument("--output", type=str, help="Save the correlation result to a JSON file")

    parser.add_argument(
        "--timeout",
        type=float,
        help="Gathering deadline in seconds (default: from settings)",
    )

    parser.add_argument(
        "--providers",
        nargs="+",
        choices=PROVIDER_NAMES,
        help="Providers to query (default: from settings)",
    )

    args = parser.parse_args(argv)

    settings = get_settings()
    if args.providers:
        settings = settings.model_copy(update={"enabled_providers": args.providers})
    logger = setup_logging(settings.log_level, settings.log_json)

    logger.info(f"Query: {args.query}")
    logger.info(f"Providers: {', '.join(settings.enabled_providers)}")

    orchestrator = CorrelationOrchestrator(settings)
    result = orchestrator.correlate(args.query, timeout=args.timeout)

    print_summary(result, logger)

    if args.output:
        output_path = Path(args.output)
        with output_path.open("w", encoding="utf-8") as f:
            json.dump(result.to_dict(), f, indent=2)
        logger.info(f"Result saved to: {args.output}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
