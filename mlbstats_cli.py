import argparse
import asyncio
import logging
from pathlib import Path
from time import monotonic

from mlbstats import (
    FetchStrategy,
    StatsPage,
    TableExtractor,
    TableSnapshot,
    TableVariant,
    load_config,
    open_session,
)

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Extract the MLB stats table")
    ap.add_argument("--cfg", type=str, default=None, help="Optional path to config JSON")
    mode = ap.add_mutually_exclusive_group()
    mode.add_argument("--headless", dest="headless", action="store_true", default=None)
    mode.add_argument("--headed", dest="headless", action="store_false")
    ap.add_argument("--endpoint", help="ws:// Playwright server or http:// CDP endpoint")
    ap.add_argument(
        "--variant",
        choices=["standard", "expanded", "both"],
        default="standard",
    )
    ap.add_argument("--fetch", choices=[f.value for f in FetchStrategy], default=None)
    ap.add_argument("--csv", type=str, default="", help="Optional path to export CSV")
    ap.add_argument("--log-level", default="INFO")
    return ap


def csv_path(base: Path, variant: TableVariant, many: bool) -> Path:
    if not many:
        return base
    return base.with_name(f"{base.stem}-{variant.value}{base.suffix or '.csv'}")


async def extract(args: argparse.Namespace) -> list[TableSnapshot]:
    cfg = load_config(args.cfg)
    if args.headless is not None:
        cfg.headless = args.headless
    if args.endpoint:
        cfg.endpoint = args.endpoint

    if args.variant == "both":
        variants = [TableVariant.STANDARD, TableVariant.EXPANDED]
    else:
        variants = [TableVariant(args.variant)]
    fetch = FetchStrategy(args.fetch) if args.fetch else None

    snapshots = []
    async with open_session(cfg) as session:
        logger.info("Current URL: %s", session.url)
        page = StatsPage(session)
        await page.dismiss_banner()
        extractor = TableExtractor(page)
        for variant in variants:
            snapshots.append(await extractor.snapshot_for(variant, fetch))
    return snapshots


def main() -> None:
    args = build_parser().parse_args()
    logging.basicConfig(level=args.log_level.upper())

    start = monotonic()
    snapshots = asyncio.run(extract(args))

    for snap in snapshots:
        dframe = snap.to_dataframe()
        logger.info("Columns (%s): %s", snap.variant.value, snap.columns)
        logger.info("\n%s", dframe.head(10).to_string(index=False))

        if args.csv:
            out = csv_path(Path(args.csv), snap.variant, len(snapshots) > 1)
            out.parent.mkdir(parents=True, exist_ok=True)
            dframe.to_csv(out, index=False, encoding="utf-8")
            logger.info("Saved CSV to: %s", out)

    logger.info("Time elapsed: %.2fs", monotonic() - start)


if __name__ == "__main__":
    main()
