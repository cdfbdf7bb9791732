"""Command-line runner for the brand kit pipeline.

Usage:
    python -m src.cli run https://example.com [--output result.json]
    python -m src.cli artifact bkit_XXXXXXXXXX
    python -m src.cli batch urls.txt [--delay 2.0] [--output batch.json]
"""

import argparse
import asyncio
import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any

from src.config.settings import get_settings
from src.infrastructure.logging.logger import setup_logging
from src.orchestrator.errors import PipelineError, error_payload
from src.orchestrator.pipeline import PipelineController

logger = logging.getLogger(__name__)


def _write_json(data: Any, output: str | None) -> None:
    text = json.dumps(data, indent=2, ensure_ascii=False, default=str)
    if not output:
        print(text)
        return
    output_path = Path(output)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(text, encoding="utf-8")
    logger.info(f"Results saved to {output_path}")


def load_urls(path: Path) -> list[str]:
    """One URL per line; blank lines and ``#`` comments are skipped."""
    urls = []
    for line in path.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if line and not line.startswith("#"):
            urls.append(line)
    return urls


async def run_one(controller: PipelineController, url: str) -> dict[str, Any]:
    """Run the pipeline for a single URL."""
    result = await controller.run(url)
    return result.to_json_dict()


async def run_batch(
    controller: PipelineController, urls: list[str], delay: float = 2.0
) -> dict[str, Any]:
    """Run the pipeline sequentially for each URL, collecting failures."""
    results: list[dict[str, Any]] = []
    for i, url in enumerate(urls):
        logger.info(f"[{i + 1}/{len(urls)}] {url}")
        try:
            results.append({"url": url, "success": True, "data": await run_one(controller, url)})
        except PipelineError as e:
            logger.error(f"Error on {url}: {e}")
            results.append({"url": url, "success": False, "error": error_payload(e)})
        except Exception as e:
            logger.error(f"Unexpected error on {url}: {e}", exc_info=True)
            results.append({"url": url, "success": False, "error": error_payload(e)})

        if i < len(urls) - 1 and delay > 0:
            await asyncio.sleep(delay)

    return {
        "metadata": {
            "timestamp": datetime.now().isoformat(),
            "total": len(results),
            "succeeded": sum(1 for r in results if r["success"]),
        },
        "results": results,
    }


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate brand kits from website URLs")
    sub = parser.add_subparsers(dest="command", required=True)

    run_p = sub.add_parser("run", help="Run the pipeline for one URL")
    run_p.add_argument("url", help="Website URL to analyze")
    run_p.add_argument("--output", type=str, help="Output JSON path")

    artifact_p = sub.add_parser("artifact", help="Show the content artifact summary of a run")
    artifact_p.add_argument("run_id", help="Run id (bkit_...)")

    batch_p = sub.add_parser("batch", help="Run the pipeline for every URL in a file")
    batch_p.add_argument("file", type=Path, help="Text file with one URL per line")
    batch_p.add_argument("--delay", type=float, default=2.0, help="Delay between runs")
    batch_p.add_argument("--output", type=str, help="Output JSON path")
    return parser


async def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    setup_logging(level=settings.log_level, json_output=False)
    controller = PipelineController(settings)

    try:
        if args.command == "run":
            _write_json(await run_one(controller, args.url), args.output)
        elif args.command == "artifact":
            summary = await controller.get_artifact_summary(args.run_id)
            _write_json(summary.model_dump(mode="json", by_alias=True), None)
        elif args.command == "batch":
            output = await run_batch(controller, load_urls(args.file), delay=args.delay)
            _write_json(output, args.output)
    except PipelineError as e:
        logger.error(f"{e.kind.value}: {e.message}")
        _write_json({"success": False, "error": error_payload(e)}, None)
        return 1
    finally:
        await controller.aclose()
    return 0


def cli() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    cli()
