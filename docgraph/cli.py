"""Queue runner: submit documents → wait for the backlog to drain → save graphs.

Usage:
    docgraph moby_dick.txt https://example.org/essay.txt --output-dir graphs
    docgraph --config configs/default.yaml --auto-refill
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from docgraph.errors import DuplicateSourceError
from docgraph.pipeline import Pipeline, PipelineConfig, Status
from docgraph.schema import export_filename


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docgraph",
        description="Convert documents (local .txt/.md/.pdf or URLs) into knowledge graphs.",
    )
    parser.add_argument("sources", nargs="*", help="Local paths or http(s) URLs")
    parser.add_argument("--config", type=Path, help="Path to pipeline config YAML")
    parser.add_argument("--instructions", help="Additional instructions for the extraction model")
    parser.add_argument(
        "--auto-refill",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Refill the backlog from the candidate list when it drains",
    )
    parser.add_argument("--concurrency", type=int, help="Max entries processed at once")
    parser.add_argument("--output-dir", type=Path, default=Path("graphs"))
    parser.add_argument("--timeout", type=float, help="Give up waiting after this many seconds")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def load_config(args: argparse.Namespace) -> PipelineConfig:
    config = PipelineConfig.from_yaml(args.config) if args.config else PipelineConfig(auto_refill=False)
    if args.auto_refill is not None:
        config.auto_refill = args.auto_refill
    if args.concurrency is not None:
        config.max_concurrent_jobs = args.concurrency
    # re-run validation after overrides
    config.__post_init__()
    return config


def export_path(output_dir: Path, source: str, used: set[str]) -> Path:
    """Output path for a source, suffixed when an earlier source in this run took the name."""
    name = export_filename(source)
    stem = name[: -len(".json")]
    n = 1
    while name in used:
        n += 1
        name = f"{stem}_{n}.json"
    used.add(name)
    return output_dir / name


def run(args: argparse.Namespace) -> int:
    config = load_config(args)

    print(f"\n{'='*60}")
    print(f"Model: {config.model}")
    print(f"Concurrency: {config.max_concurrent_jobs} entries")
    print(f"Chunk: {config.chunk_size} chars, overlap {config.chunk_overlap}")
    print(f"Auto-refill: {config.auto_refill} ({config.refill_batch.value})")
    print(f"{'='*60}\n")

    with Pipeline(config) as pipeline:
        for source in args.sources:
            try:
                pipeline.submit(source, args.instructions)
            except DuplicateSourceError as e:
                print(f"SKIP: {e}")

        if not pipeline.wait_until_idle(args.timeout):
            print(f"Timed out after {args.timeout}s; in-flight entries are abandoned")

        if pipeline.configuration_error:
            print(f"Missing API key! {pipeline.configuration_error}")

        args.output_dir.mkdir(parents=True, exist_ok=True)
        failed = 0
        written: set[str] = set()
        for entry in pipeline.snapshot():
            line = f"  [{entry.status.value:<10}] {entry.source}"
            graph = pipeline.graph_for(entry.id)
            if graph is not None:
                output_path = export_path(args.output_dir, entry.source, written)
                graph.to_json(output_path)
                line += f" -> {output_path} ({graph.summary()})"
            elif entry.status == Status.FAILED:
                failed += 1
                line += f"\n      {entry.error}"
            print(line)

    return 1 if failed else 0


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    # LiteLLM is chatty at INFO
    logging.getLogger("LiteLLM").setLevel(logging.WARNING)
    return run(args)


if __name__ == "__main__":
    sys.exit(main())
