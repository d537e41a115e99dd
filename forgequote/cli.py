import argparse
import json
import mimetypes
import sys
from pathlib import Path

from forgequote.analyzer import AnalysisError, QuoteAnalyzer
from forgequote.uploads import UploadedFile, UploadError
from forgequote.utils import setup_logger

logger = setup_logger(__name__)


def load_upload(path: Path) -> UploadedFile:
    """Read a local file the same way the endpoint receives a multipart upload."""
    content_type, _ = mimetypes.guess_type(path.name)
    return UploadedFile(
        filename=path.name,
        content_type=(content_type or "").lower(),
        data=path.read_bytes(),
    )


def print_items(items):
    if not items:
        print("   (no items extracted)")
        return
    for item in items:
        if not isinstance(item, dict):
            print(f"   {item}")
            continue
        row = str(item.get("rowId", "-"))
        shape = str(item.get("productName", "-"))
        ingot = str(item.get("ingotType", "-"))
        rate = item.get("recoveryRate", "-")
        ingot_weight = item.get("calculatedIngotWeight", "-")
        print(f"   {row:<6} {shape:<12} ingot={ingot:<6} yield={rate}  ingot_weight={ingot_weight}")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Analyze a forging quote sheet with the configured AI provider.")
    parser.add_argument("file", nargs="?", help="CSV, image or PDF to analyze")
    parser.add_argument("--provider", help="override AI_PROVIDER (gemini, openai, cohere)")
    parser.add_argument("--output", help="write the full JSON response to this path")
    args = parser.parse_args(argv)

    print(f"\n{'='*50}")
    print("  FORGING QUOTE ANALYZER")
    print(f"{'='*50}")

    file_arg = args.file or input("   File to analyze: ").strip()
    path = Path(file_arg).expanduser()
    if not path.is_file():
        print(f"[ERROR] File not found: {path}")
        return 1

    try:
        from forgequote.ai_engine import AIEngine
        analyzer = QuoteAnalyzer(engine=AIEngine(provider=args.provider))
        print(f"   Provider : {analyzer.engine.label}")
        print(f"   File     : {path.name}")
        result = analyzer.analyze(load_upload(path))
    except (UploadError, AnalysisError, ValueError) as e:
        logger.error(f"[ERROR] {e}")
        return 1

    items = result["data"]["items"]
    print(f"\n   {len(items)} item(s) extracted")
    print_items(items)

    if args.output:
        out = Path(args.output)
        out.write_text(json.dumps(result, ensure_ascii=False, indent=2), encoding="utf-8")
        print(f"\n   → {out}")

    print(f"{'='*50}\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
