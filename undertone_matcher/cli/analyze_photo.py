import argparse
import json
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv
from tqdm import tqdm

# Load environment variables first
load_dotenv()

from ..models.errors import EmptySkinSetError, InvalidInputError
from ..models.undertone_analysis import UndertoneReport
from ..pipeline.undertone_analyzer import analyze_gallery, analyze_image
from ..services.image_service import ImageService
from ..services.recommendation_service import RecommendationService
from ..services.undertone_service import UndertoneService

logger = logging.getLogger(__name__)

UNDETERMINED = "undetermined"


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else os.getenv("LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
        datefmt='%H:%M:%S'
    )


def format_report(report: UndertoneReport) -> str:
    a = report.analysis
    r, g, b = a.mean_rgb
    lines = [
        f"{report.path or 'image'}: {a.undertone.value.upper()} undertone",
        f"  R/G ratio: {a.ratio:.3f} | mean RGB: ({r:.0f}, {g:.0f}, {b:.0f}) | "
        f"skin pixels: {a.skin_pixel_count}/{a.total_pixel_count} ({a.skin_coverage:.1%})",
        f"  {report.recommendation.explanation}",
        "  Colors that look great on you: " + ", ".join(s.name for s in report.recommendation.good),
        "  Colors to avoid: " + ", ".join(s.name for s in report.recommendation.avoid),
    ]
    return "\n".join(lines)


def _emit(line: str, progress: bool) -> None:
    if progress:
        tqdm.write(line)
    else:
        print(line)


def _undetermined(path, err: Exception, as_json: bool) -> str:
    if as_json:
        return json.dumps({"path": str(path) if path else None, "undertone": None,
                           "status": UNDETERMINED, "message": str(err)})
    return f"{path or 'image'}: {UNDETERMINED} ({err})"


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="undertone-matcher",
        description="Classify skin undertone from photos and suggest colors to wear",
    )
    p.add_argument("path", help="Image file or folder of images")
    p.add_argument("--recursive", "-r", action="store_true", help="Descend into sub-folders")
    p.add_argument("--json", action="store_true", help="Print one JSON object per image")
    p.add_argument("--workers", type=int, default=None,
                   help="Threads used to scan large images (default: ANALYSIS_WORKERS)")
    p.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    return p


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)

    image_service = ImageService()
    undertone_service = UndertoneService(workers=args.workers)
    recommendation_service = RecommendationService()

    target = Path(args.path)
    render = (lambda rep: json.dumps(rep.to_dict())) if args.json else format_report

    if target.is_dir():
        gallery = image_service.stream_gallery(target, recursive=args.recursive)
        results = analyze_gallery(
            tqdm(gallery, unit="img", desc="Analysing", disable=args.json),
            undertone_service=undertone_service,
            recommendation_service=recommendation_service,
        )
        counts = {}
        for img, outcome in results:
            if isinstance(outcome, EmptySkinSetError):
                _emit(_undetermined(img.path, outcome, args.json), not args.json)
                key = UNDETERMINED
            else:
                _emit(render(outcome), not args.json)
                key = outcome.undertone.value
            counts[key] = counts.get(key, 0) + 1
        if not args.json:
            summary = ", ".join(f"{k}: {v}" for k, v in sorted(counts.items())) or "no images found"
            print(f"\nSummary: {summary}")
        return 0

    try:
        img = image_service.load(target)
        report = analyze_image(
            img,
            undertone_service=undertone_service,
            recommendation_service=recommendation_service,
        )
    except FileNotFoundError as err:
        print(f"Error: {err}", file=sys.stderr)
        return 1
    except (EmptySkinSetError, InvalidInputError) as err:
        print(_undetermined(target, err, args.json))
        return 1

    print(render(report))
    return 0


if __name__ == "__main__":
    sys.exit(main())
