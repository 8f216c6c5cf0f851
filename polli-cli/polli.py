"""Command-line entry point: generate an image or list the available models."""
import argparse
import logging
import sys
from typing import List, Optional

from polli_errors import ConfigError
from polli_models import GenerationRequest
from polli_pipeline import generate, list_models
from polli_settings import load_settings, parse_timeout

EPILOG = """\
Default settings:
  - No logo on images (nologo=true)
  - Private generation (private=true)
  - Not added to public feed (nofeed=true)

Examples:
  polli --img -m flux -c "house on the cliff with sunset view over the sea"
  polli -P -c "portrait of a person"
  polli -R 1920x1080 -o ./outputs/sunset.png -c "beautiful sunset"
  polli -f jpg -c "mountain landscape"
  polli --list-models

Setup:
  1. Get an API key from https://enter.pollinations.ai
  2. echo "POLLINATIONS_API_KEY=your_key_here" > .env
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="polli",
        description="Pollinations.ai image generator",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
    )
    parser.add_argument("--img", action="store_true", help="Generate image (default mode)")
    parser.add_argument("-c", "--content", dest="prompt", default="", metavar="TEXT",
                        help="Image prompt/description (required)")
    parser.add_argument("-m", "--model", default="flux", help="Model to use (default: flux)")
    parser.add_argument("-P", "--portrait", dest="aspect", action="store_const", const="portrait",
                        help="Portrait aspect ratio (768x1024)")
    parser.add_argument("-L", "--landscape", dest="aspect", action="store_const", const="landscape",
                        help="Landscape aspect ratio (1024x768)")
    parser.add_argument("-S", "--square", dest="aspect", action="store_const", const="square",
                        help="Square aspect ratio (1024x1024)")
    parser.add_argument("-R", "--resolution", metavar="WxH", help="Custom resolution (e.g. 1280x720)")
    parser.add_argument("-o", "--output", metavar="PATH",
                        help="Output file or directory (default: ./img_YYYYMMDD_HHMMSS.png)")
    parser.add_argument("-f", "--format", default="png", choices=["png", "jpg"],
                        help="Image format: png (default) or jpg")
    parser.add_argument("--seed", metavar="NUMBER", help="Seed for reproducibility")
    parser.add_argument("--enhance", action="store_true", help="Enhance prompt")
    parser.add_argument("--safe", action="store_true", help="Enable safe mode")
    parser.add_argument("--list-models", action="store_true", help="List available models")
    parser.add_argument("--timeout", type=float, metavar="SECONDS",
                        help="Request timeout in seconds, 0 to wait forever (default: 300)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output to stderr")
    parser.add_argument("-h", "--help", action="store_true", help="Show this help message")
    return parser


def configure_logging(verbose: bool, level: str = "WARNING") -> None:
    level = logging.DEBUG if verbose else level
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)-8s %(name)s %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def main(argv: Optional[List[str]] = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.help or not argv:
        parser.print_help()
        return 0

    try:
        settings = load_settings()
    except ConfigError as e:
        print(f"✗ Error: {e.message}")
        return 1
    configure_logging(args.verbose, settings.log_level)
    if args.timeout is not None:
        settings = settings.model_copy(update={"timeout": parse_timeout(args.timeout)})

    if args.list_models:
        list_models(settings=settings)
        return 0

    print("Generating image with Pollinations.ai...")
    print(f"Prompt: {args.prompt}")
    print(f"Model: {args.model}")
    if args.aspect:
        print(f"Aspect: {args.aspect}")
    if args.resolution:
        print(f"Resolution: {args.resolution}")
    print()

    request = GenerationRequest(
        prompt=args.prompt,
        model=args.model,
        aspect=args.aspect,
        resolution=args.resolution,
        format=args.format,
        output=args.output,
        seed=args.seed,
        enhance=args.enhance,
        safe=args.safe,
        api_key=settings.api_key,
    )
    result = generate(request, settings)

    if not result.success:
        print(f"✗ Error: {result.error}")
        return 1

    print("✓ Success!")
    print(f"Image saved to: {result.path}")
    print(f"File size: {result.size:,} bytes")
    print(f"Content type: {result.content_type}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
