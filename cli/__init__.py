import argparse
import logging

import cli.config
import cli.parts


def create_parser():
    parser = argparse.ArgumentParser(
        prog='scoresplit',
        description='scoresplit - Find instrument parts in multi-part sheet-music PDFs',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Configuration
  scoresplit init                               # Create config.yaml with defaults
  scoresplit config show
  scoresplit config set split.max_pages_per_part 16

  # Boundary detection (digital PDFs)
  scoresplit detect ~/Scores/march-parts.pdf
  scoresplit detect ~/Scores/march-parts.pdf --pages
  scoresplit detect ~/Scores/march-parts.pdf --json

  # Validate instructions from a classifier
  scoresplit validate llm.json --pages 24 --one-indexed --auto-fix --detect-gaps

  # Full cut plan
  scoresplit plan ~/Scores/march-parts.pdf
  scoresplit plan ~/Scores/scanned.pdf --llm llm.json
  scoresplit plan ~/Scores/scanned.pdf --headers ocr-headers.json
"""
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Print debug logs to stderr'
    )

    subparsers = parser.add_subparsers(dest='command', help='Command')
    subparsers.required = True

    cli.config.setup_parser(subparsers)
    cli.parts.setup_parser(subparsers)

    return parser


def main(argv=None):
    parser = create_parser()
    args = parser.parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format='%(levelname)s %(name)s: %(message)s')
    args.func(args)
