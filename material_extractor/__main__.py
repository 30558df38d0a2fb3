"""
Command-line entry point: extract materials from a saved product page.

Usage: python -m material_extractor PAGE.html   (use "-" to read stdin)
"""
import argparse
import sys

from material_extractor.display import render_lines
from material_extractor.layers.extraction import MaterialExtractionLayer


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        prog="material_extractor",
        description="Print the material composition found in an HTML product page.",
    )
    parser.add_argument("page", help="Path to an HTML file, or - for stdin")
    args = parser.parse_args(argv)

    if args.page == "-":
        html = sys.stdin.read()
    else:
        with open(args.page, "r", encoding="utf-8", errors="replace") as f:
            html = f.read()

    result = MaterialExtractionLayer().extract_html(html)
    headline, meta = render_lines(result)
    print(headline)
    if meta:
        print(meta)
    return 0 if result.materials else 1


if __name__ == "__main__":
    sys.exit(main())
