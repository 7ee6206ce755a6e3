#!/usr/bin/env python
"""CLI for the Waifu Haven image API.

Examples:
  python scripts/fetch_image.py --health
  python scripts/fetch_image.py --status
  python scripts/fetch_image.py --categories
  python scripts/fetch_image.py --type sfw --category waifu
  python scripts/fetch_image.py --random --type any --out data/random.json
  python scripts/fetch_image.py --type nsfw --category hentai --stats

Reads WAIFU_HAVEN_API_KEY (and optional WAIFU_HAVEN_* overrides) from the
environment or a local .env file.
"""
from __future__ import annotations
import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict

from waifuhaven import WaifuHavenClient, WaifuHavenError
from waifuhaven.config import load_env_file


def parse_args(argv=None):
    p = argparse.ArgumentParser(description='Fetch images and service info from Waifu Haven')
    g = p.add_mutually_exclusive_group(required=True)
    g.add_argument('--health', action='store_true', help='GET /health (no auth)')
    g.add_argument('--status', action='store_true', help='GET /status')
    g.add_argument('--categories', action='store_true', help='List known categories')
    g.add_argument('--category', help='Fetch an image from this category')
    g.add_argument('--random', action='store_true', help='Fetch an image from a random category')
    p.add_argument('--type', default='sfw', choices=['sfw', 'nsfw', 'any'])
    p.add_argument('--stats', action='store_true', help='Print request counters afterwards')
    p.add_argument('--out', help='Write the JSON result to this path instead of stdout')
    p.add_argument('--env-file', default='.env')
    p.add_argument('--verbose', action='store_true')
    return p.parse_args(argv)


def run(client: WaifuHavenClient, args) -> Dict[str, Any]:
    if args.health:
        return vars(client.get_health())
    if args.status:
        return vars(client.get_status())
    if args.categories:
        return client.get_categories().to_dict()
    if args.random:
        return client.get_random_image(args.type).to_dict()
    if args.type == 'any':
        raise SystemExit('--type any is only valid with --random')
    return client.get_image(args.category, args.type).to_dict()


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format='[%(levelname)s] %(message)s')
    load_env_file(Path(args.env_file))

    try:
        with WaifuHavenClient.from_env() as client:
            try:
                result = run(client, args)
            finally:
                if args.stats:
                    print(json.dumps(client.get_stats(), indent=2), file=sys.stderr)
    except WaifuHavenError as e:
        logging.error('%s: %s', type(e).__name__, e)
        return 1

    text = json.dumps(result, ensure_ascii=False, indent=2)
    if args.out:
        out_path = Path(args.out)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(text, encoding='utf-8')
        logging.info('[done] Wrote %s', out_path)
    else:
        print(text)
    return 0


if __name__ == '__main__':
    sys.exit(main())
