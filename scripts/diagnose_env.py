#!/usr/bin/env python
"""Environment & connectivity diagnostics for the Waifu Haven client.

Usage:
  python scripts/diagnose_env.py [--health] [--all]

Without flags runs variable presence checks. --health calls GET /health,
--all additionally calls GET /status and /categories with the configured key.
"""
from __future__ import annotations
import os
import sys
import logging
from pathlib import Path
from typing import Dict, List

from waifuhaven import ConfigError, WaifuHavenClient
from waifuhaven.config import ENV_PREFIX, load_env_file

PROJECT_ROOT = Path(__file__).resolve().parents[1]

MANDATORY: List[str] = [ENV_PREFIX + 'API_KEY']
OPTIONAL: List[str] = [ENV_PREFIX + k for k in (
    'BASE_URL', 'TIMEOUT', 'USER_AGENT', 'RPS',
    'BOT_PLATFORM', 'BOT_GUILD', 'BOT_USER', 'BOT_VERSION',
)]


def mask(val: str | None) -> str | None:
    if not val:
        return val
    if len(val) <= 6:
        return '*' * len(val)
    return val[:4] + '...' + val[-4:]


def check_presence() -> Dict[str, str]:
    report: Dict[str, str] = {}
    for k in MANDATORY:
        v = os.getenv(k)
        report[k] = 'OK' if v and v.strip() else 'MISSING'
    return report


def print_report():
    presence = check_presence()
    widest = max(len(k) for k in MANDATORY + OPTIONAL)
    print('\n[VARIABLE PRESENCE]')
    for k, status in presence.items():
        raw = os.getenv(k)
        print(f"  {k.ljust(widest)} : {status:<8} {'' if status != 'OK' else mask(raw)}")
        if status == 'OK' and not WaifuHavenClient.validate_api_key(raw):
            print('  HINT: API key looks too short (expected at least 10 characters).')
    print('\n[OPTIONAL OVERRIDES]')
    for k in OPTIONAL:
        raw = os.getenv(k)
        if raw:
            print(f"  {k.ljust(widest)} = {raw}")
    print()


def test_connectivity(full: bool) -> None:
    try:
        client = WaifuHavenClient.from_env()
    except ConfigError as e:
        print(f"[health] Skipping connectivity test ({e})")
        return
    with client:
        print(f"[health] GET {client.BASE_URL}/health")
        health = client.get_health()
        if health.success:
            print(f"[health] Status: {health.status}")
        else:
            print(f"[health] ERROR: {health.error}")
        if not full:
            return
        status = client.get_status()
        print(f"[status] {'OK' if status.success else 'ERROR: ' + str(status.error)}")
        categories = client.get_categories()
        print(f"[categories] source={categories.source} sfw={len(categories.sfw)} nsfw={len(categories.nsfw)}")
        if categories.source == 'default':
            print('HINT: /categories unreachable, using the built-in default list. Check the key and base URL.')


def main(argv: List[str]):
    logging.basicConfig(level=logging.WARNING, format='[%(levelname)s] %(message)s')
    load_env_file(PROJECT_ROOT / '.env')
    flags = set(a for a in argv[1:] if a.startswith('--'))
    print_report()
    if '--health' in flags or '--all' in flags:
        test_connectivity(full='--all' in flags)


if __name__ == '__main__':
    main(sys.argv)
