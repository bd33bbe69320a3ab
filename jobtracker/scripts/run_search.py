"""Run LinkedIn job searches from the command line and print results as JSON.

Ad-hoc:   python -m jobtracker.scripts.run_search --keywords "C++ developer" --location "New York"
Batch:    python -m jobtracker.scripts.run_search --searches jobtracker/config/searches.yml
"""
from pathlib import Path
import sys
import json
import yaml
import argparse
import logging

from jobtracker.ingest.errors import SearchError
from jobtracker.ingest.logging_config import setup_logging, log_event
from jobtracker.ingest.search import JobSearchService

DEFAULT_SEARCHES = Path(__file__).resolve().parent.parent / 'config' / 'searches.yml'


def load_searches(path: Path) -> list[dict]:
    cfg = yaml.safe_load(path.read_text(encoding='utf-8')) or {}
    return [s for s in cfg.get('searches', []) if s.get('keywords')]


def main(argv=None, service: JobSearchService | None = None) -> int:
    ap = argparse.ArgumentParser(description='Search LinkedIn jobs and print JSON results')
    ap.add_argument('--keywords', type=str, help='Ad-hoc keywords (bypass searches file)')
    ap.add_argument('--location', type=str, help='Ad-hoc location')
    ap.add_argument('--searches', type=Path, default=DEFAULT_SEARCHES, help='YAML file with a `searches` list')
    ap.add_argument('--debug', action='store_true', help='Enable debug logging')
    args = ap.parse_args(argv)
    setup_logging(debug=args.debug)
    logger = logging.getLogger('run_search')

    if args.keywords:
        searches = [{'keywords': args.keywords, 'location': args.location or ''}]
    elif args.searches.exists():
        searches = load_searches(args.searches)
    else:
        ap.error(f"--keywords required (no searches file at {args.searches})")
    logger.info(f"Loaded {len(searches)} searches")

    service = service or JobSearchService()
    failures = 0
    out = []
    for s in searches:
        keywords = s['keywords']
        location = s.get('location') or None
        try:
            result = service.search_jobs(keywords, location)
        except SearchError as e:
            failures += 1
            print(f"Search '{keywords}' failed ({e.code}): {e}", file=sys.stderr)
            continue
        out.append({'keywords': keywords, 'location': location or '', **result.model_dump(mode='json', by_alias=True)})
    print(json.dumps(out, ensure_ascii=False, indent=2))
    log_event('run_complete', searches=len(searches), failures=failures)
    return 2 if failures else 0


if __name__ == '__main__':
    sys.exit(main())
