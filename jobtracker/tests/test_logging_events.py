import json
import threading
from jobtracker.ingest import logging_config
from jobtracker.ingest.logging_config import log_event, events_file


def read_events(path):
    return [json.loads(line) for line in path.read_text(encoding='utf-8').splitlines()]


def test_event_written_with_thread_name(tmp_path, monkeypatch):
    target = tmp_path / 'nested' / 'events.jsonl'
    monkeypatch.delenv('SCRAPER_DISABLE_EVENTS', raising=False)
    monkeypatch.setenv('SCRAPER_EVENTS_FILE', str(target))
    log_event('cache_hit', key='python:berlin', total=3)
    (rec,) = read_events(target)
    assert rec['event'] == 'cache_hit'
    assert rec['key'] == 'python:berlin' and rec['total'] == 3
    assert rec['thread'] == threading.current_thread().name
    assert rec['ts'].endswith('+00:00')


def test_events_disabled_writes_nothing(tmp_path, monkeypatch):
    target = tmp_path / 'events.jsonl'
    monkeypatch.setenv('SCRAPER_DISABLE_EVENTS', '1')
    monkeypatch.setenv('SCRAPER_EVENTS_FILE', str(target))
    log_event('search_start', keywords='python')
    assert not target.exists()


def test_default_file_under_log_dir(tmp_path, monkeypatch):
    monkeypatch.delenv('SCRAPER_EVENTS_FILE', raising=False)
    monkeypatch.setattr(logging_config, 'LOG_DIR', tmp_path)
    assert events_file() == tmp_path / 'search.events.jsonl'


def test_concurrent_searches_keep_lines_whole(tmp_path, monkeypatch):
    target = tmp_path / 'events.jsonl'
    monkeypatch.delenv('SCRAPER_DISABLE_EVENTS', raising=False)
    monkeypatch.setenv('SCRAPER_EVENTS_FILE', str(target))

    def worker(n):
        for i in range(25):
            log_event('search_complete', key=f'q{n}:', collected=i, message='x' * 500)

    threads = [threading.Thread(target=worker, args=(n,), name=f'search-{n}') for n in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    events = read_events(target)
    assert len(events) == 100
    assert {e['thread'] for e in events} == {f'search-{n}' for n in range(4)}


def test_unserializable_fields_stringified(tmp_path, monkeypatch):
    target = tmp_path / 'events.jsonl'
    monkeypatch.delenv('SCRAPER_DISABLE_EVENTS', raising=False)
    monkeypatch.setenv('SCRAPER_EVENTS_FILE', str(target))
    log_event('cache_store', path=tmp_path)
    (rec,) = read_events(target)
    assert rec['path'] == str(tmp_path)
