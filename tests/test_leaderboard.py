import json

import pytest

from slice_void import leaderboard
from slice_void.leaderboard import (
    LeaderboardEntry, LeaderboardError, LeaderboardStore, rank_entries
)
from slice_void.settings import LEADERBOARD_KEY


def write(store, document):
    store.path.write_text(json.dumps(document), encoding='utf-8')


def test_missing_file_is_an_empty_board(store):
    assert store.load() == []


def test_unreadable_json_is_an_empty_board(store):
    store.path.write_text('{not json', encoding='utf-8')
    assert store.load() == []


@pytest.mark.parametrize('stored', [
    'oops',
    {'name': 'A'},
    [{'name': 'A', 'score': '10', 'date': '2024-01-01'}],
    [{'name': 'A', 'score': True, 'date': '2024-01-01'}],
    [{'name': 'A', 'score': -1, 'date': '2024-01-01'}],
    [{'name': 'A', 'score': 10, 'date': '2024-01-01'}, 'junk'],
])
def test_malformed_entries_empty_the_board(store, stored):
    write(store, {LEADERBOARD_KEY: stored})
    assert store.load() == []


def test_load_ranks_best_first(store):
    write(store, {LEADERBOARD_KEY: [
        {'name': 'LOW', 'score': 10, 'date': 'd'},
        {'name': 'HIGH', 'score': 90, 'date': 'd'},
    ]})
    assert [e.name for e in store.load()] == ['HIGH', 'LOW']


def test_submit_keeps_top_five(store):
    for i, score in enumerate([50, 10, 70, 30, 90, 20, 60]):
        store.submit(LeaderboardEntry(name=f'P{i}', score=score, date='2024-05-01'))

    board = store.load()
    assert [e.score for e in board] == [90, 70, 60, 50, 30]

    stored = json.loads(store.path.read_text(encoding='utf-8'))[LEADERBOARD_KEY]
    assert len(stored) == 5
    assert stored[0] == {'name': 'P4', 'score': 90, 'date': '2024-05-01'}


def test_ties_keep_submission_order():
    entries = [LeaderboardEntry('A', 10, 'd'), LeaderboardEntry('B', 10, 'd')]
    assert [e.name for e in rank_entries(entries)] == ['A', 'B']


def test_save_preserves_other_keys(store):
    write(store, {'settings': {'volume': 3}})
    store.submit(LeaderboardEntry(name='ACE', score=40, date='d'))

    document = json.loads(store.path.read_text(encoding='utf-8'))
    assert document['settings'] == {'volume': 3}
    assert document[LEADERBOARD_KEY][0]['name'] == 'ACE'


def test_save_creates_parent_directories(tmp_path):
    store = LeaderboardStore(tmp_path / 'nested' / 'dir' / 'scores.json')
    store.submit(LeaderboardEntry(name='ACE', score=40, date='d'))
    assert [e.name for e in store.load()] == ['ACE']


def test_write_failure_raises_leaderboard_error(tmp_path):
    blocker = tmp_path / 'blocker'
    blocker.write_text('x')
    store = LeaderboardStore(blocker / 'scores.json')

    with pytest.raises(LeaderboardError):
        store.submit(LeaderboardEntry(name='ACE', score=40, date='d'))


def test_failed_replace_leaves_no_temp_file(store, monkeypatch):
    def refuse(src, dst):
        raise PermissionError('read-only')
    monkeypatch.setattr(leaderboard.os, 'replace', refuse)

    with pytest.raises(LeaderboardError):
        store.submit(LeaderboardEntry(name='ACE', score=40, date='d'))

    assert list(store.path.parent.iterdir()) == []
