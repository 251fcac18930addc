import datetime

from slice_void.components import EntityKind, Position, Velocity, Renderable
from slice_void.game import GamePhase
from slice_void.leaderboard import LeaderboardStore
from slice_void.spawner import DeferredSpawn

from conftest import HEIGHT, WIDTH, place


def swipe_through(game, x, y):
    game.on_pointer_sample(x - 100, y)
    game.on_pointer_sample(x + 100, y)


def finish(game, score=120):
    """Drive a running game into GAME_OVER with the given score."""
    game.session.score = score
    game.session.lives = 1
    place(game.session.world, game.rng, EntityKind.BOMB, 200, 200)
    swipe_through(game, 200, 200)
    game.tick()
    assert game.phase is GamePhase.GAME_OVER


def test_starts_in_menu_with_idle_fruit(game):
    snap = game.snapshot()
    assert snap.phase is GamePhase.MENU
    assert len(snap.entities) == 3
    assert {e.kind for e in snap.entities} == {'fruit'}
    assert (snap.score, snap.lives, snap.freeze_seconds) == (0, 0, 0)


def test_menu_tick_animates_idle_fruit(game):
    before = [e.y for e in game.snapshot().entities]
    game.tick()
    after = [e.y for e in game.snapshot().entities][:3]
    assert all(a < b for a, b in zip(after, before))


def test_calls_that_do_not_fit_the_state_are_ignored(game):
    game.pause_game()
    game.resume_game()
    game.go_home()
    game.submit_score('NOPE')
    game.on_pointer_sample(10, 10)
    assert game.phase is GamePhase.MENU
    assert game.epoch == 0
    assert game.leaderboard() == []

    game.start_game()
    game.start_game()
    game.resume_game()
    assert game.phase is GamePhase.PLAYING
    assert game.epoch == 1


def test_start_game_resets_the_session(playing):
    snap = playing.snapshot()
    assert snap.phase is GamePhase.PLAYING
    assert (snap.score, snap.lives, snap.freeze_seconds) == (0, 3, 0)
    assert snap.entities == ()


def test_swipe_slices_fruit(playing):
    eid = place(playing.session.world, playing.rng, EntityKind.FRUIT)
    color = playing.session.world.get_component(eid, Renderable).color

    swipe_through(playing, 400, 300)
    playing.tick()

    snap = playing.snapshot()
    assert snap.score == 10
    assert snap.entities == ()
    assert [p.color for p in snap.particles] == [color] * 10
    assert len(snap.blade) == 2


def test_one_swipe_slices_every_fruit_it_crosses(playing):
    place(playing.session.world, playing.rng, EntityKind.FRUIT, 380, 300)
    place(playing.session.world, playing.rng, EntityKind.FRUIT, 420, 310)

    swipe_through(playing, 400, 300)
    playing.tick()
    playing.tick()

    assert playing.snapshot().score == 20


def test_bomb_on_last_life_ends_the_game(playing):
    finish(playing)
    snap = playing.snapshot()
    assert snap.lives == 0
    assert snap.shaking
    assert snap.blade == ()
    assert snap.freeze_seconds == 0


def test_game_over_holds_still(playing):
    finish(playing)
    eid = place(playing.session.world, playing.rng, EntityKind.FRUIT)
    playing.session.world.get_component(eid, Velocity).y = -5.0

    playing.tick()
    assert playing.session.world.get_component(eid, Position).y == 300.0


def test_ice_freezes_the_blade(playing, clock):
    place(playing.session.world, playing.rng, EntityKind.ICE)
    swipe_through(playing, 400, 300)
    playing.tick()

    snap = playing.snapshot()
    assert snap.freeze_seconds == 3
    assert snap.blade == ()

    # Pointer input is ignored while frozen
    swipe_through(playing, 400, 300)
    assert len(playing.session.blade) == 0

    clock.advance(3000)
    swipe_through(playing, 400, 300)
    assert len(playing.session.blade) == 2


def test_frozen_tick_clears_the_blade(playing, clock):
    playing.session.blade.append(0, 0)
    playing.session.blade.append(10, 10)
    playing.session.freeze.register_hit(clock.now_ms())

    playing.tick()
    assert len(playing.session.blade) == 0


def test_pause_keeps_the_world_still(playing, clock):
    eid = place(playing.session.world, playing.rng, EntityKind.FRUIT)
    playing.session.world.get_component(eid, Velocity).x = 4.0

    playing.pause_game()
    clock.advance(5000)
    playing.tick()

    assert playing.phase is GamePhase.PAUSED
    assert playing.session.world.get_component(eid, Position).x == 400.0
    playing.on_pointer_sample(1, 1)
    assert len(playing.session.blade) == 0


def test_pause_drops_the_old_blade_trail(playing):
    playing.on_pointer_sample(300, 300)
    playing.on_pointer_sample(500, 300)

    playing.pause_game()
    assert playing.snapshot().blade == ()

    place(playing.session.world, playing.rng, EntityKind.FRUIT, 400, 300)
    playing.resume_game()
    playing.tick()

    assert playing.snapshot().score == 0
    assert len(playing.snapshot().entities) == 1


def test_pause_resume_preserves_remaining_freeze(playing, clock):
    playing.session.freeze.register_hit(clock.now_ms())  # 3000 ms
    clock.advance(1000)
    playing.pause_game()

    clock.advance(60000)
    assert playing.snapshot().freeze_seconds == 2

    playing.resume_game()
    assert playing.session.freeze.end_ms == clock.now_ms() + 2000
    clock.advance(1999)
    assert playing.snapshot().freeze_seconds == 1
    clock.advance(1)
    assert playing.snapshot().freeze_seconds == 0


def test_follow_up_toss_is_cancelled_by_pause(playing, clock):
    playing.session.pending_spawns.append(
        DeferredSpawn(clock.now_ms() + 250, playing.epoch)
    )
    playing.pause_game()
    playing.resume_game()
    clock.advance(300)
    playing.tick()

    assert playing.session.world.entity_count() == 0
    assert playing.session.pending_spawns == []


def test_follow_up_toss_fires_without_a_transition(playing, clock):
    playing.session.pending_spawns.append(
        DeferredSpawn(clock.now_ms() + 250, playing.epoch)
    )
    clock.advance(300)
    playing.tick()

    assert len(playing.snapshot().entities) == 1


def test_regular_spawn_after_interval(playing, clock):
    clock.advance(1101)
    playing.tick()
    assert len(playing.snapshot().entities) >= 1


def test_third_drop_costs_a_life_and_shakes(playing, clock):
    playing.session.dropped_fruit = 2
    eid = place(playing.session.world, playing.rng, EntityKind.FRUIT, 400, HEIGHT + 81)
    playing.session.world.get_component(eid, Velocity).y = 1.0

    playing.tick()

    snap = playing.snapshot()
    assert snap.lives == 2
    assert snap.shaking
    assert playing.phase is GamePhase.PLAYING
    clock.advance(500)
    assert not playing.snapshot().shaking


def test_home_from_pause_returns_to_menu(playing):
    playing.pause_game()
    playing.go_home()

    assert playing.phase is GamePhase.MENU
    assert playing.session is None
    assert len(playing.snapshot().entities) == 3


def test_restart_after_game_over(playing):
    finish(playing)
    playing.start_game()

    snap = playing.snapshot()
    assert snap.phase is GamePhase.PLAYING
    assert (snap.score, snap.lives) == (0, 3)
    assert not snap.shaking


def test_blank_name_is_not_submitted(playing):
    finish(playing)
    playing.submit_score('   ')
    assert playing.phase is GamePhase.GAME_OVER
    assert playing.leaderboard() == []


def test_submit_records_score_and_goes_home(playing):
    finish(playing, score=120)
    playing.submit_score('  ALEXANDERTHEGREAT ')

    assert playing.phase is GamePhase.MENU
    [entry] = playing.leaderboard()
    assert entry.name == 'ALEXANDE'
    assert entry.score == 120
    assert entry.date == datetime.date.today().isoformat()


def test_failed_save_still_goes_home(playing, tmp_path):
    blocker = tmp_path / 'not-a-dir'
    blocker.write_text('x')
    playing.store = LeaderboardStore(blocker / 'scores.json')

    finish(playing)
    playing.submit_score('ACE')

    assert playing.phase is GamePhase.MENU
    assert playing.leaderboard() == []


def test_resize_reaches_the_session(playing):
    playing.resize(WIDTH * 2, HEIGHT / 2)
    assert playing.session.width == WIDTH * 2
    assert playing.session.height == HEIGHT / 2
