"""
Tests for the session coordinator.

Critical tests:
1. Celebration fires exactly once per round
2. Reopening rehydrates every acknowledged mutation
3. Timer tick and picker delay never run twice at once
4. Storage failure never aborts a mutation
"""

import json
import os
import random
import tempfile

from standup.coordinator import CELEBRATION_NOTICE, PickerPhase, SessionCoordinator
from standup.core.clock import ManualClock
from standup.core.errors import DuplicateError, EmptyPoolError, ValidationError
from standup.core.models import TimerState
from standup.roster import DEFAULT_ROSTER
from standup.scheduling import ManualScheduler
from standup.store import TIMER_DURATION_KEY, TIMER_END_KEY, FileStore, MemoryStore

T0 = 1_700_000_000_000
MINUTE = 60_000
NAMES = [(p.first_name, p.last_name) for p in DEFAULT_ROSTER]


def _open(backend=None, clock=None, seed=7):
    clock = clock or ManualClock(T0)
    scheduler = ManualScheduler(clock)
    renders = []
    coordinator = SessionCoordinator(
        backend if backend is not None else MemoryStore(),
        clock=clock,
        rng=random.Random(seed),
        scheduler=scheduler,
        on_render=renders.append,
    )
    coordinator.open()
    return coordinator, scheduler, renders


def _speak_all(coordinator):
    return [coordinator.toggle_participant(name) for name in NAMES]


def test_open_renders_default_roster():
    coordinator, _, renders = _open()

    view = renders[-1]
    assert view.roster == DEFAULT_ROSTER
    assert view.spoken_counter == "0/5"
    assert view.timer.state == TimerState.IDLE
    assert view.picker_phase == PickerPhase.CLOSED
    assert not view.degraded


def test_celebration_fires_once_per_round():
    coordinator, _, _ = _open()

    views = _speak_all(coordinator)
    assert [v.celebrate for v in views] == [False, False, False, False, True]
    assert views[-1].notice == CELEBRATION_NOTICE

    # Toggling back and forth does not celebrate again
    assert not coordinator.toggle_participant(NAMES[0]).celebrate
    assert not coordinator.toggle_participant(NAMES[0]).celebrate

    coordinator.reset_round()
    views = _speak_all(coordinator)
    assert sum(v.celebrate for v in views) == 1


def test_adding_participant_reopens_the_round():
    coordinator, _, _ = _open()
    _speak_all(coordinator)

    outcome = coordinator.add_participant("Ada", "Lovelace")
    assert outcome.ok
    assert outcome.unwrap().notice == "Ada Lovelace added"

    assert coordinator.toggle_participant(("Ada", "Lovelace")).celebrate


def test_removing_last_unspoken_participant_celebrates():
    coordinator, _, _ = _open()
    for name in NAMES[:-1]:
        coordinator.toggle_participant(name)

    view = coordinator.remove_participant(NAMES[-1])

    assert view.celebrate
    assert view.spoken_counter == "4/4"


def test_reopening_a_finished_round_does_not_celebrate():
    backend = MemoryStore()
    coordinator, _, _ = _open(backend)
    _speak_all(coordinator)
    coordinator.close()

    reopened, _, renders = _open(backend)

    assert renders[-1].spoken_counter == "5/5"
    assert not renders[-1].celebrate
    reopened.toggle_participant(NAMES[0])
    assert not reopened.toggle_participant(NAMES[0]).celebrate


def test_reopen_observes_every_acknowledged_mutation():
    backend = MemoryStore()
    coordinator, _, _ = _open(backend)
    coordinator.add_participant("Ada", "Lovelace")
    coordinator.toggle_participant(("ada", "lovelace"))
    coordinator.shuffle_roster()
    coordinator.add_backlog_item("Retro format")
    roster = coordinator.view().roster
    coordinator.close()

    reopened, _, _ = _open(backend)

    assert reopened.view().roster == roster
    assert [item.text for item in reopened.view().backlog] == ["Retro format"]


def test_add_failures_carry_messages():
    coordinator, _, renders = _open()
    before = len(renders)

    duplicate = coordinator.add_participant("jane", "DOE")
    invalid = coordinator.add_participant("", "X")

    assert isinstance(duplicate.error, DuplicateError)
    assert duplicate.message == "This user already exists in the list"
    assert isinstance(invalid.error, ValidationError)
    assert len(renders) == before


def test_import_and_export():
    coordinator, _, _ = _open()

    bad_json = coordinator.import_roster("{oops")
    assert bad_json.message == "Error parsing JSON file."

    malformed = coordinator.import_roster('[{"firstName": "Ada"}]')
    assert isinstance(malformed.error, ValidationError)
    assert coordinator.view().roster == DEFAULT_ROSTER

    payload = json.dumps([
        {"firstName": "Ada", "lastName": "Lovelace", "spoken": True},
        {"firstName": "Alan", "lastName": "Turing"},
    ])
    view = coordinator.import_roster(payload).unwrap()
    assert view.notice == "Team list imported successfully"
    assert view.spoken_counter == "0/2"

    coordinator.toggle_participant(("Alan", "Turing"))
    exported = coordinator.export_roster()
    assert exported.startswith("[\n  {")
    assert json.loads(exported) == [
        {"firstName": "Ada", "lastName": "Lovelace", "spoken": False},
        {"firstName": "Alan", "lastName": "Turing", "spoken": True},
    ]


def test_import_after_celebration_starts_new_round():
    coordinator, _, _ = _open()
    _speak_all(coordinator)

    coordinator.import_roster([{"firstName": "Ada", "lastName": "Lovelace"}])

    assert coordinator.toggle_participant(("Ada", "Lovelace")).celebrate


def test_timer_ticks_until_expired():
    coordinator, scheduler, renders = _open()

    view = coordinator.start_timer(1).unwrap()
    assert view.timer.display == "01:00"
    assert len(scheduler.pending()) == 1

    before = len(renders)
    scheduler.advance(30_000)
    assert len(renders) - before == 30
    assert renders[-1].timer.display == "00:30"

    scheduler.advance(30_000)
    assert renders[-1].timer.state == TimerState.EXPIRED
    assert renders[-1].timer.display == "00:00"
    assert scheduler.pending() == []


def test_restarting_timer_keeps_a_single_tick():
    coordinator, scheduler, _ = _open()

    coordinator.start_timer(5)
    coordinator.start_timer(3)

    assert len(scheduler.pending()) == 1
    coordinator.stop_timer()
    assert scheduler.pending() == []
    assert coordinator.view().timer.state == TimerState.IDLE


def test_start_timer_rejects_invalid_minutes():
    coordinator, scheduler, _ = _open()

    outcome = coordinator.start_timer(0)

    assert isinstance(outcome.error, ValidationError)
    assert scheduler.pending() == []


def test_open_resumes_running_timer():
    backend = MemoryStore({TIMER_END_KEY: str(T0 + 2 * MINUTE), TIMER_DURATION_KEY: str(5 * MINUTE)})

    coordinator, scheduler, renders = _open(backend)

    assert renders[-1].timer.state == TimerState.RUNNING
    assert renders[-1].timer.display == "02:00"
    assert len(scheduler.pending()) == 1


def test_open_shows_recently_expired_timer_without_ticking():
    backend = MemoryStore({TIMER_END_KEY: str(T0 - 30 * MINUTE), TIMER_DURATION_KEY: str(5 * MINUTE)})

    _, scheduler, renders = _open(backend)

    assert renders[-1].timer.state == TimerState.EXPIRED
    assert scheduler.pending() == []


def test_open_discards_stale_timer():
    backend = MemoryStore({TIMER_END_KEY: str(T0 - 120 * MINUTE), TIMER_DURATION_KEY: str(5 * MINUTE)})

    _, _, renders = _open(backend)

    assert renders[-1].timer.state == TimerState.IDLE
    assert backend.get(TIMER_END_KEY) is None


def test_picker_spins_finishes_and_commits():
    coordinator, scheduler, _ = _open()

    view = coordinator.run_picker().unwrap()
    winner = view.pick.winner
    assert view.picker_phase == PickerPhase.SPINNING
    assert not winner.spoken

    scheduler.advance(4049)
    assert coordinator.view().picker_phase == PickerPhase.SPINNING
    scheduler.advance(1)
    assert coordinator.view().picker_phase == PickerPhase.FINISHED

    committed = coordinator.commit_picker_winner().unwrap()
    assert committed.notice == f"{winner.first_name} marked as spoken"
    assert committed.pick is None
    assert committed.picker_phase == PickerPhase.CLOSED
    assert committed.spoken_counter == "1/5"
    assert coordinator.roster.get(winner.identity).spoken


def test_new_pick_cancels_pending_finish():
    coordinator, scheduler, _ = _open()

    coordinator.run_picker()
    coordinator.run_picker()

    assert len(scheduler.pending()) == 1


def test_closing_picker_has_no_side_effects():
    coordinator, scheduler, _ = _open()
    coordinator.run_picker()

    view = coordinator.close_picker()

    assert view.pick is None
    assert view.spoken_counter == "0/5"
    assert scheduler.pending() == []
    assert isinstance(coordinator.commit_picker_winner().error, ValidationError)


def test_picker_on_finished_round():
    coordinator, _, _ = _open()
    _speak_all(coordinator)

    outcome = coordinator.run_picker()

    assert isinstance(outcome.error, EmptyPoolError)
    assert outcome.message == "Everyone has already spoken!"
    assert coordinator.view().pick is None


def test_commit_after_winner_was_removed():
    coordinator, _, _ = _open()
    winner = coordinator.run_picker().unwrap().pick.winner
    coordinator.remove_participant((winner.first_name, winner.last_name))

    outcome = coordinator.commit_picker_winner()

    assert isinstance(outcome.error, ValidationError)
    assert coordinator.view().picker_phase == PickerPhase.CLOSED


def test_picker_commit_completing_round_celebrates():
    coordinator, _, _ = _open()
    for name in NAMES[:-1]:
        coordinator.toggle_participant(name)

    coordinator.run_picker()
    view = coordinator.commit_picker_winner().unwrap()

    assert view.celebrate
    assert view.spoken_counter == "5/5"


def test_missing_store_degrades_but_works():
    coordinator = SessionCoordinator(None, clock=ManualClock(T0))
    coordinator.open()

    view = coordinator.add_participant("Ada", "Lovelace").unwrap()

    assert view.degraded
    assert len(view.roster) == 6


def test_backlog_operations_and_notices():
    coordinator, _, _ = _open()

    view = coordinator.add_backlog_item("Deploy freeze").unwrap()
    assert view.notice == '"Deploy freeze" added to Part B'
    item_id = view.backlog[0].id

    assert coordinator.clear_completed_backlog().notice == "No completed items to clear"
    assert coordinator.toggle_backlog_item(item_id).backlog_counter == "1/1"
    assert coordinator.clear_completed_backlog().notice == "1 completed item(s) cleared"

    coordinator.add_backlog_item("Hiring")
    item_id = coordinator.view().backlog[0].id
    assert coordinator.remove_backlog_item(item_id).notice == '"Hiring" removed from Part B'
    assert isinstance(coordinator.add_backlog_item("").error, ValidationError)


def test_search_and_stepper():
    coordinator, _, _ = _open()

    assert [p.first_name for p in coordinator.search_roster("brown")] == ["Charlie"]
    assert coordinator.step_timer_minutes("10", 1) == 15
    assert coordinator.step_timer_minutes("1", -1) == 1


def test_truncated_store_file_recovers_on_first_write():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = os.path.join(tmpdir, "store.json")
        with open(path, "w") as f:
            f.write("{trunc")

        coordinator, _, renders = _open(FileStore(path))
        assert renders[-1].roster == DEFAULT_ROSTER
        assert not renders[-1].degraded

        coordinator.add_participant("Ada", "Lovelace")
        coordinator.close()

        _, _, renders = _open(FileStore(path))
        assert renders[-1].roster[-1].full_name == "Ada Lovelace"
        assert not renders[-1].degraded
