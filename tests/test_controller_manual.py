from __future__ import annotations

from typing import Any, Dict

from history_engine import HistoryController, create_history


def make_manual(initial: Any = None, **options: Any) -> HistoryController:
    return create_history({"n": 0} if initial is None else initial, auto_archive=False, **options)


def bump(draft: Dict[str, int]) -> None:
    draft["n"] += 1


def test_batch_is_one_undoable_step() -> None:
    history = make_manual()

    history.set_state(bump)
    assert history.get_position() == 1
    history.set_state(bump)
    history.set_state(bump)

    assert history.get_state() == {"n": 3}
    assert history.get_position() == 1
    assert len(history.get_patches()) == 1
    assert history.can_archive()
    assert not history.can_forward()

    history.archive()

    assert not history.can_archive()
    assert len(history.get_patches()) == 1
    assert history.get_position() == 1

    history.back()
    assert history.get_state() == {"n": 0}
    history.forward()
    assert history.get_state() == {"n": 3}


def test_pending_batch_is_visible_in_history() -> None:
    history = make_manual()
    history.set_state(bump)
    history.set_state(bump)

    assert history.get_history() == ({"n": 0}, {"n": 2})


def test_navigation_archives_pending_first() -> None:
    history = make_manual()
    history.set_state(bump)
    history.set_state(bump)

    history.back()

    assert history.get_state() == {"n": 0}
    assert not history.can_archive()
    assert history.can_forward()
    assert len(history.get_patches()) == 1


def test_archive_without_pending_is_silent() -> None:
    history = make_manual()
    notified = []
    history.subscribe(lambda value, patches, position: notified.append(position))

    history.archive()

    assert notified == []
    assert history.get_position() == 0


def test_edit_after_back_truncates_committed_and_pending() -> None:
    history = make_manual(0)
    history.set_state(1)
    history.archive()
    history.set_state(2)
    history.archive()
    history.back()

    history.set_state(5)
    assert history.get_position() == 2
    history.set_state(6)
    assert history.get_position() == 2
    history.archive()

    assert history.get_history() == (0, 1, 6)


def test_archives_at_capacity_keep_window() -> None:
    history = make_manual(0, max_history=2)
    for value in range(1, 5):
        history.set_state(value)
        history.set_state(value * 10)
        history.archive()

    assert history.get_position() == 2
    assert len(history.get_patches()) == 2
    assert history.get_history() == (20, 30, 40)


def test_pending_at_capacity_keeps_first_edit() -> None:
    history = make_manual(0, max_history=2)
    for value in (1, 2):
        history.set_state(value)
        history.archive()

    history.set_state(3)
    history.set_state(4)

    assert history.get_position() == 2
    assert history.get_history() == (1, 2, 4)

    history.archive()
    history.back()
    assert history.get_state() == 2


def test_mutable_batch_navigates_in_place() -> None:
    state = {"n": 0}
    history = make_manual(state, mutable=True)

    history.set_state(bump)
    history.set_state(bump)
    assert history.get_state() is state

    history.archive()
    history.back()
    assert history.get_state() is state
    assert state == {"n": 0}

    history.forward()
    assert history.get_state() is state
    assert state == {"n": 2}


def test_zero_capacity_discards_archived_batch() -> None:
    history = make_manual(0, max_history=0)

    history.set_state(1)
    history.set_state(2)

    assert history.can_archive()
    assert history.get_position() == 0
    assert len(history.get_patches()) == 0
    assert history.get_history() == (2,)

    history.archive()

    assert not history.can_archive()
    assert not history.can_back()
    assert len(history.get_patches()) == 0
    assert history.get_state() == 2

    history.reset()
    assert history.get_state() == 0
