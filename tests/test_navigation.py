from __future__ import annotations

import copy
import itertools
import random
from typing import Any, Callable, Dict

import pytest

from history_engine import create_history


def append_item(value: int) -> Callable[[Dict[str, Any]], None]:
    def edit(draft: Dict[str, Any]) -> None:
        draft["items"].append(value)

    return edit


def drop_last(draft: Dict[str, Any]) -> None:
    del draft["items"][-1:]


def set_count(value: int) -> Callable[[Dict[str, Any]], None]:
    def edit(draft: Dict[str, Any]) -> None:
        draft["n"] = value

    return edit


def make_edit(rng: random.Random, value: int) -> Any:
    kind = rng.randrange(4)
    if kind == 0:
        return append_item(value)
    if kind == 1:
        return drop_last
    if kind == 2:
        return set_count(value)
    return {"n": value, "items": [value]}


@pytest.mark.parametrize("mutable", [False, True])
@pytest.mark.parametrize("auto_archive", [True, False])
def test_go_matches_replayed_history(auto_archive: bool, mutable: bool) -> None:
    rng = random.Random(1000 + 2 * auto_archive + mutable)
    values = itertools.count(1)
    history = create_history(
        {"n": 0, "items": []},
        max_history=4,
        auto_archive=auto_archive,
        mutable=mutable,
    )
    live = history.get_state()

    for _ in range(300):
        roll = rng.random()
        if roll < 0.45:
            history.set_state(make_edit(rng, next(values)))
        elif roll < 0.55 and not auto_archive:
            before = copy.deepcopy(history.get_state())
            had_pending = history.can_archive()
            history.archive()
            assert not history.can_archive()
            assert history.get_state() == before
            if had_pending:
                history.back()
                history.forward()
                assert history.get_state() == before
        else:
            expected = copy.deepcopy(history.get_history())
            target = rng.randrange(len(expected))
            history.go(target)
            assert history.get_position() == target
            assert history.get_state() == expected[target]

        assert len(history.get_history()) == len(history.get_patches()) + 1
        assert history.get_history()[history.get_position()] == history.get_state()
        assert history.get_position() <= 4
        if mutable:
            assert history.get_state() is live


@pytest.mark.parametrize("mutable", [False, True])
@pytest.mark.parametrize("auto_archive", [True, False])
def test_each_edit_round_trips(auto_archive: bool, mutable: bool) -> None:
    rng = random.Random(2000 + 2 * auto_archive + mutable)
    values = itertools.count(1)
    history = create_history(
        {"n": 0, "items": []}, auto_archive=auto_archive, mutable=mutable
    )

    for _ in range(50):
        before = copy.deepcopy(history.get_state())
        position = history.get_position()
        history.set_state(make_edit(rng, next(values)))
        if history.get_position() == position and history.get_state() == before:
            continue
        after = copy.deepcopy(history.get_state())

        history.back()
        assert history.get_state() == before
        history.forward()
        assert history.get_state() == after
