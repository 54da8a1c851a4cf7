# File: tests/test_frontier.py
"""Frontier bookkeeping and the actor's scheduling / termination rules.

The actor is driven by hand here: the test plays the worker, taking URLs off
the dispatch queue and sending reports.
"""
from __future__ import annotations

import asyncio

import pytest

from sitecrawl.crawler.frontier import Frontier, FrontierActor
from sitecrawl.crawler.models import Report, Schedule

SEED = "http://x.test"


async def settle(rounds: int = 20) -> None:
    """Give the actor a chance to drain its inbox."""
    for _ in range(rounds):
        await asyncio.sleep(0)


def drain(queue: asyncio.Queue) -> list:
    items = []
    while not queue.empty():
        items.append(queue.get_nowait())
    return items


def make_actor(capacity: int = 2):
    dispatch: asyncio.Queue = asyncio.Queue(maxsize=capacity)
    actor = FrontierActor(SEED, dispatch, capacity)
    return actor, dispatch


# --------------------------------------------------------------------------- #
#                                   Frontier                                  #
# --------------------------------------------------------------------------- #


def test_frontier_add_and_dispatch_in_discovery_order():
    frontier = Frontier()
    assert frontier.add("u1")
    assert frontier.add("u2")
    assert not frontier.add("u1")
    assert len(frontier) == 2
    assert frontier.has_unvisited

    assert frontier.next_unvisited() == "u1"
    assert frontier.snapshot() == {"u1": True, "u2": False}
    assert frontier.next_unvisited() == "u2"
    assert frontier.next_unvisited() is None
    assert not frontier.has_unvisited


def test_frontier_never_redispatches_known_url():
    frontier = Frontier()
    frontier.add("u1")
    frontier.next_unvisited()
    assert not frontier.add("u1")
    assert frontier.next_unvisited() is None
    assert "u1" in frontier
    assert list(frontier) == ["u1"]


def test_actor_rejects_zero_capacity():
    with pytest.raises(ValueError):
        FrontierActor(SEED, asyncio.Queue(), 0)


# --------------------------------------------------------------------------- #
#                                    Actor                                    #
# --------------------------------------------------------------------------- #


@pytest.mark.asyncio()
async def test_seed_is_dispatched_first():
    actor, dispatch = make_actor()
    task = asyncio.create_task(actor.run())
    await settle()

    assert drain(dispatch) == [SEED]
    assert actor.in_flight == 1
    assert actor.snapshot() == {SEED: True}

    actor.report(SEED, [])
    await asyncio.wait_for(task, 1)
    assert actor.done


@pytest.mark.asyncio()
async def test_in_flight_never_exceeds_capacity():
    actor, dispatch = make_actor(capacity=2)
    task = asyncio.create_task(actor.run())
    await settle()
    drain(dispatch)

    actor.report(SEED, [f"{SEED}/p{i}" for i in range(5)])
    await settle()
    assert drain(dispatch) == [f"{SEED}/p0", f"{SEED}/p1"]
    assert actor.in_flight == 2

    actor.report(f"{SEED}/p0", [])
    await settle()
    assert drain(dispatch) == [f"{SEED}/p2"]
    assert actor.in_flight == 2

    for url in (f"{SEED}/p1", f"{SEED}/p2"):
        actor.report(url, [])
    await settle()
    assert drain(dispatch) == [f"{SEED}/p3", f"{SEED}/p4"]

    actor.report(f"{SEED}/p3", [])
    actor.report(f"{SEED}/p4", [])
    await asyncio.wait_for(task, 1)
    assert actor.stats.peak_in_flight == 2
    assert actor.in_flight == 0


@pytest.mark.asyncio()
async def test_no_termination_while_a_worker_is_in_flight():
    actor, dispatch = make_actor()
    task = asyncio.create_task(actor.run())
    await settle()
    drain(dispatch)

    # nothing unvisited, but the seed is still being fetched
    actor.send(Schedule())
    await settle()
    assert not actor.done
    assert not task.done()

    actor.report(SEED, [f"{SEED}/late"])
    await settle()
    assert drain(dispatch) == [f"{SEED}/late"]
    assert not actor.done

    actor.report(f"{SEED}/late", [])
    await asyncio.wait_for(task, 1)
    assert actor.snapshot() == {SEED: True, f"{SEED}/late": True}


@pytest.mark.asyncio()
async def test_duplicate_discoveries_are_merged():
    actor, dispatch = make_actor()
    task = asyncio.create_task(actor.run())
    await settle()
    drain(dispatch)

    actor.report(SEED, [f"{SEED}/a", SEED, f"{SEED}/a"])
    await settle()
    assert drain(dispatch) == [f"{SEED}/a"]

    actor.report(f"{SEED}/a", [SEED, f"{SEED}/a"])
    await asyncio.wait_for(task, 1)
    assert actor.snapshot() == {SEED: True, f"{SEED}/a": True}


@pytest.mark.asyncio()
async def test_termination_closes_dispatch_queue():
    actor, dispatch = make_actor(capacity=3)
    task = asyncio.create_task(actor.run())
    await settle()
    drain(dispatch)

    actor.report(SEED, [])
    await asyncio.wait_for(task, 1)
    assert drain(dispatch) == [None, None, None]


@pytest.mark.asyncio()
async def test_failures_are_counted():
    actor, dispatch = make_actor()
    task = asyncio.create_task(actor.run())
    await settle()
    drain(dispatch)

    actor.report(SEED, [f"{SEED}/a"])
    await settle()
    assert drain(dispatch) == [f"{SEED}/a"]
    actor.report(f"{SEED}/a", [], ok=False)
    await asyncio.wait_for(task, 1)
    assert actor.stats.pages == 2
    assert actor.stats.failed == [f"{SEED}/a"]


@pytest.mark.asyncio()
async def test_bad_message_does_not_stop_the_actor(crawl_log):
    actor, dispatch = make_actor()
    actor.send("not a message")
    task = asyncio.create_task(actor.run())
    await settle()

    assert not task.done()
    assert drain(dispatch) == [SEED]
    assert any("cannot handle" in r.getMessage() for r in crawl_log.records)

    actor.send(Report(SEED))
    await asyncio.wait_for(task, 1)
    assert actor.snapshot() == {SEED: True}


@pytest.mark.asyncio()
async def test_close_waits_for_room_on_dispatch_queue():
    actor, dispatch = make_actor(capacity=1)
    task = asyncio.create_task(actor.run())
    await settle()

    # the seed is reported while it still sits on the queue
    actor.report(SEED, [])
    await settle()
    assert not task.done()
    assert not actor.done

    assert drain(dispatch) == [SEED]
    await asyncio.wait_for(actor.wait(), 1)
    await asyncio.wait_for(task, 1)
    assert drain(dispatch) == [None]


class ClosedQueue(asyncio.Queue):
    async def put(self, item):
        raise RuntimeError("dispatch queue closed")


@pytest.mark.asyncio()
async def test_done_is_set_even_if_close_fails():
    dispatch = ClosedQueue(maxsize=2)
    actor = FrontierActor(SEED, dispatch, 2)
    task = asyncio.create_task(actor.run())
    await settle()
    drain(dispatch)

    actor.report(SEED, [])
    with pytest.raises(RuntimeError):
        await asyncio.wait_for(task, 1)
    assert actor.done
    await asyncio.wait_for(actor.wait(), 1)
