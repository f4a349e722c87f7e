"""Tests for FavoritesCoordinator rebuild, stagger and lifecycle fan-out."""

import asyncio

import pytest

from now_departing.application.favorites_coordinator import FavoritesCoordinator
from now_departing.application.scheduler import LoopScheduler
from now_departing.domain.errors import NetworkFailure
from now_departing.domain.models import (
    ActivityMode,
    ArrivalTime,
    FavoriteEntity,
    PollIntervalPolicy,
)
from tests.fakes import (
    ControlledArrivalRepository,
    RecordingListener,
    ScriptedArrivalRepository,
    arrivals,
    favorite,
    settle,
)

BEDFORD = favorite("G", "Bedford", "N")
NASSAU = favorite("G", "Nassau Av", "S")
LORIMER = favorite("L", "Lorimer St", "N")


def target(entity: FavoriteEntity) -> tuple[str, str, str]:
    return (entity.line_id, entity.station_name, entity.direction)


class FlakyStationRepository:
    """Fails every request for one station and succeeds for the rest."""

    def __init__(self, failing_station: str) -> None:
        self.failing_station = failing_station
        self.calls: list[str] = []

    async def get_arrivals(
        self, line_id: str, station_name: str, direction: str  # noqa: ARG002
    ) -> list[ArrivalTime]:
        self.calls.append(station_name)
        if station_name == self.failing_station:
            raise NetworkFailure("unreachable")
        return arrivals(5)


class TestRebuild:
    """Tests for rebuild and stagger."""

    @pytest.mark.asyncio
    async def test_first_favorite_fetches_immediately(self) -> None:
        """Given one favorite, when rebuilding, then its first fetch happens at t=0."""
        repo = ScriptedArrivalRepository(arrivals(5))
        coordinator = FavoritesCoordinator(repo, LoopScheduler())
        start = asyncio.get_running_loop().time()

        coordinator.rebuild([BEDFORD])
        await settle()

        assert repo.calls == [target(BEDFORD)]
        assert repo.call_times[target(BEDFORD)][0] - start < 0.05
        coordinator.stop_all()

    @pytest.mark.asyncio
    async def test_second_favorite_waits_for_default_stagger(self) -> None:
        """Given two favorites, when rebuilding, then the second fetches about 0.5s later."""
        repo = ScriptedArrivalRepository(arrivals(5))
        coordinator = FavoritesCoordinator(repo, LoopScheduler())

        coordinator.rebuild([BEDFORD, NASSAU])
        await asyncio.sleep(0.3)
        assert repo.calls == [target(BEDFORD)]

        await asyncio.sleep(0.3)
        assert repo.calls == [target(BEDFORD), target(NASSAU)]
        coordinator.stop_all()

    @pytest.mark.asyncio
    async def test_each_favorite_starts_no_earlier_than_its_stagger(self) -> None:
        """Given N favorites, when rebuilding, then favorite i first fetches at or after i*S."""
        repo = ScriptedArrivalRepository(arrivals(5))
        coordinator = FavoritesCoordinator(repo, LoopScheduler(), stagger_seconds=0.05)
        favorites = [BEDFORD, NASSAU, LORIMER]
        start = asyncio.get_running_loop().time()

        coordinator.rebuild(favorites)
        await asyncio.sleep(0.2)
        coordinator.stop_all()

        for index, entity in enumerate(favorites):
            first_fetch = repo.call_times[target(entity)][0] - start
            assert first_fetch >= index * 0.05 - 0.005
            assert first_fetch < index * 0.05 + 0.05

    @pytest.mark.asyncio
    async def test_rebuild_with_same_list_creates_fresh_subscriptions(self) -> None:
        """Given an unchanged list, when rebuilding twice, then old subscriptions are stopped and replaced."""
        repo = ScriptedArrivalRepository(arrivals(5))
        coordinator = FavoritesCoordinator(repo, LoopScheduler(), stagger_seconds=0.03)

        coordinator.rebuild([BEDFORD, NASSAU])
        old = coordinator.subscriptions
        coordinator.rebuild([BEDFORD, NASSAU])
        new = coordinator.subscriptions
        await asyncio.sleep(0.08)

        assert all(o is not n for o, n in zip(old, new, strict=True))
        assert all(not s.feed.is_running for s in old)
        assert not old[1].has_started
        assert all(s.feed.is_running for s in new)
        assert repo.calls.count(target(NASSAU)) == 1
        coordinator.stop_all()

    @pytest.mark.asyncio
    async def test_results_from_replaced_subscriptions_are_not_published(self) -> None:
        """Given a fetch in flight, when the list is rebuilt, then its late result is not published."""
        repo = ControlledArrivalRepository()
        coordinator = FavoritesCoordinator(repo, LoopScheduler())
        listener = RecordingListener()
        coordinator.add_listener(listener)

        coordinator.rebuild([BEDFORD])
        await settle()
        coordinator.rebuild([BEDFORD])
        await settle()
        listener.row_changes.clear()

        repo.resolve(0, arrivals(1))
        await settle()
        assert listener.row_changes == []

        repo.resolve(1, arrivals(7))
        await settle()
        assert [(i, r.display_text) for i, r in listener.row_changes] == [(0, "7m")]
        coordinator.stop_all()

    @pytest.mark.asyncio
    async def test_rebuild_never_overlaps_fetches_for_the_same_favorite(self) -> None:
        """Given a fetch in flight, when rebuilding with the same favorite, then the new fetch waits for it."""
        repo = ControlledArrivalRepository()
        coordinator = FavoritesCoordinator(repo, LoopScheduler())

        coordinator.rebuild([BEDFORD])
        await settle()
        coordinator.rebuild([BEDFORD])
        await settle()

        assert len(repo.calls) == 1
        assert coordinator.view_records()[0].should_show_loader

        repo.resolve(0, arrivals(1))
        await settle()
        assert len(repo.calls) == 2
        assert repo.max_in_flight == 1

        repo.resolve(1, arrivals(6))
        await settle()
        assert coordinator.view_records()[0].display_text == "6m"
        coordinator.stop_all()

    @pytest.mark.asyncio
    async def test_listener_sees_rebuild_then_row_updates(self) -> None:
        """Given a listener, when rebuilding, then it gets loader rows first and then per-row updates."""
        repo = ScriptedArrivalRepository(arrivals(5))
        coordinator = FavoritesCoordinator(repo, LoopScheduler(), stagger_seconds=0.02)
        listener = RecordingListener()
        coordinator.add_listener(listener)

        coordinator.rebuild([BEDFORD, NASSAU])
        await asyncio.sleep(0.05)

        assert len(listener.rebuilds) == 1
        assert [r.entity for r in listener.rebuilds[0]] == [BEDFORD, NASSAU]
        assert all(r.should_show_loader for r in listener.rebuilds[0])
        final = {index: record.display_text for index, record in listener.row_changes}
        assert final == {0: "5m", 1: "5m"}
        assert [r.display_text for r in coordinator.view_records()] == ["5m", "5m"]
        coordinator.stop_all()

    @pytest.mark.asyncio
    async def test_failing_listener_does_not_break_others(self) -> None:
        """Given a listener that raises, when publishing, then the other listeners still get events."""

        class BrokenListener:
            def on_list_rebuilt(self, records) -> None:  # noqa: ANN001
                raise RuntimeError("render failed")

            def on_row_changed(self, index, record) -> None:  # noqa: ANN001
                raise RuntimeError("render failed")

        repo = ScriptedArrivalRepository(arrivals(5))
        coordinator = FavoritesCoordinator(repo, LoopScheduler())
        listener = RecordingListener()
        coordinator.add_listener(BrokenListener())
        coordinator.add_listener(listener)

        coordinator.rebuild([BEDFORD])
        await settle()

        assert len(listener.rebuilds) == 1
        assert listener.row_changes[-1][1].display_text == "5m"
        coordinator.remove_listener(listener)
        coordinator.stop_all()

    @pytest.mark.asyncio
    async def test_failing_favorite_does_not_stop_others(self) -> None:
        """Given one favorite that always fails, when polling, then others still update and it retries."""
        repo = FlakyStationRepository(failing_station="Nassau Av")
        coordinator = FavoritesCoordinator(
            repo,
            LoopScheduler(),
            policy=PollIntervalPolicy(0.02, 0.02),
            stagger_seconds=0.01,
        )

        coordinator.rebuild([BEDFORD, NASSAU])
        await asyncio.sleep(0.08)
        records = coordinator.view_records()
        coordinator.stop_all()

        assert records[0].display_text == "5m"
        assert records[1].display_text == "--"
        assert records[1].shows_error
        assert repo.calls.count("Nassau Av") >= 2


class TestLifecycle:
    """Tests for activity mode, resume and stop."""

    @pytest.mark.asyncio
    async def test_activity_mode_reaches_existing_and_new_subscriptions(self) -> None:
        """Given subscriptions, when the mode changes, then existing and rebuilt ones use it."""
        coordinator = FavoritesCoordinator(ScriptedArrivalRepository(), LoopScheduler())
        coordinator.rebuild([BEDFORD])

        coordinator.set_activity_mode(ActivityMode.BACKGROUND)
        assert coordinator.subscriptions[0].feed.activity_mode is ActivityMode.BACKGROUND

        coordinator.rebuild([BEDFORD, NASSAU])
        assert all(
            s.activity_mode is ActivityMode.BACKGROUND
            and s.feed.activity_mode is ActivityMode.BACKGROUND
            for s in coordinator.subscriptions
        )
        await settle()
        coordinator.stop_all()

    @pytest.mark.asyncio
    async def test_resume_all_restarts_only_stopped_feeds(self) -> None:
        """Given stopped feeds, when resuming, then each restarts without delay."""
        repo = ScriptedArrivalRepository(arrivals(5))
        coordinator = FavoritesCoordinator(repo, LoopScheduler(), stagger_seconds=0.01)
        coordinator.rebuild([BEDFORD, NASSAU])
        await asyncio.sleep(0.03)
        assert len(repo.calls) == 2

        coordinator.resume_all()
        await settle()
        assert len(repo.calls) == 2

        coordinator.stop_all()
        assert not any(s.feed.is_running for s in coordinator.subscriptions)
        assert len(coordinator.subscriptions) == 2

        coordinator.resume_all()
        await settle()
        assert all(s.feed.is_running for s in coordinator.subscriptions)
        assert len(repo.calls) == 4
        coordinator.stop_all()

    @pytest.mark.asyncio
    async def test_resume_all_skips_remaining_stagger(self) -> None:
        """Given a favorite still waiting for its stagger, when resuming, then it starts now."""
        repo = ScriptedArrivalRepository(arrivals(5))
        coordinator = FavoritesCoordinator(repo, LoopScheduler(), stagger_seconds=1.0)

        coordinator.rebuild([BEDFORD, NASSAU])
        coordinator.resume_all()
        await settle()

        assert repo.calls == [target(BEDFORD), target(NASSAU)]
        coordinator.stop_all()

    def test_empty_coordinator(self) -> None:
        """Given no rebuild yet, then the coordinator is empty."""
        coordinator = FavoritesCoordinator(ScriptedArrivalRepository(), LoopScheduler())

        assert coordinator.is_empty
        assert coordinator.view_records() == []
