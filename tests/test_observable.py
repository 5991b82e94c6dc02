"""Tests for formstate.observable — State, subscriptions, batching, streams."""

import asyncio

import pytest

from formstate.observable import Observable, State, batch


class TestState:
    def test_initial_value(self) -> None:
        state = State(1)
        assert state.value == 1

    def test_set_notifies_subscriber(self) -> None:
        state = State(1)
        seen: list[int] = []
        state.subscribe(seen.append)
        state.set(2)
        state.set(3)
        assert seen == [2, 3]

    def test_equal_value_is_conflated(self) -> None:
        state = State("a")
        seen: list[str] = []
        state.subscribe(seen.append)
        state.set("a")
        assert seen == []

    @pytest.mark.parametrize(("before", "after"), [(1, True), (0, 0.0), (False, 0)])
    def test_equal_value_of_other_type_notifies(self, before: object, after: object) -> None:
        state = State(before)
        seen: list[object] = []
        state.subscribe(seen.append)
        state.set(after)
        assert len(seen) == 1
        assert type(seen[0]) is type(after)

    def test_unsubscribe(self) -> None:
        state = State(0)
        seen: list[int] = []
        unsubscribe = state.subscribe(seen.append)
        state.set(1)
        unsubscribe()
        state.set(2)
        assert seen == [1]

    def test_unsubscribe_twice_is_harmless(self) -> None:
        state = State(0)
        unsubscribe = state.subscribe(lambda _: None)
        unsubscribe()
        unsubscribe()

    def test_satisfies_observable_protocol(self) -> None:
        assert isinstance(State(None), Observable)

    def test_repr_includes_name(self) -> None:
        assert "email.value" in repr(State("x", name="email.value"))


class TestBatch:
    def test_notifications_deferred_until_exit(self) -> None:
        a = State(0)
        b = State(0)
        observed: list[tuple[int, int]] = []
        a.subscribe(lambda _: observed.append((a.value, b.value)))

        with batch():
            a.set(1)
            assert observed == []
            b.set(2)

        # the subscriber of a already sees b's write
        assert observed == [(1, 2)]

    def test_values_visible_inside_batch(self) -> None:
        state = State(0)
        with batch():
            state.set(5)
            assert state.value == 5

    def test_single_notification_per_state(self) -> None:
        state = State(0)
        seen: list[int] = []
        state.subscribe(seen.append)
        with batch():
            state.set(1)
            state.set(2)
            state.set(3)
        assert seen == [3]

    def test_round_trip_inside_batch_is_silent(self) -> None:
        state = State("x")
        seen: list[str] = []
        state.subscribe(seen.append)
        with batch():
            state.set("y")
            state.set("x")
        assert seen == []

    def test_nested_batches_flush_once_at_outermost(self) -> None:
        state = State(0)
        seen: list[int] = []
        state.subscribe(seen.append)
        with batch():
            with batch():
                state.set(1)
            assert seen == []
        assert seen == [1]

    def test_subscriber_error_reraised_after_flush(self) -> None:
        a = State(0)
        b = State(0)
        seen: list[int] = []

        def boom(_: int) -> None:
            raise RuntimeError("subscriber failed")

        a.subscribe(boom)
        b.subscribe(seen.append)

        with pytest.raises(RuntimeError, match="subscriber failed"):
            with batch():
                a.set(1)
                b.set(2)

        assert seen == [2]


class TestStream:
    @pytest.mark.asyncio
    async def test_yields_current_then_changes(self) -> None:
        state = State("a")
        received: list[str] = []

        async def collector() -> None:
            async for value in state.stream():
                received.append(value)
                if len(received) >= 3:
                    break

        task = asyncio.create_task(collector())
        # Give the subscriber time to register
        await asyncio.sleep(0.01)

        state.set("b")
        state.set("c")

        await asyncio.wait_for(task, timeout=2.0)
        assert received == ["a", "b", "c"]

    @pytest.mark.asyncio
    async def test_close_ends_stream(self) -> None:
        state = State(0)
        received: list[int] = []

        async def collector() -> None:
            async for value in state.stream():
                received.append(value)

        task = asyncio.create_task(collector())
        await asyncio.sleep(0.01)

        state.close()
        await asyncio.wait_for(task, timeout=2.0)
        assert received == [0]

    @pytest.mark.asyncio
    async def test_none_values_are_delivered(self) -> None:
        state: State[str | None] = State("x")
        received: list[str | None] = []

        async def collector() -> None:
            async for value in state.stream():
                received.append(value)
                if len(received) >= 2:
                    break

        task = asyncio.create_task(collector())
        await asyncio.sleep(0.01)
        state.set(None)

        await asyncio.wait_for(task, timeout=2.0)
        assert received == ["x", None]
