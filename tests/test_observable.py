from portal.core.observable import EventChannel, ValueStream


class TestValueStream:
    def test_subscriber_gets_current_value_then_updates(self):
        stream = ValueStream("a")
        seen = []

        stream.subscribe(seen.append)
        stream.next("b")
        stream.next("c")

        assert seen == ["a", "b", "c"]

    def test_subscribe_without_replay(self):
        stream = ValueStream(1)
        seen = []

        stream.subscribe(seen.append, replay=False)
        stream.next(2)

        assert seen == [2]

    def test_unsubscribe_stops_delivery(self):
        stream = ValueStream(0)
        seen = []

        unsubscribe = stream.subscribe(seen.append)
        unsubscribe()
        stream.next(1)

        assert seen == [0]
        # second call is harmless
        unsubscribe()

    def test_read_only_view_has_no_setter(self):
        stream = ValueStream("x")
        view = stream.as_observable()

        assert view.first() == "x"
        assert not hasattr(view, "next")

        stream.next("y")
        assert view.value == "y"

    def test_value_emitted_from_subscriber_is_delivered_after_current(self):
        stream = ValueStream(0)
        first_seen = []
        second_seen = []

        def first(value):
            first_seen.append(value)
            if value == 1:
                stream.next(2)

        stream.subscribe(first, replay=False)
        stream.subscribe(second_seen.append, replay=False)
        stream.next(1)

        # every subscriber sees 1 before anyone sees 2
        assert first_seen == [1, 2]
        assert second_seen == [1, 2]
        assert stream.value == 2

    def test_failing_subscriber_does_not_block_others(self):
        stream = ValueStream(0)
        seen = []

        def broken(value):
            raise RuntimeError("boom")

        stream.subscribe(broken, replay=False)
        stream.subscribe(seen.append, replay=False)
        stream.next(5)

        assert seen == [5]


class TestEventChannel:
    def test_events_are_not_replayed(self):
        channel = EventChannel()
        channel.publish("early")
        seen = []

        channel.subscribe(seen.append)
        channel.publish("late")

        assert seen == ["late"]

    def test_same_event_twice_is_delivered_twice(self):
        channel = EventChannel()
        seen = []

        channel.subscribe(seen.append)
        channel.publish("refresh")
        channel.publish("refresh")

        assert seen == ["refresh", "refresh"]
