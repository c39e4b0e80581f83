"""Tests for the AsyncResponse task tracker."""

import pytest

from hrxml.async_response import AsyncResponse


class TestPoke:
    def test_delegates_to_transport(self, fake_ua, upper_decoder):
        tracker = AsyncResponse(fake_ua, upper_decoder)
        tracker.poke()
        tracker.poke()
        assert fake_ua.pokes == 2

    def test_propagates_transport_errors(self, upper_decoder):
        class BrokenUA:
            def poke(self):
                raise ConnectionError("socket gone")

        tracker = AsyncResponse(BrokenUA(), upper_decoder)
        with pytest.raises(ConnectionError):
            tracker.poke()


class TestHasResponse:
    def test_false_while_pending(self, fake_ua, upper_decoder):
        fake_ua.submit("a")
        tracker = AsyncResponse(fake_ua, upper_decoder)
        assert tracker.has_response() is False

    def test_true_once_completed(self, fake_ua, upper_decoder):
        request_id = fake_ua.submit("a")
        fake_ua.complete(request_id)
        tracker = AsyncResponse(fake_ua, upper_decoder)
        assert tracker.has_response() is True

    def test_pokes_as_side_effect(self, fake_ua, upper_decoder):
        AsyncResponse(fake_ua, upper_decoder).has_response()
        assert fake_ua.pokes == 1


class TestIsComplete:
    def test_empty_transport(self, fake_ua, upper_decoder):
        assert AsyncResponse(fake_ua, upper_decoder).is_complete() is True

    def test_pending_request(self, fake_ua, upper_decoder):
        fake_ua.submit("a")
        assert AsyncResponse(fake_ua, upper_decoder).is_complete() is False

    def test_completed_but_unread(self, fake_ua, upper_decoder):
        fake_ua.complete(fake_ua.submit("a"))
        tracker = AsyncResponse(fake_ua, upper_decoder)
        assert tracker.is_complete() is False
        tracker.await_response()
        assert tracker.is_complete() is True


class TestAwaitResponse:
    def test_returns_resource_id_and_decoded_result(self, fake_ua, upper_decoder):
        id_a = fake_ua.submit("resume a")
        id_b = fake_ua.submit("resume b")
        tracker = AsyncResponse(fake_ua, upper_decoder, {id_a: "A", id_b: "B"})

        first = tracker.await_response()
        second = tracker.await_response()
        third = tracker.await_response()

        assert {first, second} == {("RESUME A", "A"), ("RESUME B", "B")}
        assert third == (None, None)

    def test_completion_order_wins(self, fake_ua, upper_decoder):
        id_a = fake_ua.submit("a")
        id_b = fake_ua.submit("b")
        fake_ua.complete(id_b)
        tracker = AsyncResponse(fake_ua, upper_decoder, {id_a: "A", id_b: "B"})

        assert tracker.await_response() == ("B", "B")
        assert tracker.await_response() == ("A", "A")

    def test_falls_back_to_transport_id(self, fake_ua, upper_decoder):
        fake_ua._next_id = 42
        fake_ua.submit("anonymous")
        tracker = AsyncResponse(fake_ua, upper_decoder)

        assert tracker.await_response() == ("ANONYMOUS", 42)

    def test_nothing_outstanding(self, fake_ua, upper_decoder):
        tracker = AsyncResponse(fake_ua, upper_decoder)
        assert tracker.await_response() == (None, None)
        assert tracker.last_await_id is None

    def test_records_last_await_id(self, fake_ua, upper_decoder):
        request_id = fake_ua.submit("a")
        tracker = AsyncResponse(fake_ua, upper_decoder, {request_id: "doc-1"})
        tracker.await_response()
        assert tracker.last_await_id == "doc-1"

    def test_last_await_id_survives_empty_await(self, fake_ua, upper_decoder):
        request_id = fake_ua.submit("a")
        tracker = AsyncResponse(fake_ua, upper_decoder, {request_id: "doc-1"})
        tracker.await_response()
        tracker.await_response()
        assert tracker.last_await_id == "doc-1"

    def test_evicts_consumed_entries(self, fake_ua, upper_decoder):
        id_a = fake_ua.submit("a")
        id_b = fake_ua.submit("b")
        tracker = AsyncResponse(fake_ua, upper_decoder, {id_a: "A", id_b: "B"})

        tracker.await_response()
        assert tracker.task_map == {id_b: "B"}
        tracker.await_response()
        assert tracker.task_map == {}

    def test_task_map_is_a_copy(self, fake_ua, upper_decoder):
        tracker = AsyncResponse(fake_ua, upper_decoder, {1: "A"})
        tracker.task_map[2] = "B"
        assert tracker.task_map == {1: "A"}

    def test_decoder_errors_propagate(self, fake_ua):
        class FailingDecoder:
            def decode(self, response):
                raise ValueError(f"cannot decode {response}")

        request_id = fake_ua.submit("garbage")
        tracker = AsyncResponse(fake_ua, FailingDecoder(), {request_id: "doc-9"})

        with pytest.raises(ValueError, match="cannot decode garbage"):
            tracker.await_response()
        # The failing resource stays identifiable
        assert tracker.last_await_id == "doc-9"

    def test_transport_errors_propagate(self, upper_decoder):
        class TimingOutUA:
            def wait_for_next_response(self):
                raise TimeoutError("504")

        tracker = AsyncResponse(TimingOutUA(), upper_decoder)
        with pytest.raises(TimeoutError):
            tracker.await_response()
        assert tracker.last_await_id is None

    def test_failed_request_resolves_its_resource(self, upper_decoder):
        error = ConnectionError("refused")
        error.request_id = 7

        class RefusingUA:
            def wait_for_next_response(self):
                raise error

        tracker = AsyncResponse(RefusingUA(), upper_decoder, {7: "alice.pdf", 8: "bob.pdf"})

        with pytest.raises(ConnectionError) as exc_info:
            tracker.await_response()
        assert exc_info.value is error
        assert tracker.last_await_id == "alice.pdf"
        assert tracker.task_map == {8: "bob.pdf"}

    def test_failed_unmapped_request_uses_transport_id(self, upper_decoder):
        error = ConnectionError("refused")
        error.request_id = 3

        class RefusingUA:
            def wait_for_next_response(self):
                raise error

        tracker = AsyncResponse(RefusingUA(), upper_decoder)
        with pytest.raises(ConnectionError):
            tracker.await_response()
        assert tracker.last_await_id == 3


class TestIteration:
    def test_drains_all_results(self, fake_ua, upper_decoder):
        ids = [fake_ua.submit(name) for name in ("a", "b", "c")]
        tracker = AsyncResponse(fake_ua, upper_decoder, dict(zip(ids, ["A", "B", "C"])))

        results = list(tracker)

        assert sorted(results) == [("A", "A"), ("B", "B"), ("C", "C")]
        assert tracker.is_complete()

    def test_empty(self, fake_ua, upper_decoder):
        assert list(AsyncResponse(fake_ua, upper_decoder)) == []
