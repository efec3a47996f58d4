"""Tests for the update notifier."""

from wallet_assets.notifier import AssetUpdateEvent, UpdateNotifier


class TestUpdateNotifier:
    """Test publish/subscribe behavior."""

    def test_handlers_receive_every_wallet(self) -> None:
        """Test handlers get events for all wallets and filter themselves."""
        notifier = UpdateNotifier()
        received: list[AssetUpdateEvent] = []
        notifier.subscribe(received.append)

        notifier.publish("uniqUpdate", "wallet1")
        notifier.publish("uniqUpdate", "wallet2")

        assert [e.wallet_id for e in received] == ["wallet1", "wallet2"]
        assert [e for e in received if e.wallet_id == "wallet2"] == [AssetUpdateEvent("uniqUpdate", "wallet2")]

    def test_event_name_filter(self) -> None:
        """Test a handler registered for one event name only sees that event."""
        notifier = UpdateNotifier()
        nft_events: list[AssetUpdateEvent] = []
        notifier.subscribe(nft_events.append, event_name="nftUpdate")

        notifier.publish("uniqUpdate", "wallet1")
        notifier.publish("nftUpdate", "wallet1")

        assert nft_events == [AssetUpdateEvent("nftUpdate", "wallet1")]

    def test_unsubscribe(self) -> None:
        """Test unsubscribed handlers stop receiving events."""
        notifier = UpdateNotifier()
        received: list[AssetUpdateEvent] = []
        handler = received.append
        notifier.subscribe(handler)

        notifier.unsubscribe(handler)
        notifier.publish("uniqUpdate", "wallet1")

        assert received == []
        assert notifier.subscriber_count == 0

    def test_unsubscribe_unknown_handler(self) -> None:
        """Test unsubscribing a handler that was never registered is a no-op."""
        notifier = UpdateNotifier()

        notifier.unsubscribe(print)

        assert notifier.subscriber_count == 0

    def test_events_without_subscribers_are_dropped(self) -> None:
        """Test no replay for late subscribers."""
        notifier = UpdateNotifier()
        notifier.publish("uniqUpdate", "wallet1")
        received: list[AssetUpdateEvent] = []

        notifier.subscribe(received.append)

        assert received == []
        assert notifier.published_count == 1

    def test_failing_handler_does_not_stop_dispatch(self) -> None:
        """Test one raising handler does not block the others."""
        notifier = UpdateNotifier()
        received: list[AssetUpdateEvent] = []

        def broken(event: AssetUpdateEvent) -> None:
            raise RuntimeError("render failed")

        notifier.subscribe(broken)
        notifier.subscribe(received.append)

        notifier.publish("uniqUpdate", "wallet1")

        assert len(received) == 1

    def test_handler_may_unsubscribe_itself(self) -> None:
        """Test a handler can unsubscribe during dispatch."""
        notifier = UpdateNotifier()
        calls: list[str] = []

        def once(event: AssetUpdateEvent) -> None:
            calls.append(event.wallet_id)
            notifier.unsubscribe(once)

        notifier.subscribe(once)
        notifier.publish("uniqUpdate", "a")
        notifier.publish("uniqUpdate", "b")

        assert calls == ["a"]
