import pytest
from shared.change_feed import ChangeEvent, ChangeFeed, ChangeType, get_change_feed, reset_change_feed


@pytest.fixture
def feed():
    return ChangeFeed()


def _event(table="chat_messages", change_type=ChangeType.INSERT, **row):
    return ChangeEvent(table=table, change_type=change_type, new=row)


class TestSubscribe:
    def test_subscriber_receives_matching_table(self, feed):
        received = []
        feed.subscribe("chat_messages", received.append)

        feed.publish(_event(id="m-1"))
        feed.publish(_event(table="orders", id="o-1"))

        assert [e.new["id"] for e in received] == ["m-1"]

    def test_row_filter(self, feed):
        received = []
        feed.subscribe("chat_messages", received.append, row_filter={"conversation_id": "c-1"})

        feed.publish(_event(id="m-1", conversation_id="c-1"))
        feed.publish(_event(id="m-2", conversation_id="c-2"))

        assert [e.new["id"] for e in received] == ["m-1"]

    def test_change_type_filter(self, feed):
        received = []
        feed.subscribe("products", received.append, change_types={ChangeType.UPDATE})

        feed.publish(_event(table="products", change_type=ChangeType.INSERT, id="p-1"))
        feed.publish(_event(table="products", change_type=ChangeType.UPDATE, id="p-1"))

        assert [e.change_type for e in received] == [ChangeType.UPDATE]

    def test_delete_events_match_on_old_row(self, feed):
        received = []
        feed.subscribe("chat_conversations", received.append, row_filter={"id": "c-1"})

        feed.publish(ChangeEvent(table="chat_conversations", change_type=ChangeType.DELETE, old={"id": "c-1"}))

        assert len(received) == 1

    def test_publish_returns_delivery_count(self, feed):
        feed.subscribe("orders", lambda e: None)
        feed.subscribe("orders", lambda e: None)

        assert feed.publish(_event(table="orders", id="o-1")) == 2


class TestUnsubscribe:
    def test_unsubscribed_callback_hears_nothing(self, feed):
        received = []
        subscription = feed.subscribe("orders", received.append)
        subscription.unsubscribe()

        feed.publish(_event(table="orders", id="o-1"))

        assert received == []
        assert subscription.active is False
        assert feed.subscription_count == 0

    def test_context_manager_unsubscribes(self, feed):
        with feed.subscribe("orders", lambda e: None) as subscription:
            assert subscription.active

        assert not subscription.active

    def test_unsubscribe_twice_is_harmless(self, feed):
        subscription = feed.subscribe("orders", lambda e: None)
        subscription.unsubscribe()
        subscription.unsubscribe()

        assert feed.subscription_count == 0


class TestSubscriberFailures:
    def test_failing_subscriber_does_not_block_others(self, feed):
        received = []

        def broken(event):
            raise RuntimeError("boom")

        feed.subscribe("orders", broken)
        feed.subscribe("orders", received.append)

        assert feed.publish(_event(table="orders", id="o-1")) == 1
        assert len(received) == 1


class TestProcessFeed:
    def test_get_change_feed_is_shared(self):
        assert get_change_feed() is get_change_feed()

    def test_reset_drops_subscriptions(self):
        get_change_feed().subscribe("orders", lambda e: None)
        reset_change_feed()

        assert get_change_feed().subscription_count == 0
