from app.schemas.suggestion import SuggestionCreate
from app.services import suggestions as suggestion_service
from app.services.feed import FeedConnectionManager, SuggestionFeed, session_loader
from app.services.realtime import COMMENTS, SUGGESTIONS, VOTES, ChangeBus, ChangeEvent, notify


async def test_subscribers_receive_only_their_collection():
    bus = ChangeBus()
    votes, comments = [], []
    bus.subscribe(VOTES, votes.append)
    bus.subscribe(COMMENTS, comments.append)

    await bus.publish(ChangeEvent(VOTES, "insert", 1))

    assert votes == [ChangeEvent(VOTES, "insert", 1)]
    assert comments == []


async def test_unsubscribe_stops_delivery():
    bus = ChangeBus()
    seen = []
    unsubscribe = bus.subscribe(SUGGESTIONS, seen.append)
    assert bus.subscriber_count(SUGGESTIONS) == 1

    unsubscribe()
    await notify(bus, SUGGESTIONS, "insert", 7)

    assert seen == []
    assert bus.subscriber_count(SUGGESTIONS) == 0


async def test_failing_callback_does_not_block_others():
    bus = ChangeBus()
    seen = []

    def broken(event):
        raise RuntimeError("boom")

    async def healthy(event):
        seen.append(event.row_id)

    bus.subscribe(VOTES, broken)
    bus.subscribe(VOTES, healthy)

    await bus.publish(ChangeEvent(VOTES, "delete", 3))
    assert seen == [3]


async def test_notify_without_bus_is_a_no_op():
    await notify(None, VOTES, "insert", 1)


async def test_feed_refetches_after_changes(db, session_factory, make_member):
    author, voter = await make_member(), await make_member()
    bus = ChangeBus()
    snapshots = []
    feed = SuggestionFeed(bus, session_loader(session_factory), snapshots.append)
    feed.start()

    suggestion = await suggestion_service.create_suggestion(
        db, author.caller, SuggestionCreate(title="Alumni run", description="5k"), bus
    )
    await feed.flush()
    assert feed.latest[0].id == suggestion.id

    await suggestion_service.cast_vote(db, voter.caller, suggestion.id, bus)
    await feed.flush()
    assert feed.latest[0].vote_count == 1

    await suggestion_service.add_comment(db, voter.caller, suggestion.id, "I'm in", bus)
    await feed.flush()
    assert feed.latest[0].comment_count == 1
    assert snapshots[-1] == feed.latest
    feed.stop()


async def test_burst_of_changes_is_one_refetch():
    bus = ChangeBus()
    loads = []

    async def loader():
        loads.append(1)
        return []

    feed = SuggestionFeed(bus, loader, lambda snapshot: None)
    feed.start()

    await bus.publish_many([
        ChangeEvent(VOTES, "delete", 1),
        ChangeEvent(COMMENTS, "delete", 1),
        ChangeEvent(SUGGESTIONS, "delete", 1),
    ])
    await feed.flush()

    assert len(loads) == 1
    feed.stop()


async def test_failed_refetch_is_logged_and_feed_keeps_running(caplog):
    bus = ChangeBus()
    calls = []

    async def loader():
        calls.append(1)
        if len(calls) == 1:
            raise RuntimeError("storage down")
        return []

    feed = SuggestionFeed(bus, loader, lambda snapshot: None)
    feed.start()

    await notify(bus, VOTES, "insert", 1)
    await feed.flush()
    assert "Suggestion feed refresh failed" in caplog.text

    await notify(bus, VOTES, "insert", 1)
    await feed.flush()
    assert feed.latest == []
    feed.stop()


async def test_stopped_feed_ignores_changes(session_factory):
    bus = ChangeBus()
    snapshots = []
    feed = SuggestionFeed(bus, session_loader(session_factory), snapshots.append)
    feed.start()
    assert feed.running
    feed.stop()

    await notify(bus, VOTES, "insert", 1)

    assert not feed.running
    assert snapshots == []
    for collection in SuggestionFeed.COLLECTIONS:
        assert bus.subscriber_count(collection) == 0


class FakeSocket:
    def __init__(self, fail=False):
        self.fail = fail
        self.sent = []
        self.accepted = False

    async def accept(self):
        self.accepted = True

    async def send_json(self, message):
        if self.fail:
            raise RuntimeError("closed")
        self.sent.append(message)


async def test_broadcast_drops_dead_connections():
    manager = FeedConnectionManager()
    alive, dead = FakeSocket(), FakeSocket(fail=True)
    await manager.connect(alive)
    await manager.connect(dead)

    await manager.broadcast([])

    assert alive.sent == [{"type": "suggestions", "suggestions": []}]
    assert manager.active_connections == [alive]
