from voice_agent.domain.draft import QuotationDraft
from voice_agent.services.draft_store import DraftStore


class FakeRedis:
    def __init__(self):
        self.data = {}
        self.ttls = {}

    async def get(self, name):
        return self.data.get(name)

    async def set(self, name, value, ex=None):
        self.data[name] = value
        self.ttls[name] = ex

    async def delete(self, *names):
        for name in names:
            self.data.pop(name, None)


async def test_round_trip_and_ttl():
    redis = FakeRedis()
    store = DraftStore(redis, ttl_seconds=600)

    draft = QuotationDraft()
    draft.set_customer("Ravi Traders")
    draft.add_item("Lamp", 2, 100)
    await store.save("room-1", draft)

    assert "quotify:draft:room-1" in redis.data
    assert redis.ttls["quotify:draft:room-1"] == 600

    loaded = await store.load("room-1")
    assert loaded.customer == "Ravi Traders"
    assert loaded.total == 200
    assert loaded.timestamp == draft.timestamp


async def test_missing_and_corrupt_drafts():
    redis = FakeRedis()
    store = DraftStore(redis)
    assert await store.load("nope") is None

    redis.data["quotify:draft:bad"] = '{"items": [{"name": "Lamp", "qty": -1, "rate": 1}]}'
    assert await store.load("bad") is None


async def test_delete():
    redis = FakeRedis()
    store = DraftStore(redis)
    await store.save("room-1", QuotationDraft())
    await store.delete("room-1")
    assert redis.data == {}
