import asyncio

from voice_agent.services.editor import QuotationEditor


class FakePublisher:
    def __init__(self, save_result=None, delay=0):
        self.published = []
        self.save_calls = 0
        self.delay = delay
        self.save_result = save_result or {"status": "success", "quotation_id": "q-1"}

    async def publish(self, draft):
        self.published.append(draft.to_update_message())
        return True

    async def request_save(self, draft):
        self.save_calls += 1
        await asyncio.sleep(self.delay)
        return self.save_result


class FakeStore:
    def __init__(self):
        self.saved = {}
        self.deleted = []

    async def save(self, room_name, draft):
        self.saved[room_name] = draft.model_dump_json()

    async def delete(self, room_name):
        self.deleted.append(room_name)


async def test_each_change_is_persisted_and_published():
    publisher, store = FakePublisher(), FakeStore()
    editor = QuotationEditor("room-1", publisher, store=store)

    await editor.set_customer("Ravi Traders")
    reply = await editor.add_item("Lamp", 2, 100)
    await editor.update_item("lamp", quantity=3)

    assert "Total is now 200" in reply
    assert len(publisher.published) == 3
    assert publisher.published[-1]["data"]["total"] == 300
    assert "room-1" in store.saved


async def test_invalid_changes_are_reported_not_published():
    publisher = FakePublisher()
    editor = QuotationEditor("room-1", publisher)

    assert await editor.add_item("Lamp", 0, 100) == "Quantity must be a positive whole number"
    assert "No item named" in await editor.remove_item("Lamp")
    assert publisher.published == []


async def test_save_clears_stored_draft():
    publisher, store = FakePublisher(), FakeStore()
    editor = QuotationEditor("room-1", publisher, store=store)

    assert (await editor.save())["status"] == "error"

    await editor.add_item("Lamp", 1, 100)
    result = await editor.save()
    assert result["status"] == "success"
    assert editor.saved_quotation_id == "q-1"
    assert store.deleted == ["room-1"]


async def test_failed_save_keeps_draft():
    store = FakeStore()
    editor = QuotationEditor(
        "room-1", FakePublisher({"status": "error", "message": "offline"}), store=store
    )
    await editor.add_item("Lamp", 1, 100)
    assert (await editor.save())["message"] == "offline"
    assert editor.saved_quotation_id is None
    assert store.deleted == []


async def test_concurrent_saves_request_one_quotation():
    publisher = FakePublisher(delay=0.05)
    editor = QuotationEditor("room-1", publisher)
    await editor.add_item("Lamp", 1, 100)

    # the save tool and the end-of-call handler can fire together
    first, second = await asyncio.gather(editor.save(), editor.save())

    assert publisher.save_calls == 1
    assert first == second
    assert first["quotation_id"] == "q-1"


async def test_editing_after_save_allows_a_new_save():
    publisher = FakePublisher()
    editor = QuotationEditor("room-1", publisher)
    await editor.add_item("Lamp", 1, 100)
    await editor.save()
    await editor.save()
    assert publisher.save_calls == 1

    await editor.add_item("Desk", 1, 500)
    await editor.save()
    assert publisher.save_calls == 2
