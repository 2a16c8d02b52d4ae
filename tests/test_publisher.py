import json

from livekit import rtc

from voice_agent.domain.draft import QuotationDraft
from voice_agent.rpc.publisher import QuotationPublisher


class FakeLocalParticipant:
    def __init__(self, response='{"status": "success", "message": "Quotation received"}', fail=False):
        self.response = response
        self.fail = fail
        self.calls = []
        self.packets = []

    async def perform_rpc(self, *, destination_identity, method, payload, response_timeout):
        self.calls.append((destination_identity, method, json.loads(payload)))
        if self.fail:
            raise rtc.RpcError(1500, "Application error in method handler")
        return self.response

    async def publish_data(self, payload, *, reliable=True, topic=""):
        self.packets.append((json.loads(payload), reliable, topic))


def _draft():
    draft = QuotationDraft()
    draft.add_item("Lamp", 2, 100)
    return draft


async def test_publish_uses_rpc():
    participant = FakeLocalParticipant()
    acknowledged = await QuotationPublisher(participant, "user_1").publish(_draft())

    assert acknowledged is True
    identity, method, message = participant.calls[0]
    assert (identity, method) == ("user_1", "updateQuotation")
    assert message["type"] == "quotation_update"
    assert participant.packets == []


async def test_publish_falls_back_to_data_channel():
    participant = FakeLocalParticipant(fail=True)
    acknowledged = await QuotationPublisher(participant, "user_1").publish(_draft())

    assert acknowledged is False
    message, reliable, topic = participant.packets[0]
    assert message["data"]["total"] == 200
    assert reliable is True
    assert topic == "quotation"


async def test_publish_without_user_broadcasts():
    participant = FakeLocalParticipant()
    await QuotationPublisher(participant).publish(_draft())
    assert participant.calls == []
    assert len(participant.packets) == 1


async def test_request_save():
    participant = FakeLocalParticipant(response='{"status": "success", "quotation_id": "q-9"}')
    result = await QuotationPublisher(participant, "user_1").request_save(_draft())

    assert result == {"status": "success", "quotation_id": "q-9"}
    _, method, message = participant.calls[0]
    assert method == "saveQuotation"
    assert message["type"] == "save_quotation"
    assert message["data"]["total_amount"] == 200


async def test_request_save_reports_rpc_failure():
    participant = FakeLocalParticipant(fail=True)
    result = await QuotationPublisher(participant, "user_1").request_save(_draft())
    assert result["status"] == "error"
    assert "Application error" in result["message"]
