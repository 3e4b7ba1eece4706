from pickaxe_agent.deals import (
    NEW_DEAL_REQUEST,
    ActiveSet,
    AgentState,
    ChangeDetector,
    DealRequest,
)
from pickaxe_agent.events import EventBus


def unprocessed(deal_request_id: str) -> DealRequest:
    return DealRequest(deal_request_id, {"dealRequest": {"size": 1}})


class TestActiveSet:
    def test_claim_succeeds_once(self):
        active_set = ActiveSet()

        assert active_set.claim("r1") is True
        assert active_set.claim("r1") is False
        assert "r1" in active_set
        assert len(active_set) == 1
        assert list(active_set) == ["r1"]


class TestChangeDetector:
    def test_emits_once_per_unclaimed_request(self):
        bus = EventBus()
        emitted: list[tuple[str, DealRequest, object]] = []
        bus.on(NEW_DEAL_REQUEST, lambda *args: emitted.append(args))

        detector = ChangeDetector(ActiveSet(), bus)
        requests = {"r1": unprocessed("r1"), "r2": unprocessed("r2")}

        assert detector.detect(requests, "ctx") == ["r1", "r2"]
        assert detector.detect(requests, "ctx") == []
        assert detector.detect(requests, "ctx") == []

        assert [args[0] for args in emitted] == ["r1", "r2"]
        assert emitted[0][2] == "ctx"

    def test_skips_requests_with_agent_state(self):
        bus = EventBus()
        emitted: list[str] = []
        bus.on(NEW_DEAL_REQUEST, lambda deal_request_id, *_: emitted.append(deal_request_id))

        active_set = ActiveSet()
        detector = ChangeDetector(active_set, bus)

        processed = DealRequest("r1", {"agentState": AgentState("queued").to_dict()})

        assert detector.detect({"r1": processed}) == []
        assert emitted == []
        assert "r1" not in active_set

    def test_claims_happen_before_handlers_can_reenter(self):
        bus = EventBus()
        active_set = ActiveSet()
        detector = ChangeDetector(active_set, bus)
        requests = {"r1": unprocessed("r1")}
        emitted: list[str] = []

        def reenter(deal_request_id, *_):
            emitted.append(deal_request_id)
            detector.detect(requests)

        bus.on(NEW_DEAL_REQUEST, reenter)

        detector.detect(requests)

        assert emitted == ["r1"]
