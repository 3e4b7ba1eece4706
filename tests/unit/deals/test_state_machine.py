import pytest

from pickaxe_agent.deals import (
    TERMINAL_STAGES,
    DealSignal,
    DealStage,
    InvalidTransitionError,
    next_stage,
)
from pickaxe_agent.deals.state_machine import VALID_TRANSITIONS, is_terminal


STAGE_ORDER = {
    DealStage.ACK: 0,
    DealStage.QUEUING: 1,
    DealStage.QUEUED: 2,
    DealStage.PROPOSING: 3,
    DealStage.DEAL_SUCCESS: 4,
    DealStage.DEAL_FAILED: 4,
}


class TestNextStage:
    def test_success_progression(self):
        stage = DealStage.ACK
        visited = [stage]

        for signal in (DealSignal.NEXT, DealSignal.NEXT, DealSignal.NEXT, DealSignal.SUCCESS):
            stage = next_stage(stage, signal)
            visited.append(stage)

        assert visited == [
            DealStage.ACK,
            DealStage.QUEUING,
            DealStage.QUEUED,
            DealStage.PROPOSING,
            DealStage.DEAL_SUCCESS,
        ]

    def test_proposing_fails_to_deal_failed(self):
        assert next_stage(DealStage.PROPOSING, DealSignal.FAIL) == DealStage.DEAL_FAILED

    @pytest.mark.parametrize(
        "stage,signal",
        [
            (DealStage.ACK, DealSignal.SUCCESS),
            (DealStage.QUEUED, DealSignal.FAIL),
            (DealStage.PROPOSING, DealSignal.NEXT),
            (DealStage.DEAL_SUCCESS, DealSignal.NEXT),
            (DealStage.DEAL_FAILED, DealSignal.FAIL),
        ],
    )
    def test_invalid_pairs_raise(self, stage, signal):
        assert signal not in VALID_TRANSITIONS[stage]

        with pytest.raises(InvalidTransitionError) as err:
            next_stage(stage, signal)

        assert err.value.stage == stage
        assert err.value.signal == signal

    def test_is_total_over_stages_and_signals(self):
        for stage in DealStage:
            for signal in DealSignal:
                if signal in VALID_TRANSITIONS[stage]:
                    assert STAGE_ORDER[next_stage(stage, signal)] > STAGE_ORDER[stage]

                else:
                    with pytest.raises(InvalidTransitionError):
                        next_stage(stage, signal)

    def test_terminal_stages(self):
        assert TERMINAL_STAGES == frozenset({DealStage.DEAL_SUCCESS, DealStage.DEAL_FAILED})
        assert is_terminal(DealStage.PROPOSING) is False
