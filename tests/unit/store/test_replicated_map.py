import pytest

from pickaxe_agent.store import (
    STATE_CHANGED,
    MVRegister,
    ReplicatedMap,
    UnsupportedStoreOperation,
)


def write(store: ReplicatedMap, key: str, field_name: str, value: str) -> None:
    store.apply_sub(key, 'ormap', 'applySub', field_name, 'mvreg', 'write', value)


class TestMVRegister:
    def test_write_replaces_values(self):
        register = MVRegister()
        register.merge(['"a"', '"b"'])

        register.write('"c"')

        assert register.values() == frozenset({'"c"'})

    def test_merge_unions_concurrent_values(self):
        register = MVRegister()
        register.write('"a"')

        register.merge(['"b"'])

        assert len(register) == 2
        assert register.to_list() == ['"a"', '"b"']
        assert MVRegister.from_list(register.to_list()).values() == register.values()


class TestApplySub:
    def test_write_sets_field_and_emits_state_changed(self):
        store = ReplicatedMap("dealRequests")
        notifications: list[int] = []
        store.on(STATE_CHANGED, lambda: notifications.append(store.version))

        write(store, "r1", "agentState", '{"state":"ack"}')

        assert store.value() == {"r1": {"agentState": frozenset({'{"state":"ack"}'})}}
        assert notifications == [1]

    def test_writes_are_field_scoped(self):
        store = ReplicatedMap("dealRequests")

        write(store, "r1", "dealRequest", '{"size":1}')
        write(store, "r1", "agentState", '{"state":"ack"}')
        write(store, "r1", "agentState", '{"state":"queuing"}')

        assert store.get_register("r1", "dealRequest") == frozenset({'{"size":1}'})
        assert store.get_register("r1", "agentState") == frozenset({'{"state":"queuing"}'})

    @pytest.mark.parametrize(
        "operation",
        [
            ("orset", "applySub", "mvreg", "write"),
            ("ormap", "remove", "mvreg", "write"),
            ("ormap", "applySub", "lwwreg", "write"),
            ("ormap", "applySub", "mvreg", "clear"),
        ],
    )
    def test_unsupported_operations_raise(self, operation):
        store = ReplicatedMap("dealRequests")
        container_type, container_op, register_type, register_op = operation

        with pytest.raises(UnsupportedStoreOperation) as err:
            store.apply_sub(
                "r1", container_type, container_op,
                "agentState", register_type, register_op,
                '{"state":"ack"}',
            )

        assert err.value.operation == operation
        assert store.value() == {}

    def test_non_string_values_are_rejected(self):
        store = ReplicatedMap("dealRequests")

        with pytest.raises(TypeError):
            store.apply_sub("r1", 'ormap', 'applySub', 'agentState', 'mvreg', 'write', {"state": "ack"})


class TestReplication:
    def test_merge_register_holds_concurrent_values(self):
        store = ReplicatedMap("dealRequests")
        write(store, "r1", "dealRequest", '{"size":1}')

        store.merge_register("r1", "dealRequest", ['{"size":2}'])

        assert store.get_register("r1", "dealRequest") == frozenset({'{"size":1}', '{"size":2}'})

    def test_value_is_a_snapshot_copy(self):
        store = ReplicatedMap("dealRequests")
        write(store, "r1", "dealRequest", '{"size":1}')

        snapshot = store.value()
        write(store, "r2", "dealRequest", '{"size":2}')

        assert list(snapshot.keys()) == ["r1"]

    def test_dump_and_load(self):
        store = ReplicatedMap("dealRequests")
        write(store, "r1", "dealRequest", '{"size":1}')
        write(store, "r1", "agentState", '{"state":"queued"}')

        restored = ReplicatedMap("dealRequests")
        restored.load(store.dump())

        assert restored.value() == store.value()

    def test_remove(self):
        store = ReplicatedMap("dealRequests")
        write(store, "r1", "dealRequest", '{"size":1}')

        assert store.remove("r1") is True
        assert store.remove("r1") is False
        assert store.keys() == []
