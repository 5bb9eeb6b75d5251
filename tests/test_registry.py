from rmqtimeline.analysis.registry import NodeRegistry
from rmqtimeline.core.models import NodeField, RegistryUpdate


def test_register_assigns_stable_source_ids():
    registry = NodeRegistry()

    first = registry.register("/var/log/rabbitmq/rabbit@a.log")
    second = registry.register("/var/log/rabbitmq/rabbit@b.log", label="node-b")
    third = registry.register()

    assert [n.source_id for n in registry] == [0, 1, 2]
    assert first.file_label == "rabbit@a.log"
    assert first.file_path == "/var/log/rabbitmq/rabbit@a.log"
    assert second.file_label == "node-b"
    assert third.file_label == "node2"
    assert registry[1] is second
    assert len(registry) == 3


def test_apply_appends_observations_in_order():
    registry = NodeRegistry()
    registry.register("a.log")

    applied = registry.apply(
        [
            RegistryUpdate(0, NodeField.BROKER_VERSION, "2023-01-01 10:00:00.000 3.8.9"),
            RegistryUpdate(0, NodeField.RUNTIME_VERSION, "2023-01-01 10:00:00.000 22.3"),
            RegistryUpdate(0, NodeField.BROKER_VERSION, "2023-01-02 10:00:00.000 3.8.19"),
            RegistryUpdate(0, NodeField.COOKIE_HASH, "2023-01-01 10:00:00.000 abc=="),
            RegistryUpdate(0, NodeField.HOME_DIR, "2023-01-01 10:00:00.000 /var/lib/rabbitmq"),
            RegistryUpdate(0, NodeField.DATABASE_DIR, "2023-01-01 10:00:00.000 /mnesia"),
        ]
    )

    node = registry[0]
    assert applied == 6
    assert node.broker_versions == [
        "2023-01-01 10:00:00.000 3.8.9",
        "2023-01-02 10:00:00.000 3.8.19",
    ]
    assert node.runtime_versions == ["2023-01-01 10:00:00.000 22.3"]
    assert node.cookie_hashes == ["2023-01-01 10:00:00.000 abc=="]
    assert node.home_dirs == ["2023-01-01 10:00:00.000 /var/lib/rabbitmq"]
    assert node.database_dirs == ["2023-01-01 10:00:00.000 /mnesia"]


def test_cluster_name_is_set_on_first_discovery():
    registry = NodeRegistry()
    registry.register("a.log")

    registry.apply(
        [
            RegistryUpdate(0, NodeField.CLUSTER_NAME, "2023-01-01 10:00:00.000 rabbit@a"),
            RegistryUpdate(0, NodeField.CLUSTER_NAME, "2023-01-02 10:00:00.000 rabbit@a"),
        ]
    )

    assert registry[0].cluster_name == "2023-01-01 10:00:00.000 rabbit@a"


def test_updates_for_unknown_sources_are_ignored():
    registry = NodeRegistry()
    registry.register("a.log")

    applied = registry.apply([RegistryUpdate(5, NodeField.COOKIE_HASH, "x")])

    assert applied == 0
    assert registry[0].cookie_hashes == []
