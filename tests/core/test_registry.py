import pytest

from pagoo.core.errors import NotFoundError
from pagoo.core.registry import IdentifierRegistry


def test_ids_follow_first_seen_order():
    registry = IdentifierRegistry("organism", ["B", "A", "B", "C"])

    assert registry.names == ["B", "A", "C"]
    assert registry.ids == [1, 2, 3]
    assert registry.id_of("A") == 2
    assert registry.name_of(3) == "C"


def test_register_is_idempotent():
    registry = IdentifierRegistry("cluster")

    assert registry.register("OG1") == 1
    assert registry.register("OG2") == 2
    assert registry.register("OG1") == 1
    assert len(registry) == 2


def test_unknown_name_raises_not_found():
    registry = IdentifierRegistry("organism", ["A"])

    with pytest.raises(NotFoundError, match="Unknown organism: 'Z'"):
        registry.id_of("Z")


def test_not_found_is_a_key_error_with_plain_message():
    registry = IdentifierRegistry("cluster", ["OG1"])

    with pytest.raises(KeyError) as excinfo:
        registry.id_of("OG9")

    assert str(excinfo.value) == "Unknown cluster: 'OG9'"


@pytest.mark.parametrize("bad_id", [0, 3, -1, True, 1.0, "1"])
def test_name_of_rejects_invalid_ids(bad_id):
    registry = IdentifierRegistry("organism", ["A", "B"])

    with pytest.raises(NotFoundError):
        registry.name_of(bad_id)


def test_resolve_accepts_names_and_ids():
    registry = IdentifierRegistry("organism", ["A", "B"])

    assert registry.resolve("B") == 2
    assert registry.resolve(1) == 1
    with pytest.raises(NotFoundError):
        registry.resolve(5)


def test_container_protocol():
    registry = IdentifierRegistry("organism", ["A", "B"])

    assert "A" in registry
    assert "Z" not in registry
    assert list(registry) == ["A", "B"]
