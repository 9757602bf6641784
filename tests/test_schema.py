from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import pytest

from pyrdpconn.errors import SchemaError
from pyrdpconn.schema import FieldSpec, PropertySet, is_property_set, property_set, schema_for
from tests.utils import KeylessProperties, SampleProperties, UnmarkedProperties


def test_schema_is_published_once() -> None:
    first = schema_for(SampleProperties)
    assert schema_for(SampleProperties) is first
    assert SampleProperties.schema() is first


def test_schema_shared_across_threads() -> None:
    @property_set
    class Fresh(PropertySet):
        declared_fields = (FieldSpec("a", "a", "text"),)

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda _: schema_for(Fresh), range(32)))
    assert all(r is results[0] for r in results)


def test_schema_order_and_lookup() -> None:
    schema = schema_for(SampleProperties)
    assert [spec.name for spec in schema][:3] == ["username", "server_port", "desktop_width"]
    assert schema.lookup("server port").name == "server_port"
    assert schema.lookup("notes") is None
    assert schema.lookup("nope") is None
    assert schema.primary.key == "full address"
    assert "notes" not in schema.keys


def test_unmarked_type_raises() -> None:
    with pytest.raises(SchemaError, match="not marked as a property set"):
        schema_for(UnmarkedProperties)


def test_marker_is_not_inherited() -> None:
    class Child(SampleProperties):
        pass

    assert is_property_set(SampleProperties)
    assert not is_property_set(Child)
    with pytest.raises(SchemaError):
        schema_for(Child)


def test_keyless_field_is_part_of_schema() -> None:
    schema = schema_for(KeylessProperties)
    assert not schema.field("broken").has_key


def test_duplicate_key_rejected() -> None:
    class Dup(PropertySet):
        declared_fields = (
            FieldSpec("a", "same", "text"),
            FieldSpec("b", "same", "integer"),
        )

    with pytest.raises(SchemaError, match="duplicate serialized key"):
        property_set(Dup)
    assert not is_property_set(Dup)


def test_two_primaries_rejected() -> None:
    class TwoPrimaries(PropertySet):
        declared_fields = (
            FieldSpec("a", "a", "text", primary=True),
            FieldSpec("b", "b", "text", primary=True),
        )

    with pytest.raises(SchemaError, match="more than one primary"):
        property_set(TwoPrimaries)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"kind": "float"},
        {"kind": "text", "minimum": 1},
        {"kind": "integer", "minimum": 5, "maximum": 1},
        {"kind": "text", "protected": True},
    ],
)
def test_field_spec_rejects_inconsistent_options(kwargs) -> None:
    with pytest.raises(SchemaError):
        FieldSpec("x", "x", **kwargs)


def test_allowed_is_frozen() -> None:
    spec = FieldSpec("x", "x", "integer", allowed=[0, 1])
    assert spec.allowed == frozenset({0, 1})


def test_inherited_fields_come_first_and_redeclare_in_place() -> None:
    class Base(PropertySet):
        declared_fields = (
            FieldSpec("a", "a", "text"),
            FieldSpec("b", "b", "integer"),
        )

    @property_set
    class Derived(Base):
        declared_fields = (
            FieldSpec("c", "c", "text"),
            FieldSpec("b", "b", "integer", maximum=3),
        )

    schema = schema_for(Derived)
    assert [spec.name for spec in schema] == ["a", "b", "c"]
    assert schema.field("b").maximum == 3


def test_attribute_and_item_access() -> None:
    props = SampleProperties(username="alice")
    assert props.username == "alice"
    assert props["username"] == "alice"
    assert props.server_port is None
    props.server_port = 3389
    assert props["server_port"] == 3389
    assert "server_port" in props
    props.server_port = None
    assert "server_port" not in props
    assert props.to_dict() == {"username": "alice"}


def test_unknown_names_rejected() -> None:
    with pytest.raises(TypeError):
        SampleProperties(bogus=1)
    props = SampleProperties()
    with pytest.raises(AttributeError):
        props.bogus
    with pytest.raises(AttributeError):
        props.bogus = 1
    with pytest.raises(KeyError):
        props["bogus"]


def test_equality_and_repr() -> None:
    a = SampleProperties(username="u", server_port=1)
    b = SampleProperties(server_port=1, username="u")
    assert a == b
    assert repr(a) == "SampleProperties(username='u', server_port=1)"
    b.clear()
    assert a != b
