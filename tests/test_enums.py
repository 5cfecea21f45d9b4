import copy
import itertools

import pytest

from godot_codegen.enums import build_enum, make_enum_definition, make_enum_definitions
from godot_codegen.models import (
    I32_MAX,
    I32_MIN,
    EnumDefinition,
    EnumDescriptor,
    EnumOrdinal,
    Enumerator,
)


def _descriptor(name, values, is_bitfield=False):
    return EnumDescriptor(
        name=name,
        values=[Enumerator(n, v) for n, v in values],
        is_bitfield=is_bitfield,
    )


@pytest.fixture
def flags():
    return make_enum_definition(_descriptor("Flags", [("A", 1), ("B", 2), ("C", 4)], is_bitfield=True))


@pytest.fixture
def mode():
    return make_enum_definition(_descriptor("Mode", [("INHERIT", 0), ("PAUSABLE", 1), ("ALWAYS", 3)]))


def test_one_constant_per_enumerator_in_order(mode):
    assert mode.name == "Mode"
    assert mode.names == ["INHERIT", "PAUSABLE", "ALWAYS"]
    assert mode.ordinals == {"INHERIT": 0, "PAUSABLE": 1, "ALWAYS": 3}
    assert len(mode) == 3
    assert [n for n, _ in mode] == mode.names


def test_storage_and_public_ord_widths(mode):
    assert mode.storage == "i32"
    assert mode.public_ord == "i64"


def test_plain_enum_has_no_unset_and_no_combination(mode):
    assert mode.unset is None
    assert not mode.is_bitfield
    with pytest.raises(KeyError):
        mode.constant("UNSET")
    with pytest.raises(TypeError):
        mode["INHERIT"] | mode["PAUSABLE"]


def test_duplicate_ordinals_are_preserved():
    d = make_enum_definition(_descriptor("Key", [("ESCAPE", 5), ("ESC", 5), ("TAB", 6)]))
    assert d.names == ["ESCAPE", "ESC", "TAB"]
    assert d["ESCAPE"].ord == d["ESC"].ord == 5
    assert d["ESCAPE"] == d["ESC"]


def test_bitfield_combination(flags):
    a, b = flags["A"], flags["B"]
    combined = a | b
    assert combined.ord == 3
    assert combined.enum_name == "Flags"
    assert flags.combine(a, b) == combined


def test_bitfield_unset(flags):
    assert flags.unset is not None
    assert flags.unset.ord == 0
    assert flags.constant("UNSET") == flags.unset
    assert "UNSET" not in flags.names
    for name in flags.names:
        assert flags[name] | flags.unset == flags[name]
        assert flags.unset | flags[name] == flags[name]


def test_bitfield_may_not_declare_its_own_unset():
    with pytest.raises(ValueError):
        _descriptor("Flags", [("UNSET", 5), ("A", 1)], is_bitfield=True)
    with pytest.raises(ValueError):
        EnumDescriptor.from_dict({"name": "Flags", "is_bitfield": True, "values": [{"name": "UNSET", "value": 5}]})


def test_definition_rejects_enumerator_shadowing_unset():
    zero = EnumOrdinal("Flags", 0, is_bitfield=True)
    with pytest.raises(ValueError):
        EnumDefinition(
            name="Flags",
            enumerators=(("UNSET", EnumOrdinal("Flags", 5, is_bitfield=True)),),
            is_bitfield=True,
            unset=zero,
        )


def test_plain_enum_may_name_an_enumerator_unset():
    d = make_enum_definition(_descriptor("State", [("UNSET", 5), ("SET", 6)]))
    assert d.unset is None
    assert d.constant("UNSET").ord == 5


def test_bitfield_combination_is_commutative_and_associative(flags):
    values = [v for _, v in flags] + [flags.unset]
    for x, y in itertools.product(values, repeat=2):
        assert x | y == y | x
    for x, y, z in itertools.product(values, repeat=3):
        assert (x | y) | z == x | (y | z)


def test_cannot_combine_different_bitfields(flags):
    other = make_enum_definition(_descriptor("Other", [("A", 1)], is_bitfield=True))
    with pytest.raises(TypeError):
        flags["A"] | other["A"]


def test_cannot_combine_with_plain_int(flags):
    with pytest.raises(TypeError):
        flags["A"] | 1


def test_values_are_plain_hashable_copyable(flags):
    a = flags["A"]
    assert copy.copy(a) == a
    assert copy.deepcopy(a) == a
    assert hash(a) == hash(EnumOrdinal("Flags", 1, is_bitfield=True))
    assert len({flags["A"], flags["A"] | flags.unset, flags["B"]}) == 2
    assert hash(flags) == hash(copy.deepcopy(flags))


def test_ord_range_edges():
    d = make_enum_definition(_descriptor("Extremes", [("MIN", I32_MIN), ("MAX", I32_MAX)]))
    assert d["MIN"].ord == -2147483648
    assert d["MAX"].ord == 2147483647


def test_negative_bitfield_ordinals_stay_in_range():
    d = make_enum_definition(_descriptor("Mask", [("ALL", -1), ("LOW", 1)], is_bitfield=True))
    assert (d["ALL"] | d["LOW"]).ord == -1


@pytest.mark.parametrize("value", [I32_MAX + 1, I32_MIN - 1, "3", 1.5, True])
def test_out_of_range_or_non_integer_ordinals_rejected(value):
    with pytest.raises(ValueError):
        Enumerator("X", value)


def test_descriptor_from_dict():
    desc = EnumDescriptor.from_dict({
        "name": "SizeFlags",
        "is_bitfield": True,
        "values": [{"name": "SIZE_FILL", "value": 1}, {"name": "SIZE_EXPAND", "value": 2}],
    })
    assert desc.is_bitfield
    assert [e.name for e in desc.values] == ["SIZE_FILL", "SIZE_EXPAND"]
    d = build_enum(desc)
    assert (d["SIZE_FILL"] | d["SIZE_EXPAND"]).ord == 3


@pytest.mark.parametrize(
    "data",
    [
        {"values": []},
        {"name": "", "values": []},
        {"name": "E", "values": [{"name": "A"}]},
        {"name": "E", "values": [{"name": "A", "value": "zero"}]},
        {"name": "E", "values": [42]},
    ],
)
def test_descriptor_from_dict_rejects_malformed_entries(data):
    with pytest.raises(ValueError):
        EnumDescriptor.from_dict(data)


def test_make_enum_definitions():
    defs = make_enum_definitions([_descriptor("A", []), _descriptor("B", [("X", 1)])])
    assert [d.name for d in defs] == ["A", "B"]
    assert len(defs[0]) == 0


def test_to_dict(flags):
    assert flags.to_dict() == {
        "name": "Flags",
        "is_bitfield": True,
        "storage": "i32",
        "public_ord": "i64",
        "enumerators": [{"name": "A", "value": 1}, {"name": "B", "value": 2}, {"name": "C", "value": 4}],
        "unset": 0,
    }
