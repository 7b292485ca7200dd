#
# Prettyval - Formatting Tests
#

# Standard library -----------------------------------------------------------------------------------------------------
import collections

# Third party ----------------------------------------------------------------------------------------------------------
import pytest

# Local ----------------------------------------------------------------------------------------------------------------
from prettyval.formatting import (
    BY_CALLABILITY,
    BY_KEY,
    BY_PROTO_DEPTH,
    BY_PUBLICITY,
    KEEP_ALL,
    KEEP_FUNCTIONS,
    KEEP_PUBLIC,
    KEEP_STR_KEYS,
    KEY_AND_VALUE,
    REMOVE_FUNCTIONS,
    REMOVE_PUBLIC,
    SINGLE_LINE,
    TABIFY,
    TREEIFY,
    VALUE_ONLY,
    FoldContext,
    Property,
    PropertyCountMode,
    PropertyFilter,
    PropertyOrder,
    dedupe,
    split_on_longest_property,
    split_on_property_count,
    split_on_total_length,
)
from prettyval.fragments import Fragment, line_text
from prettyval.options import Options, RecordOptions
from prettyval.value import Value


# Tests ----------------------------------------------------------------------------------------------------------------

def helper():
    return None


@pytest.fixture
def children() -> list[Value]:
    root = Value.from_root({})
    return [
        Value.from_property(root, "b", 1),
        Value.from_property(root, "_a", helper),
        Value.from_property(root, "c", 2, proto_depth=1),
        Value.from_property(root, 1, 3),
        Value.from_property(root, "a", helper, proto_depth=1),
    ]


def _keys(values):
    return [v.key for v in values]


def _ctx(content=None, params=None, **kwargs) -> FoldContext:
    return FoldContext(
        value=Value.from_root({} if content is None else content),
        params=params or RecordOptions.plain_object(),
        options=Options(),
        **kwargs,
    )


class TestPropertyFilter:
    @pytest.mark.parametrize(
        "property_filter, expected",
        [
            pytest.param(KEEP_ALL, ["b", "_a", "c", "1", "a"], id="keep-all"),
            pytest.param(KEEP_PUBLIC, ["b", "c", "1", "a"], id="keep-public"),
            pytest.param(REMOVE_PUBLIC, ["_a"], id="remove-public"),
            pytest.param(KEEP_FUNCTIONS, ["_a", "a"], id="keep-functions"),
            pytest.param(REMOVE_FUNCTIONS, ["b", "c", "1"], id="remove-functions"),
            pytest.param(KEEP_STR_KEYS, ["b", "_a", "c", "a"], id="keep-str-keys"),
        ],
    )
    def test_presets(self, children, property_filter, expected):
        """Keep the children satisfying the predicate, in order."""
        assert _keys(property_filter(children)) == expected

    def test_combinators(self, children):
        """Negate and combine filters."""
        public_data = PropertyFilter.all_of(KEEP_PUBLIC, REMOVE_FUNCTIONS)
        assert public_data.name == "keep_public+remove_functions"
        assert _keys(public_data(children)) == ["b", "c", "1"]
        assert _keys(KEEP_PUBLIC.negate()(children)) == ["_a"]
        assert KEEP_PUBLIC.negate().name == "not_keep_public"

    def test_key_predicate(self, children):
        """Filter on the one-line key."""
        assert _keys(PropertyFilter.from_key_predicate(str.isalpha)(children)) == ["b", "c", "a"]

    def test_invalid_predicate(self):
        """Reject non-callable predicates."""
        with pytest.raises(TypeError, match=r"must be callable"):
            PropertyFilter("bad", None)


class TestPropertyOrder:
    @pytest.mark.parametrize(
        "order, expected",
        [
            pytest.param(BY_KEY, ["1", "_a", "a", "b", "c"], id="by-key"),
            pytest.param(BY_KEY.reversed(), ["c", "b", "a", "_a", "1"], id="by-key-reversed"),
            pytest.param(BY_PROTO_DEPTH, ["b", "_a", "1", "c", "a"], id="by-proto-depth"),
            pytest.param(BY_CALLABILITY, ["b", "c", "1", "_a", "a"], id="by-callability"),
            pytest.param(BY_PUBLICITY, ["b", "c", "1", "a", "_a"], id="by-publicity"),
            pytest.param(
                PropertyOrder.combine(BY_PROTO_DEPTH, BY_KEY), ["1", "_a", "b", "a", "c"], id="proto-then-key"
            ),
        ],
    )
    def test_sort(self, children, order, expected):
        """Sort children stably by priority of the steps."""
        assert _keys(order(children)) == expected

    def test_names(self):
        """Name combined and reversed orders after their parts."""
        assert PropertyOrder.combine(BY_PROTO_DEPTH, BY_KEY).name == "by_proto_depth+by_key"
        assert BY_KEY.reversed().name == "by_key_reversed"

    def test_invalid_key(self):
        """Reject non-callable sort keys."""
        with pytest.raises(TypeError, match=r"must be callable"):
            PropertyOrder.by("bad", "key")


class TestDedupe:
    def test_first_wins(self, children):
        """Keep the first child per key."""
        root = Value.from_root({})
        shadow = Value.from_property(root, "b", 9, proto_depth=1)
        assert [v.content for v in dedupe(children + [shadow]) if v.key == "b"] == [1]

    def test_str_and_non_str_keys_distinct(self):
        """Keep a string key and a non-string key with the same text."""
        root = Value.from_root({})
        values = [Value.from_property(root, "1", "a"), Value.from_property(root, 1, "b")]
        assert len(dedupe(values)) == 2


class TestFoldContext:
    def test_key_label(self):
        """Append one prototype mark per MRO hop."""
        child = Value.from_property(Value.from_root({}), "a", 1, proto_depth=2)
        assert line_text(_ctx().key_label(child)) == "a@@"

    def test_key_label_roles(self, tagged_styles):
        """Style keys by the kind of their value and key."""
        root = Value.from_root({})
        ctx = FoldContext(value=root, params=RecordOptions.plain_object(), options=Options(style_map=tagged_styles))
        function_key = ctx.key_label(Value.from_property(root, "f", helper))
        other_key = ctx.key_label(Value.from_property(root, "x", 1))
        assert function_key[0].render() == "<key_when_function:f>"
        assert other_key[0].render() == "<key_when_other:x>"

    @pytest.mark.parametrize(
        "mode, all_count, actual_count, expected",
        [
            pytest.param(PropertyCountMode.NONE, 3, 2, "OrderedDict ", id="none"),
            pytest.param(PropertyCountMode.ALL, 3, 2, "OrderedDict(3) ", id="all"),
            pytest.param(PropertyCountMode.ACTUAL, 3, 2, "OrderedDict(2) ", id="actual"),
            pytest.param(PropertyCountMode.ALL_AND_ACTUAL, 2, 2, "OrderedDict(2,2) ", id="all-and-actual"),
            pytest.param(PropertyCountMode.ALL_AND_ACTUAL_IF_DIFFERENT, 3, 2, "OrderedDict(3,2) ", id="different"),
            pytest.param(PropertyCountMode.ALL_AND_ACTUAL_IF_DIFFERENT, 2, 2, "OrderedDict ", id="same"),
        ],
    )
    def test_header_count(self, mode, all_count, actual_count, expected):
        """Show the property count per mode."""
        params = RecordOptions.map_like().merge(property_count_mode=mode)
        ctx = _ctx(collections.OrderedDict(), params, all_count=all_count, actual_count=actual_count)
        assert line_text(ctx.header()) == expected

    def test_header_cycle_marker(self):
        """Open the header with the cyclical marker."""
        assert line_text(_ctx(cycle_index=2).header()) == "‹#2› "
        assert line_text(_ctx(collections.OrderedDict(), RecordOptions.map_like(), cycle_index=1).header(
            with_separator=False)) == "‹#1› OrderedDict"


class TestPropertyFormatters:
    def test_value_only(self):
        """Ignore the key."""
        child = Value.from_property(Value.from_root({}), "a", 1)
        assert VALUE_ONLY(Property(child, Fragment.from_text("1")), _ctx()).to_plain() == "1"

    def test_key_and_value(self):
        """Prepend the key and separator to the first line."""
        child = Value.from_property(Value.from_root({}), "a", [1])
        prop = Property(child, Fragment.from_text("[\n  1\n]"), is_leaf=False)
        assert KEY_AND_VALUE(prop, _ctx()).to_plain_lines() == ["a: [", "  1", "]"]

    def test_key_only_for_empty_value(self):
        """Show only the key of an empty value."""
        child = Value.from_property(Value.from_root({}), "a", None)
        assert KEY_AND_VALUE(Property(child, Fragment.empty()), _ctx()).to_plain() == "a"


class TestRecordFormatters:
    @pytest.fixture
    def properties(self) -> list[Fragment]:
        return [Fragment.from_text("a: 1"), Fragment.from_text("b: {\n  c: 2\n}")]

    def test_single_line(self, properties):
        """Join properties with the in-between separator."""
        assert SINGLE_LINE(properties[:1] * 2, _ctx()).to_plain() == "{ a: 1, a: 1 }"

    def test_tabify(self, properties):
        """Indent each line of each property by the tab mark."""
        assert TABIFY(properties, _ctx()).to_plain_lines() == ["{", "  a: 1,", "  b: {", "    c: 2", "  }", "}"]

    def test_treeify(self, properties):
        """Draw properties as branches below the header."""
        assert TREEIFY(properties, _ctx()).to_plain_lines() == ["", "├─ a: 1", "└─ b: {", "     c: 2", "   }"]

    @pytest.mark.parametrize(
        "formatter",
        [
            pytest.param(SINGLE_LINE, id="single-line"),
            pytest.param(TABIFY, id="tabify"),
        ],
    )
    def test_empty_record(self, formatter):
        """Render an empty record with its multi-line delimiters."""
        assert formatter([], _ctx()).to_plain() == "{}"

    @pytest.mark.parametrize(
        "formatter, name",
        [
            pytest.param(split_on_total_length(80), "split_on_total_length_80", id="total-length"),
            pytest.param(split_on_property_count(3), "split_on_property_count_3", id="count"),
            pytest.param(split_on_longest_property(10), "split_on_longest_property_10", id="longest"),
        ],
    )
    def test_split_names(self, formatter, name):
        """Name split policies after their limit."""
        assert formatter.name == name

    @pytest.mark.parametrize(
        "limit, exc",
        [
            pytest.param(-1, ValueError, id="negative"),
            pytest.param("80", TypeError, id="str"),
            pytest.param(True, TypeError, id="bool"),
        ],
    )
    def test_split_invalid_limit(self, limit, exc):
        """Reject invalid limits."""
        with pytest.raises(exc):
            split_on_total_length(limit)

    def test_split_measures_composed_properties(self, properties):
        """Measure only the composed properties: 4 + 11 characters here."""
        assert split_on_total_length(15)(properties, _ctx()).to_plain() == "{ a: 1, b: {  c: 2} }"
        assert split_on_total_length(14)(properties, _ctx()).height == 6
