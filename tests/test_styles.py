#
# Prettyval - Styles and Marks Tests
#

# Third party ----------------------------------------------------------------------------------------------------------
import pytest

# Local ----------------------------------------------------------------------------------------------------------------
from prettyval.fragments import unstyled
from prettyval.marks import Mark, MarkId, MarkMap
from prettyval.styles import ColorWheel, Role, StyleMap


# Tests ----------------------------------------------------------------------------------------------------------------

class TestColorWheel:
    def test_cycles_by_depth(self):
        """Pick the styling function at depth modulo the wheel length."""
        wheel = ColorWheel((str.upper, str.lower))
        assert [wheel.at(d)("Ab") for d in range(4)] == ["AB", "ab", "AB", "ab"]

    def test_empty_wheel(self):
        """Reject a wheel without styling functions."""
        with pytest.raises(ValueError, match=r"at least one"):
            ColorWheel(())

    def test_non_callable(self):
        """Reject non-callable styles."""
        with pytest.raises(TypeError, match=r"must be callable"):
            ColorWheel(("red",))

    def test_ansi(self):
        """Build a seven-color wheel keeping the text."""
        wheel = ColorWheel.ansi()
        assert len(wheel) == 7
        assert "x" in wheel.at(0)("x")


class TestStyleMap:
    def test_none_is_identity(self):
        """Leave text unchanged for every role."""
        styles = StyleMap.none()
        assert all(styles.styler(role)("a") == "a" for role in Role)

    def test_undeclared_role(self):
        """Raise KeyError for a role missing from the map."""
        with pytest.raises(KeyError, match=r"style map 'empty' does not declare role"):
            StyleMap(name="empty").styler(Role.NAME)

    def test_invalid_style(self):
        """Reject styles which are neither callable nor a ColorWheel."""
        with pytest.raises(TypeError, match=r"must be callable or a ColorWheel"):
            StyleMap(name="bad", styles={Role.NAME: "green"})

    def test_with_styles(self):
        """Override some roles of a copy, resolving wheels by depth."""
        wheel = ColorWheel((unstyled, str.upper))
        styles = StyleMap.none().with_styles(name=str.upper, delimiters=wheel)
        assert styles.span("a", Role.NAME).render() == "A"
        assert styles.span("a", Role.DELIMITERS, 0).render() == "a"
        assert styles.span("a", Role.DELIMITERS, 1).render() == "A"
        assert StyleMap.none().span("a", Role.NAME).render() == "a"

    def test_with_unknown_role(self):
        """Reject overrides of unknown roles."""
        with pytest.raises(ValueError):
            StyleMap.none().with_styles(colour=str.upper)

    def test_dark_mode_declares_every_role(self):
        """Declare a style for every role."""
        styles = StyleMap.dark_mode()
        assert all(role in styles for role in Role)


class TestMarkMap:
    @pytest.mark.parametrize(
        "marks, mark_id, expected",
        [
            pytest.param(MarkMap.default(), MarkId.CIRCULAR_REFERENCE_START, "‹#", id="default-start"),
            pytest.param(MarkMap.default(), MarkId.CIRCULAR_OBJECT, "#", id="default-object"),
            pytest.param(MarkMap.util_inspect_like(), MarkId.CIRCULAR_REFERENCE_START, "<Ref *", id="inspect-start"),
            pytest.param(MarkMap.util_inspect_like(), MarkId.CIRCULAR_OBJECT, "Circular *", id="inspect-object"),
            pytest.param(MarkMap.default(), MarkId.TREE_INDENT_FIRST_LINE_OF_LAST_PROP, "└─ ", id="tree-last"),
        ],
    )
    def test_text(self, marks, mark_id, expected):
        """Return the literal text of a mark."""
        assert marks.text(mark_id) == expected

    def test_presets_declare_every_mark(self):
        """Declare every mark identifier in the presets."""
        for marks in (MarkMap.default(), MarkMap.util_inspect_like()):
            assert all(marks.get(mark_id) for mark_id in MarkId)

    def test_undeclared_mark(self):
        """Raise KeyError for a mark missing from the map."""
        with pytest.raises(KeyError, match=r"mark map 'empty' does not declare mark"):
            MarkMap(name="empty").get(MarkId.TAB_INDENT)

    def test_span_styled_by_role(self):
        """Style a mark with the style of its role."""
        styles = StyleMap.none().with_styles(indentation=str.upper)
        marks = MarkMap.default().with_marks(tab_indent=Mark("ab", Role.INDENTATION))
        assert marks.span(MarkId.TAB_INDENT, styles).render() == "AB"

    def test_invalid_mark(self):
        """Reject values which are not marks."""
        with pytest.raises(TypeError, match=r"must be a Mark"):
            MarkMap(name="bad", marks={MarkId.TAB_INDENT: "  "})
