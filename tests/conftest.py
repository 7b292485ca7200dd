#
# Pytest Fixtures
#

# Standard library -----------------------------------------------------------------------------------------------------
import sys

# Third-party ----------------------------------------------------------------------------------------------------------
import pytest

# Local ----------------------------------------------------------------------------------------------------------------
from prettyval.options import Options
from prettyval.styles import StyleMap


# Fixtures -------------------------------------------------------------------------------------------------------------

@pytest.fixture
def options() -> Options:
    """Uncolored default options."""
    return Options()


@pytest.fixture
def single_line() -> Options:
    """Uncolored options printing every record on one line."""
    return Options.single_line()


@pytest.fixture
def tagged_styles() -> StyleMap:
    """Style map wrapping each styled span as <role:text>, to observe styling without ANSI codes."""
    base = StyleMap.none()
    return StyleMap(
        name="tagged",
        styles={role: (lambda text, _r=role: f"<{_r.value}:{text}>") for role in base.styles},
    )


@pytest.fixture
def cyclic_dict() -> dict:
    """Dict holding a reference to itself under key 'self'."""
    d = {"x": 1}
    d["self"] = d
    return d


@pytest.fixture
def int_str_digits_limit():
    """Enforce the default limit on decimal digits of int to str conversions."""
    previous = sys.get_int_max_str_digits()
    sys.set_int_max_str_digits(4300)
    yield
    sys.set_int_max_str_digits(previous)
