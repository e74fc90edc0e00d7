"""Annotation resolver tests — XC-010 through XC-014."""

import pytest

from xcheck.annotations import CrossCheckConfig, resolve, resolve_annotation
from xcheck.ast_nodes import MetaItem, IntLiteral, StringLiteral, FloatLiteral
from xcheck.errors import ConfigError, ErrorKind, SourceLocation
from xcheck.parser import parse


def _annotation(attr: str) -> MetaItem:
    program = parse(f"{attr}\nfn f() {{ }}\n")
    return program.declarations[0].annotation


def _config(attr: str) -> CrossCheckConfig:
    return resolve_annotation(_annotation(attr))


class TestXC010:
    """XC-010: enable/disable keywords."""

    def test_bare_annotation_defaults(self):
        assert _config("@cross_check") == CrossCheckConfig(enabled=True, name=None, id=None)

    def test_empty_list_defaults(self):
        assert _config("@cross_check()") == CrossCheckConfig()

    @pytest.mark.parametrize("keyword", ["never", "disable", "no"])
    def test_disable_keywords(self, keyword):
        assert _config(f"@cross_check({keyword})").enabled is False

    @pytest.mark.parametrize("keyword", ["always", "enable", "yes"])
    def test_enable_keywords(self, keyword):
        assert _config(f"@cross_check({keyword})").enabled is True

    def test_later_keyword_wins(self):
        assert _config("@cross_check(never, always)").enabled is True
        assert _config("@cross_check(yes, no)").enabled is False


class TestXC011:
    """XC-011: name and id options."""

    def test_name(self):
        assert _config('@cross_check(name = "adder")').name == "adder"

    def test_id(self):
        assert _config("@cross_check(id = 1234)").id == 1234

    def test_hex_id(self):
        assert _config("@cross_check(id = 0x12345678)").id == 0x12345678

    def test_combination(self):
        config = _config('@cross_check(enable, name = "x", id = 5)')
        assert config == CrossCheckConfig(enabled=True, name="x", id=5)

    def test_later_name_wins(self):
        assert _config('@cross_check(name = "a", name = "b")').name == "b"

    def test_max_u32_accepted(self):
        assert _config("@cross_check(id = 4294967295)").id == 0xFFFFFFFF

    def test_zero_accepted(self):
        assert _config("@cross_check(id = 0)").id == 0


class TestXC012:
    """XC-012: out-of-range ids are fatal and report the value."""

    def test_too_large(self):
        with pytest.raises(ConfigError) as exc:
            _config("@cross_check(id = 4294967296)")
        assert exc.value.kind == ErrorKind.ID_OUT_OF_RANGE
        assert exc.value.errors[0].details["value"] == 4294967296

    def test_negative(self):
        with pytest.raises(ConfigError) as exc:
            _config("@cross_check(id = -1)")
        assert exc.value.kind == ErrorKind.ID_OUT_OF_RANGE
        assert exc.value.errors[0].details["value"] == -1

    def test_error_carries_location(self):
        with pytest.raises(ConfigError) as exc:
            _config("@cross_check(id = 99999999999)")
        loc = exc.value.errors[0].location
        assert loc is not None
        assert loc.line == 1


class TestXC013:
    """XC-013: unknown options are fatal and report the keyword."""

    def test_unknown_keyword(self):
        with pytest.raises(ConfigError) as exc:
            _config("@cross_check(frobnicate)")
        assert exc.value.kind == ErrorKind.UNKNOWN_OPTION
        assert exc.value.errors[0].details["keyword"] == "frobnicate"
        assert "frobnicate" in str(exc.value)

    def test_keyword_in_wrong_shape(self):
        with pytest.raises(ConfigError) as exc:
            _config("@cross_check(never = 1)")
        assert exc.value.kind == ErrorKind.UNKNOWN_OPTION

    def test_nested_list(self):
        with pytest.raises(ConfigError) as exc:
            _config("@cross_check(args(a))")
        assert exc.value.errors[0].details["keyword"] == "args"

    def test_bare_literal(self):
        with pytest.raises(ConfigError) as exc:
            _config("@cross_check(5)")
        assert exc.value.kind == ErrorKind.UNKNOWN_OPTION
        assert exc.value.errors[0].details["keyword"] == "5"

    def test_first_bad_option_reported(self):
        with pytest.raises(ConfigError) as exc:
            _config("@cross_check(enable, bogus, id = 99999999999)")
        assert exc.value.errors[0].details["keyword"] == "bogus"


class TestXC014:
    """XC-014: literal kinds are checked."""

    def test_id_must_be_integer(self):
        with pytest.raises(ConfigError) as exc:
            _config('@cross_check(id = "12")')
        assert exc.value.kind == ErrorKind.INVALID_VALUE

    def test_name_must_be_string(self):
        with pytest.raises(ConfigError) as exc:
            _config("@cross_check(name = 12)")
        assert exc.value.kind == ErrorKind.INVALID_VALUE

    def test_resolve_from_constructed_items(self):
        loc = SourceLocation(3, 1, "lib.xc")
        items = [
            MetaItem(name="name", value=StringLiteral(value="x")),
            MetaItem(name="id", value=IntLiteral(value=42)),
        ]
        assert resolve(items, loc) == CrossCheckConfig(name="x", id=42)

    def test_float_id_rejected(self):
        with pytest.raises(ConfigError):
            resolve([MetaItem(name="id", value=FloatLiteral(value=1.0))])
