import pytest

from vivado_host_setup.lib.resolution import DEFAULT_RESOLUTION, parse_resolution


@pytest.mark.parametrize("raw", ["1280x720", "0x0", "99999x1"])
def test_well_formed_values_are_kept(raw):
    assert parse_resolution(raw) == raw


@pytest.mark.parametrize("raw", ["", "abc", "1280X720", "1280x", "x720", "1280 x 720", "-1x5", None])
def test_anything_else_falls_back_to_default(raw):
    assert parse_resolution(raw) == DEFAULT_RESOLUTION


def test_surrounding_whitespace_ignored():
    assert parse_resolution(" 2560x1440\n") == "2560x1440"


def test_custom_default():
    assert parse_resolution("", default="1024x768") == "1024x768"


def test_bad_default_rejected():
    with pytest.raises(ValueError):
        parse_resolution("1280x720", default="big")
