import pytest

from recenc.domain.codecs import is_allowed, list_allowed


@pytest.mark.parametrize("codec", ["libx264", "libx265", "libvpx", "mpeg4"])
def test_allowed_codecs_accepted(codec):
    assert is_allowed(codec)


@pytest.mark.parametrize("codec", ["vp9", "MPEG4", "theora", "", "libx264 ", "h264"])
def test_other_codecs_rejected(codec):
    assert not is_allowed(codec)


def test_list_allowed_keeps_declaration_order():
    assert list(list_allowed()) == ["libx264", "libx265", "libvpx", "mpeg4"]


def test_every_listed_codec_is_allowed():
    assert all(is_allowed(codec) for codec in list_allowed())
