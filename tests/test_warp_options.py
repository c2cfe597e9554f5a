import pytest

from triwarp.models.errors import UnknownOptionError
from triwarp.models.warp_options import SamplingMode, WarpOptions


def test_defaults():
    options = WarpOptions()
    assert options.background is None
    assert options.sampling is SamplingMode.NEAREST
    assert options.workers == 1
    assert options.background_for(4) == (255, 255, 255, 255)
    assert options.background_for(3) == (255, 255, 255)


def test_from_dict_coerces_strings():
    options = WarpOptions.from_dict({"background": "0, 0, 0,255", "sampling": "Bilinear", "workers": "3"})
    assert options.background == (0, 0, 0, 255)
    assert options.sampling is SamplingMode.BILINEAR
    assert options.workers == 3


def test_from_dict_rejects_unknown_fields():
    with pytest.raises(UnknownOptionError, match="fill_colour"):
        WarpOptions.from_dict({"fill_colour": "0,0,0,0"})


def test_from_dict_treats_missing_values_as_defaults():
    assert WarpOptions.from_dict({"background": None, "sampling": ""}) == WarpOptions()
    assert WarpOptions.from_dict(None) == WarpOptions()


@pytest.mark.parametrize("options", [
    {"sampling": "bicubic"},
    {"workers": "0"},
    {"workers": "many"},
    {"background": "255,300,0"},
    {"background": "red"},
])
def test_invalid_values_are_rejected(options):
    with pytest.raises(UnknownOptionError):
        WarpOptions.from_dict(options)


def test_from_env(monkeypatch):
    monkeypatch.setenv("WARP_BACKGROUND", "10,20,30")
    monkeypatch.setenv("WARP_SAMPLING", "bilinear")
    monkeypatch.setenv("WARP_WORKERS", "2")

    options = WarpOptions.from_env()

    assert options == WarpOptions(background=(10, 20, 30), sampling=SamplingMode.BILINEAR, workers=2)
