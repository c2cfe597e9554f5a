import pytest

from triwarp.cli.warp import main
from triwarp.repositories.raster_repository import RasterRepository

from .helpers import WHITE, gradient_buffer


@pytest.fixture
def source_png(tmp_path):
    path = tmp_path / "source.png"
    RasterRepository.save(gradient_buffer(10, 10), path)
    return path


def test_warp_writes_output_and_preview(tmp_path, source_png):
    out = tmp_path / "warped.png"
    preview = tmp_path / "preview.png"

    code = main([
        str(source_png), str(out),
        "--source-triangle", "0,0;0,10;10,10",
        "--destination-triangle", "0,0;0,20;20,20",
        "--size", "20x20",
        "--sampling", "bilinear",
        "--workers", "2",
        "--preview", str(preview),
    ])

    assert code == 0
    warped = RasterRepository.load(out)
    assert (warped.width, warped.height) == (20, 20)
    assert warped.get_pixel(19, 0) == WHITE
    assert RasterRepository.load(preview).shape == (10, 10, 4)


def test_degenerate_triangle_exits_with_error(tmp_path, source_png):
    out = tmp_path / "warped.png"
    code = main([
        str(source_png), str(out),
        "--source-triangle", "0,0;0,10;10,10",
        "--destination-triangle", "0,0;5,5;10,10",
    ])
    assert code == 1
    assert not out.exists()


def test_bad_option_exits_with_error(tmp_path, source_png):
    code = main([
        str(source_png), str(tmp_path / "warped.png"),
        "--source-triangle", "0,0;0,10;10,10",
        "--destination-triangle", "0,0;0,10;10,10",
        "--workers", "0",
    ])
    assert code == 1


def test_missing_input_exits_with_error(tmp_path):
    code = main([
        str(tmp_path / "missing.png"), str(tmp_path / "warped.png"),
        "--source-triangle", "0,0;0,10;10,10",
        "--destination-triangle", "0,0;0,10;10,10",
    ])
    assert code == 1


def test_bad_size_is_an_argparse_error(source_png, tmp_path):
    with pytest.raises(SystemExit):
        main([str(source_png), str(tmp_path / "o.png"), "--source-triangle", "0,0;0,1;1,1",
              "--destination-triangle", "0,0;0,1;1,1", "--size", "tiny"])


def test_unreadable_image_exits_with_error(tmp_path):
    bogus = tmp_path / "notimage.png"
    bogus.write_text("this is not a png")
    code = main([
        str(bogus), str(tmp_path / "warped.png"),
        "--source-triangle", "0,0;0,10;10,10",
        "--destination-triangle", "0,0;0,10;10,10",
    ])
    assert code == 1
    assert not (tmp_path / "warped.png").exists()
