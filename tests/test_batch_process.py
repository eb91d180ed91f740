import numpy as np

from pixeltools.cli.batch_process import main
from pixeltools.models.pixel_buffer import PixelBuffer
from pixeltools.repositories.image_repository import ImageRepository
from pixeltools.services.image_service import ImageService


def _write_sample(folder, name="sample.png"):
    img = np.full((10, 12, 4), 255, dtype=np.uint8)
    img[4:6, 4:8] = (0, 0, 255, 255)
    ImageRepository.save(PixelBuffer(img, path=folder / name))


def test_remove_bg_writes_transparent_png(tmp_path):
    src, dst = tmp_path / "in", tmp_path / "out"
    src.mkdir()
    _write_sample(src)

    code = main(["remove-bg", str(src), str(dst), "--algorithm", "clustering", "--cluster-threshold", "40"])
    assert code == 0

    out = ImageRepository.load(dst / "sample.png")
    assert out.pixels[0, 0, 3] == 0
    assert out.pixels[5, 5, 3] == 255


def test_compress_and_filter_outputs(tmp_path):
    src = tmp_path / "in"
    src.mkdir()
    _write_sample(src)

    assert main(["compress", str(src), str(tmp_path / "small"), "--max-width", "6", "--quality", "60"]) == 0
    small = ImageRepository.load(tmp_path / "small" / "sample.jpg")
    assert (small.width, small.height) == (6, 5)

    assert main(["filter", str(src), str(tmp_path / "bw"), "--preset", "B&W Classic"]) == 0
    assert (tmp_path / "bw" / "sample.png").is_file()


def test_missing_input_and_unknown_preset(tmp_path):
    assert main(["filter", str(tmp_path / "missing"), str(tmp_path / "out")]) == 2

    src = tmp_path / "in"
    src.mkdir()
    _write_sample(src)
    assert main(["filter", str(src), str(tmp_path / "out"), "--preset", "Polaroid"]) == 1


def test_images_are_written_as_they_stream(tmp_path, monkeypatch):
    src = tmp_path / "in"
    src.mkdir()
    events = []

    def fake_stream(self, folder, *, recursive=False, exts=None):
        for name in ["a.png", "b.png", "c.png"]:
            events.append(("load", name))
            yield PixelBuffer(np.full((4, 4, 4), 255, dtype=np.uint8), path=src / name)

    def fake_save(self, buffer, quality=None):
        events.append(("save", buffer.path.name))

    monkeypatch.setattr(ImageService, "stream_gallery", fake_stream)
    monkeypatch.setattr(ImageService, "save", fake_save)

    assert main(["remove-bg", str(src), str(tmp_path / "out")]) == 0
    assert events == [
        ("load", "a.png"), ("save", "a.png"),
        ("load", "b.png"), ("save", "b.png"),
        ("load", "c.png"), ("save", "c.png"),
    ]
