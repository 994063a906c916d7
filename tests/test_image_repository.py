import numpy as np
import pytest
from PIL import Image as PILImage

from edge_filter.models.errors import DecodeError, EncodeError
from edge_filter.models.image import Image
from edge_filter.repositories.image_repository import ImageRepository
from conftest import write_png


@pytest.fixture
def repo():
    return ImageRepository()


def test_load_returns_rgb_channel_order(repo, tmp_path):
    pixels = np.zeros((4, 6, 3), dtype=np.uint8)
    pixels[..., 0] = 200  # red only
    source = write_png(tmp_path / "red.png", pixels)

    img = repo.load(source)

    assert img.pixels.shape == (4, 6, 3)
    assert (img.width, img.height) == (6, 4)
    assert img.pixels[0, 0].tolist() == [200, 0, 0]
    assert img.path == source


def test_load_expands_grayscale_files_to_rgb(repo, tmp_path):
    source = tmp_path / "grey.png"
    PILImage.fromarray(np.full((3, 3), 77, dtype=np.uint8)).save(source)

    img = repo.load(source)

    assert img.pixels.shape == (3, 3, 3)
    assert (img.pixels == 77).all()


def test_load_missing_file(repo, tmp_path):
    with pytest.raises(DecodeError, match="no such file"):
        repo.load(tmp_path / "missing.jpg")


def test_load_directory_is_not_an_image(repo, tmp_path):
    with pytest.raises(DecodeError):
        repo.load(tmp_path)


def test_save_without_path(repo):
    with pytest.raises(EncodeError):
        repo.save(Image(pixels=np.zeros((3, 3), dtype=np.uint8)))


def test_save_jpeg(repo, tmp_path):
    destination = tmp_path / "edges.jpg"

    written = repo.save(Image(pixels=np.full((8, 8), 255, dtype=np.uint8), path=destination))

    assert written == destination
    with PILImage.open(destination) as saved:
        assert saved.format == "JPEG"
        assert saved.size == (8, 8)


def test_iter_paths_filters_by_extension(repo, tmp_path):
    write_png(tmp_path / "b.png", np.zeros((3, 3, 3)))
    write_png(tmp_path / "a.png", np.zeros((3, 3, 3)))
    (tmp_path / "notes.txt").write_text("skip me")
    nested = tmp_path / "nested"
    nested.mkdir()
    write_png(nested / "c.png", np.zeros((3, 3, 3)))

    flat = list(repo.iter_paths(tmp_path))
    deep = list(repo.iter_paths(tmp_path, recursive=True))

    assert [p.name for p in flat] == ["a.png", "b.png"]
    assert sorted(p.name for p in deep) == ["a.png", "b.png", "c.png"]


def test_iter_paths_requires_a_directory(repo, tmp_path):
    with pytest.raises(NotADirectoryError):
        list(repo.iter_paths(tmp_path / "nowhere"))
