"""Tests for utility functions."""

from pathlib import Path

import pytest

from image_namer.generators import clean_caption
from image_namer.types import Decision, FileRecord
from image_namer.utils import (
    apply_rename,
    count_matches,
    decide,
    generic_pattern_name,
    is_generic_filename,
    is_good_enough,
    plan_rename,
    resolve_collision,
    slugify,
    tokenize,
)


@pytest.mark.parametrize(
    "filename",
    [
        "img_1234.jpg",
        "IMG-1234.JPG",
        "img1234.png",
        "DSC_0001.png",
        "dsc0001.jpg",
        "image_12.png",
        "photo-7.jpg",
        "Screenshot_x.png",
        "Screenshot 2024-01-01 at 10.30.png",
        "pic_99.gif",
        "20231231_123456.jpg",
        "a1b2c3d4e5f6.jpg",
        "DEADBEEF.webp",
        "untitled.jpg",
        "Untitled 3.png",
        "new-image.bmp",
        "newimage(2).png",
    ],
)
def test_generic_filenames_always_rename(filename: str) -> None:
    """Generic names are rejected whatever the caption says."""
    assert is_generic_filename(filename)
    stem_words = " ".join(tokenize(Path(filename).stem))
    assert not is_good_enough(filename, stem_words or "anything")
    assert not is_good_enough(filename, "a cat sitting on a chair")


def test_non_generic_filenames() -> None:
    """Descriptive or partially numeric names are not generic."""
    assert generic_pattern_name("red-car.jpg") is None
    assert generic_pattern_name("image-of-a-dog.jpg") is None
    assert generic_pattern_name("photo.jpg") is None
    assert generic_pattern_name("img_1234_beach.jpg") is None
    assert generic_pattern_name("2023-12-31.jpg") is None
    assert generic_pattern_name("cafe.jpg") is None  # hex letters but too short


def test_generic_pattern_name_reports_first_match() -> None:
    assert generic_pattern_name("IMG_2048.jpg") == "camera"
    assert generic_pattern_name("20231231_123456.jpg") == "phone timestamp"
    assert generic_pattern_name("12345678.png") == "hex id"


def test_tokenize() -> None:
    assert tokenize("A red car, parked on the street!") == ["red", "car", "parked", "the", "street"]
    assert tokenize("red_car-2024") == ["red", "car", "2024"]
    assert tokenize("") == []
    assert tokenize("a an of") == []


def test_count_matches_uses_substrings_once_per_caption_word() -> None:
    assert count_matches(["cats"], ["cat"]) == 1
    assert count_matches(["cat"], ["cats"]) == 1
    # one caption word matching two name words still counts once
    assert count_matches(["cat"], ["cat", "cats"]) == 1
    assert count_matches(["dog", "dogs"], ["dog"]) == 2
    assert count_matches(["bird"], ["cat"]) == 0


def test_is_good_enough_two_matches() -> None:
    """Two matching words keep the name even when the ratio is low."""
    assert is_good_enough("red-car.jpg", "a red car parked on the street")
    assert decide("red-car.jpg", "a red car parked on the street") is Decision.KEEP


def test_is_good_enough_generic_name_wins_over_overlap() -> None:
    assert not is_good_enough("IMG_2048.jpg", "a cat sitting on a chair")
    assert decide("IMG_2048.jpg", "a cat sitting on a chair") is Decision.RENAME


def test_is_good_enough_single_word_ratio() -> None:
    """A single matching word is enough when it covers 40% of the caption."""
    assert is_good_enough("cat.jpg", "cat")
    assert is_good_enough("cats.png", "cat on sofa")  # 1 of 2 words
    assert not is_good_enough("cat.jpg", "cat sitting under wooden table")  # 1 of 5 words


def test_is_good_enough_no_overlap() -> None:
    assert not is_good_enough("holiday.jpg", "a dog running on the beach")
    assert not is_good_enough("vacation-2019.jpg", "mountain lake at sunset")


def test_is_good_enough_empty_caption() -> None:
    """Captions without usable words never keep a name."""
    assert not is_good_enough("red-car.jpg", "")
    assert not is_good_enough("red-car.jpg", "a to of")


def test_is_good_enough_ignores_extension_and_case() -> None:
    assert is_good_enough("Red_Car.JPG", "red car")
    assert is_good_enough("jpg.png", "a jpg file")  # 1 of 2 words


def test_slugify() -> None:
    assert slugify("a red car parked on the street", "x.jpg") == "a-red-car-parked-on-the-street.jpg"
    assert slugify("Two Cats, playing with YARN!", "IMG_1.png") == "two-cats-playing-with-yarn.png"
    assert slugify("  spaced   out -- words ", "a.gif") == "spaced-out-words.gif"
    assert slugify("café au lait", "a.webp") == "caf-au-lait.webp"


def test_slugify_composed_with_caption_cleanup() -> None:
    """Leading articles are removed from the caption, not by the slugifier."""
    caption = clean_caption("A red car parked on the street.")
    assert caption == "red car parked on the street"
    assert slugify(caption, "x.jpg") == "red-car-parked-on-the-street.jpg"


def test_slugify_keeps_extension_verbatim() -> None:
    assert slugify("sunset", "IMG_1.JPG") == "sunset.JPG"
    assert slugify("sunset", "photo.Jpeg") == "sunset.Jpeg"


def test_slugify_truncates_without_trailing_hyphen() -> None:
    result = slugify("word " * 20, "x.png")
    stem = Path(result).stem
    assert len(stem) <= 50
    assert stem == "-".join(["word"] * 10)
    assert result.endswith(".png")


def test_slugify_empty_caption_uses_placeholder() -> None:
    assert slugify("", "x.jpg") == "image.jpg"
    assert slugify("!!! ???", "x.PNG") == "image.PNG"
    assert slugify("日本の風景", "x.jpg") == "image.jpg"


def test_resolve_collision_free_name(tmp_path: Path) -> None:
    assert resolve_collision(tmp_path, "photo.jpg") == tmp_path / "photo.jpg"


def test_resolve_collision_increments_suffix(tmp_path: Path) -> None:
    (tmp_path / "photo.jpg").touch()
    assert resolve_collision(tmp_path, "photo.jpg") == tmp_path / "photo-1.jpg"

    (tmp_path / "photo-1.jpg").touch()
    assert resolve_collision(tmp_path, "photo.jpg") == tmp_path / "photo-2.jpg"


def test_resolve_collision_fills_first_gap(tmp_path: Path) -> None:
    for name in ["photo.jpg", "photo-1.jpg", "photo-3.jpg"]:
        (tmp_path / name).touch()
    assert resolve_collision(tmp_path, "photo.jpg") == tmp_path / "photo-2.jpg"


def test_plan_and_apply_rename(tmp_path: Path) -> None:
    source = tmp_path / "IMG_0001.jpg"
    source.write_bytes(b"data")
    (tmp_path / "sunset.jpg").touch()

    plan = plan_rename(FileRecord.from_path(source), "sunset.jpg")
    assert plan.target == tmp_path / "sunset-1.jpg"
    assert plan.collided

    apply_rename(plan)
    assert not source.exists()
    assert (tmp_path / "sunset-1.jpg").read_bytes() == b"data"


def test_resolve_collision_source_counts_as_free(tmp_path: Path) -> None:
    """A file already named after a numbered variant resolves to itself."""
    for name in ["photo.jpg", "photo-1.jpg", "photo-2.jpg"]:
        (tmp_path / name).touch()
    source = tmp_path / "photo-1.jpg"
    assert resolve_collision(tmp_path, "photo.jpg", source=source) == source

    plan = plan_rename(FileRecord.from_path(source), "photo.jpg")
    assert plan.unchanged


def test_resolve_collision_reserved_paths_are_taken(tmp_path: Path) -> None:
    reserved = {tmp_path / "photo.jpg", tmp_path / "photo-1.jpg"}
    assert resolve_collision(tmp_path, "photo.jpg", reserved=reserved) == tmp_path / "photo-2.jpg"
