"""Tests for photo discovery."""

from pathlib import Path

from photobot.discovery import discover, is_photo_file


class TestDiscover:

    def test_finds_jpg_and_jpeg_case_insensitively(self, create_photo, source_dir):
        create_photo('a.jpg')
        create_photo('b.JPG')
        create_photo('c.jpeg')
        create_photo('d.JpEg')
        create_photo('e.png')
        create_photo('f.txt')

        names = sorted(item.path.name for item in discover(source_dir))

        assert names == ['a.jpg', 'b.JPG', 'c.jpeg', 'd.JpEg']

    def test_recurses_and_keeps_discovery_root(self, create_photo, source_dir):
        create_photo('top.jpg')
        create_photo('Trip/day1/deep.jpg')

        items = {item.path.name: item for item in discover(source_dir)}

        assert items['top.jpg'].root == source_dir
        assert items['top.jpg'].depth == 0
        assert items['deep.jpg'].root == source_dir
        assert items['deep.jpg'].depth == 2
        assert items['deep.jpg'].parent_name == 'day1'

    def test_file_root_yields_itself(self, create_photo):
        photo = create_photo('Album/IMG_0001.jpg')

        items = list(discover(photo))

        assert len(items) == 1
        assert items[0].root == photo.parent
        assert items[0].depth == 0

    def test_non_matching_file_root_yields_nothing(self, create_photo):
        assert list(discover(create_photo('notes.txt'))) == []

    def test_missing_root_yields_nothing(self, tmp_path, caplog):
        assert list(discover(tmp_path / 'missing')) == []
        assert 'does not exist' in caplog.text

    def test_custom_extensions(self, create_photo, source_dir):
        create_photo('a.jpg')
        create_photo('b.heic')

        names = [item.path.name for item in discover(source_dir, ['heic'])]

        assert names == ['b.heic']

    def test_directories_named_like_photos_ignored(self, source_dir):
        (source_dir / 'folder.jpg').mkdir()

        assert list(discover(source_dir)) == []


def test_should_reject_missing_file_when_checking_photo_extension(tmp_path):
    """Should not treat a path as a photo when the file does not exist."""
    assert not is_photo_file(tmp_path / 'ghost.jpg', ['jpg'])
