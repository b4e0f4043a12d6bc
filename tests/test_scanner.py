import os
import unittest
from unittest.mock import patch
import tempfile
import shutil
from PIL import Image

from starcasa.config import AppConfig
from starcasa.scanner import StarScanner, walk_directories


class TestWalkDirectories(unittest.TestCase):
    """Test cases for walk_directories."""

    def setUp(self):
        """Set up test environment."""
        self.temp_dir = tempfile.mkdtemp()
        for sub in ("a", os.path.join("a", "b"), ".picasaoriginals",
                    os.path.join(".picasaoriginals", "deep"), os.path.join("a", ".PicasaOriginals")):
            os.makedirs(os.path.join(self.temp_dir, sub))

    def tearDown(self):
        """Clean up after tests."""
        shutil.rmtree(self.temp_dir)

    def test_walk_prunes_originals(self):
        """Test that .picasaoriginals directories and their subtrees are skipped."""
        found = list(walk_directories(self.temp_dir))

        self.assertEqual(found[0], self.temp_dir)
        self.assertEqual(
            sorted(found),
            sorted([
                self.temp_dir,
                os.path.join(self.temp_dir, "a"),
                os.path.join(self.temp_dir, "a", "b"),
            ])
        )

    @patch('os.walk')
    def test_walk_reports_unreadable_directories(self, mock_walk):
        """Test that listing errors are logged and the walk carries on."""
        def fake_walk(root, onerror=None):
            onerror(PermissionError(13, "Permission denied", os.path.join(root, "locked")))
            yield root, [], []

        mock_walk.side_effect = fake_walk

        with self.assertLogs('starcasa.scanner', level='WARNING') as cm:
            found = list(walk_directories(self.temp_dir))

        self.assertEqual(found, [self.temp_dir])
        self.assertTrue(any("locked" in line for line in cm.output))


class TestStarScanner(unittest.TestCase):
    """Test cases for the StarScanner class."""

    def setUp(self):
        """Set up test environment."""
        self.temp_dir = tempfile.mkdtemp()
        self.photos_dir = os.path.join(self.temp_dir, "photos")
        os.makedirs(self.photos_dir)

        self.config = AppConfig(
            input_dirs=[self.photos_dir],
            output_files={
                "landscape": os.path.join(self.temp_dir, "landscape.txt"),
                "portrait": os.path.join(self.temp_dir, "portrait.txt"),
                "square": os.path.join(self.temp_dir, "square.txt"),
            }
        )

    def tearDown(self):
        """Clean up after tests."""
        shutil.rmtree(self.temp_dir)

    def write_sidecar(self, directory, content):
        os.makedirs(directory, exist_ok=True)
        with open(os.path.join(directory, ".picasa.ini"), 'w') as f:
            f.write(content)

    def create_image(self, directory, name, size):
        os.makedirs(directory, exist_ok=True)
        Image.new('RGB', size, color='green').save(os.path.join(directory, name))

    def test_scan_classifies_starred_images(self):
        """Test a scan over nested directories."""
        holiday = os.path.join(self.photos_dir, "holiday")
        self.create_image(self.photos_dir, "wide.jpg", (800, 600))
        self.create_image(holiday, "tall.jpg", (600, 800))
        self.create_image(holiday, "even.png", (500, 500))
        self.write_sidecar(self.photos_dir, "[wide.jpg]\nstar=yes\n")
        self.write_sidecar(holiday, "[tall.jpg]\nstar=yes\n[even.png]\nstar=yes\n")

        scanner = StarScanner(self.config)
        with self.assertLogs('starcasa.scanner', level='INFO') as cm:
            starred = scanner.scan()

        self.assertEqual(dict(starred), {
            os.path.join(self.photos_dir, "wide.jpg"): "landscape",
            os.path.join(holiday, "tall.jpg"): "portrait",
            os.path.join(holiday, "even.png"): "square",
        })
        self.assertIn(f"INFO:starcasa.scanner:Processing directory: {self.photos_dir}", cm.output)
        self.assertTrue(any("Found 2 starred" in line for line in cm.output))
        self.assertEqual(scanner.stats.sidecars_read, 2)
        self.assertEqual(scanner.stats.starred_found, 3)

    def test_only_starred_entries_recorded(self):
        """Test that star=no sections are not recorded."""
        self.config.output_files = {"all": os.path.join(self.temp_dir, "all.txt")}
        self.write_sidecar(self.photos_dir, "[a.jpg]\nstar=yes\n[b.jpg]\nstar=no")

        starred = StarScanner(self.config).scan()

        self.assertEqual(list(starred.keys()), [os.path.join(self.photos_dir, "a.jpg")])

    def test_originals_are_not_scanned(self):
        """Test that sidecars inside .picasaoriginals never contribute entries."""
        self.config.output_files = {"all": os.path.join(self.temp_dir, "all.txt")}
        originals = os.path.join(self.photos_dir, ".picasaoriginals")
        self.write_sidecar(originals, "[old.jpg]\nstar=yes\n")
        self.write_sidecar(os.path.join(originals, "nested"), "[older.jpg]\nstar=yes\n")
        self.write_sidecar(self.photos_dir, "[new.jpg]\nstar=yes\n")

        starred = StarScanner(self.config).scan()

        self.assertEqual(list(starred.keys()), [os.path.join(self.photos_dir, "new.jpg")])

    def test_missing_files_recorded_without_check(self):
        """Test that nonexistent images are recorded when existence isn't checked."""
        self.config.output_files = {"all": os.path.join(self.temp_dir, "all.txt")}
        self.write_sidecar(self.photos_dir, "[img.jpg]\nstar=yes\n")

        starred = StarScanner(self.config).scan()

        self.assertIn(os.path.join(self.photos_dir, "img.jpg"), starred)

    def test_missing_files_skipped_with_check(self):
        """Test that nonexistent images are skipped when existence is checked."""
        self.config.output_files = {"all": os.path.join(self.temp_dir, "all.txt")}
        self.config.check_exists = True
        self.create_image(self.photos_dir, "here.jpg", (10, 10))
        self.write_sidecar(self.photos_dir, "[img.jpg]\nstar=yes\n[here.jpg]\nstar=yes\n")

        scanner = StarScanner(self.config)
        starred = scanner.scan()

        self.assertNotIn(os.path.join(self.photos_dir, "img.jpg"), starred)
        self.assertIn(os.path.join(self.photos_dir, "here.jpg"), starred)
        self.assertEqual(scanner.stats.skipped_missing, 1)

    def test_directory_named_like_image_skipped_with_check(self):
        """Test that a directory is not counted as an existing image."""
        self.config.output_files = {"all": os.path.join(self.temp_dir, "all.txt")}
        self.config.check_exists = True
        os.makedirs(os.path.join(self.photos_dir, "folder.jpg"))
        self.write_sidecar(self.photos_dir, "[folder.jpg]\nstar=yes\n")

        scanner = StarScanner(self.config)
        starred = scanner.scan()

        self.assertEqual(len(starred), 0)
        self.assertEqual(scanner.stats.skipped_missing, 1)

    def test_relative_input_dir_records_absolute_paths(self):
        """Test that a relative input directory still yields absolute image paths."""
        self.config.output_files = {"all": os.path.join(self.temp_dir, "all.txt")}
        self.config.input_dirs = ["photos"]
        self.write_sidecar(self.photos_dir, "[a.jpg]\nstar=yes\n")

        old_cwd = os.getcwd()
        os.chdir(self.temp_dir)
        try:
            starred = StarScanner(self.config).scan()
            expected = os.path.abspath(os.path.join("photos", "a.jpg"))
        finally:
            os.chdir(old_cwd)

        self.assertEqual(list(starred.keys()), [expected])
        self.assertTrue(os.path.isabs(expected))

    def test_all_target_records_corrupt_images(self):
        """Test that with an all target even undecodable images are recorded as all."""
        self.config.output_files = {"all": os.path.join(self.temp_dir, "all.txt")}
        with open(os.path.join(self.photos_dir, "corrupt.jpg"), 'wb') as f:
            f.write(b"\x00\x01garbage")
        self.create_image(self.photos_dir, "wide.jpg", (800, 600))
        self.write_sidecar(self.photos_dir, "[corrupt.jpg]\nstar=yes\n[wide.jpg]\nstar=yes\n")

        starred = StarScanner(self.config).scan()

        self.assertEqual(set(starred.values()), {"all"})
        self.assertEqual(len(starred), 2)

    def test_corrupt_image_skipped_when_classifying(self):
        """Test that undecodable images are logged and not recorded."""
        with open(os.path.join(self.photos_dir, "corrupt.jpg"), 'wb') as f:
            f.write(b"\x00\x01garbage")
        self.write_sidecar(self.photos_dir, "[corrupt.jpg]\nstar=yes\n")

        scanner = StarScanner(self.config)
        with self.assertLogs('starcasa', level='DEBUG') as cm:
            starred = scanner.scan()

        self.assertEqual(len(starred), 0)
        self.assertEqual(scanner.stats.skipped_unreadable, 1)
        self.assertTrue(any("Error loading" in line for line in cm.output))
        self.assertTrue(any("DEBUG:starcasa.scanner:Found no starred" in line for line in cm.output))

    def test_duplicate_paths_last_write_wins(self):
        """Test that a path seen twice keeps one entry with the latest label."""
        scanner = StarScanner(self.config)
        self.write_sidecar(self.photos_dir, "[a.jpg]\nstar=yes\n[A.JPG]\nstar=yes\n")

        with patch.object(scanner.image_processor, 'get_orientation', side_effect=["portrait", "square"]):
            scanner.scan()

        self.assertEqual(len(scanner.starred_images), 1)
        self.assertEqual(scanner.starred_images[os.path.join(self.photos_dir, "a.jpg")], "square")

    def test_directory_without_sidecar(self):
        """Test that a directory with no sidecar records nothing and logs nothing."""
        scanner = StarScanner(self.config)

        self.assertEqual(scanner.process_directory(self.photos_dir), 0)
        self.assertEqual(scanner.stats.sidecars_read, 0)

    @patch('starcasa.scanner.read_starred_sections', side_effect=PermissionError("denied"))
    def test_unreadable_sidecar(self, mock_read):
        """Test that an unreadable sidecar is logged and skipped."""
        self.write_sidecar(self.photos_dir, "[a.jpg]\nstar=yes\n")
        scanner = StarScanner(self.config)

        with self.assertLogs('starcasa.scanner', level='WARNING'):
            self.assertEqual(scanner.process_directory(self.photos_dir), 0)


if __name__ == '__main__':
    unittest.main()
