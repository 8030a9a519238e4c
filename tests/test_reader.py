"""Unit tests for the ArchiveReader component."""

import os
import unittest
import tempfile
import zipfile
import shutil

from ziper.archive import ArchiveReader, create_archive
from ziper.core.config import Settings


class TestArchiveReader(unittest.TestCase):
    """Test cases for the ArchiveReader component."""

    def setUp(self):
        """Set up test fixtures."""
        self.temp_dir = tempfile.mkdtemp()
        self.zip_path = os.path.join(self.temp_dir, "test_archive.zip")

        with zipfile.ZipFile(self.zip_path, 'w', compression=zipfile.ZIP_DEFLATED) as zipf:
            zipf.writestr('site/index.html', "<html></html>")
            zipf.writestr('site/assets/app.js', "console.log(1)" * 50)
            zipf.writestr('other/readme.txt', "hello")

    def tearDown(self):
        """Clean up test fixtures."""
        shutil.rmtree(self.temp_dir)

    def test_init_with_nonexistent_file(self):
        """Test initialization with a nonexistent file."""
        with self.assertRaises(FileNotFoundError):
            ArchiveReader("nonexistent_file.zip")

    def test_init_with_invalid_file(self):
        """Test initialization with a file that is not a ZIP."""
        bogus = os.path.join(self.temp_dir, "bogus.zip")
        with open(bogus, "w") as f:
            f.write("not a zip")
        with self.assertRaises(zipfile.BadZipFile):
            ArchiveReader(bogus)

    def test_names(self):
        reader = ArchiveReader(self.zip_path)
        self.assertEqual(
            reader.names(),
            ['site/index.html', 'site/assets/app.js', 'other/readme.txt'],
        )

    def test_list_entries_with_prefix(self):
        reader = ArchiveReader(self.zip_path)
        entries = reader.list_entries(prefix='site/')

        self.assertEqual(len(entries), 2)
        self.assertEqual(entries[0]['name'], 'site/index.html')
        self.assertEqual(entries[0]['size'], len("<html></html>"))

    def test_get_entry(self):
        reader = ArchiveReader(self.zip_path)
        self.assertIsNotNone(reader.get_entry('other/readme.txt'))
        self.assertIsNone(reader.get_entry('missing.txt'))

    def test_get_archive_stats(self):
        """Test getting archive statistics."""
        reader = ArchiveReader(self.zip_path)
        stats = reader.get_archive_stats()

        self.assertEqual(stats['entries'], 3)
        self.assertEqual(stats['top_level'], ['other', 'site'])
        self.assertLess(stats['compressed_size'], stats['total_size'])
        self.assertGreater(stats['archive_size'], 0)

    def test_reports_fixed_permissions_of_created_archive(self):
        source = os.path.join(self.temp_dir, "pkg")
        os.makedirs(source)
        with open(os.path.join(source, "run.sh"), "w") as f:
            f.write("echo hi\n")
        os.chmod(os.path.join(source, "run.sh"), 0o644)

        output = os.path.join(self.temp_dir, "pkg.zip")
        create_archive(source, output, settings=Settings(_env_file=None))

        entry = ArchiveReader(output).get_entry('pkg/run.sh')
        self.assertEqual(entry['mode'], 0o755)
        self.assertEqual(entry['permissions'], '-rwxr-xr-x')


if __name__ == '__main__':
    unittest.main()
