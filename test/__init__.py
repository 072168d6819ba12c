import logging
import pathlib
import random
import resxt
import string
import tempfile
import unittest


__all__ = ['resxt', 'TestBase']


class TestBase(unittest.IsolatedAsyncioTestCase):

    def generate_random_buffer(self, size):
        return bytes(random.randrange(0, 0x100) for _ in range(size))

    def generate_random_text(self, size):
        return ''.join(string.printable[
            random.randrange(0, len(string.printable))] for _ in range(size)).encode('UTF8')

    def make_temporary_folder(self) -> pathlib.Path:
        temp = tempfile.TemporaryDirectory(prefix='resxt.test.')
        self.addCleanup(temp.cleanup)
        return pathlib.Path(temp.name)

    def setUp(self):
        random.seed(0xBAADF00D)  # guarantee deterministic 'random' buffers
        logging.disable(logging.CRITICAL)

    def assertContains(self, container, member, msg=None):
        self.assertIn(member, container, msg)

    def assertFileContents(self, path, data: bytes):
        path = pathlib.Path(path)
        self.assertTrue(path.is_file(), F'not a file: {path}')
        self.assertEqual(path.read_bytes(), data)

    def list_files(self, root) -> set:
        root = pathlib.Path(root)
        return {p.relative_to(root).as_posix() for p in root.rglob('*') if p.is_file()}
