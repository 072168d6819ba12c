#!/usr/bin/env python3
# -*- coding: utf-8 -*-
import io
import threading
import zipfile

from resxt.lib.bundle import MemoryBundle, ZipBundle
from resxt.lib.names import UnsafePath
from resxt.lib.storage import CollisionPolicy, LocalStorage
from resxt.loader import AmbiguousResource, ResourceNotFound
from resxt.writer import ResourceWriter
from . import TestBase


class TestResourceWriter(TestBase):

    def setUp(self):
        super().setUp()
        self.root = self.make_temporary_folder()
        self.home = self.generate_random_buffer(3000)
        self.back = self.generate_random_buffer(1200)
        self.data = self.generate_random_buffer(100)
        self.bundle = MemoryBundle('App', {
            'App.icons.home.png': self.home,
            'App.icons.back.png': self.back,
            'App.data.db.sqlite': self.data,
        })
        self.writer = ResourceWriter(self.bundle, LocalStorage(self.root))

    async def test_write_folder(self):
        paths = await self.writer.write_folder('icons', 'out')
        self.assertEqual(sorted(paths), sorted([self.root / 'out' / 'home.png', self.root / 'out' / 'back.png']))
        self.assertFileContents(self.root / 'out' / 'home.png', self.home)
        self.assertFileContents(self.root / 'out' / 'back.png', self.back)
        self.assertEqual(self.list_files(self.root), {'out/home.png', 'out/back.png'})

    async def test_write_file(self):
        path = await self.writer.write_file('data/db.sqlite', 'out')
        self.assertEqual(path, self.root / 'out' / 'db.sqlite')
        self.assertFileContents(path, self.data)

    async def test_write_file_with_backslashes(self):
        path = await self.writer.write_file('data\\db.sqlite', 'out')
        self.assertFileContents(path, self.data)

    async def test_write_file_to_storage_root(self):
        path = await self.writer.write_file('data/db.sqlite')
        self.assertEqual(path, self.root / 'db.sqlite')

    async def test_write_file_to_absolute_directory(self):
        other = self.make_temporary_folder()
        path = await self.writer.write_file('data/db.sqlite', other / 'nested')
        self.assertFileContents(other / 'nested' / 'db.sqlite', self.data)
        self.assertEqual(path, other / 'nested' / 'db.sqlite')

    async def test_write_missing_file(self):
        with self.assertRaises(ResourceNotFound):
            await self.writer.write_file('data/missing.bin', 'out')
        self.assertFalse((self.root / 'out' / 'missing.bin').exists())

    async def test_write_folder_without_matches(self):
        self.assertEqual(await self.writer.write_folder('sounds', 'out'), [])
        self.assertEqual(self.list_files(self.root), set())

    async def test_write_folder_recursive(self):
        bundle = MemoryBundle('App', {
            'App.assets.a.txt': b'a',
            'App.assets.sub.b.txt': b'b',
            'App.assets.sub.deep.c.txt': b'c',
            'App.assetsX.d.txt': b'd',
        })
        writer = ResourceWriter(bundle, LocalStorage(self.root))
        await writer.write_folder('assets', 'out')
        self.assertEqual(self.list_files(self.root), {
            'out/a.txt',
            'out/sub/b.txt',
            'out/sub/deep/c.txt',
        })
        self.assertFileContents(self.root / 'out' / 'sub' / 'deep' / 'c.txt', b'c')

    async def test_write_folder_non_recursive(self):
        bundle = MemoryBundle('App', {
            'App.assets.big.button.png': b'button',
            'App.assets.sub.b.txt': b'b',
        })
        writer = ResourceWriter(bundle, LocalStorage(self.root))
        await writer.write_folder('assets', 'out', recursive=False)
        self.assertEqual(self.list_files(self.root), {'out/big.button.png', 'out/sub.b.txt'})

    async def test_recursive_decoding_ambiguity(self):
        bundle = MemoryBundle('App', {'App.assets.big.button.png': b'button'})
        writer = ResourceWriter(bundle, LocalStorage(self.root))
        await writer.write_folder('assets', 'out')
        self.assertEqual(self.list_files(self.root), {'out/big/button.png'})

    async def test_write_folder_of_bundle_root(self):
        await self.writer.write_folder('', 'out')
        self.assertEqual(self.list_files(self.root), {
            'out/icons/home.png',
            'out/icons/back.png',
            'out/data/db.sqlite',
        })

    async def test_write_folder_parallel(self):
        bundle = MemoryBundle('App', {
            F'App.assets.group{k % 3}.item{k}.bin': self.generate_random_buffer(64) for k in range(30)})
        writer = ResourceWriter(bundle, LocalStorage(self.root))
        paths = await writer.write_folder('assets', 'out', parallel=True)
        self.assertEqual(len(paths), 30)
        for name, data in bundle.resources.items():
            _, _, group, item, _ = name.split('.')
            self.assertFileContents(self.root / 'out' / group / F'{item}.bin', data)

    async def test_policy_fail(self):
        target = self.root / 'out' / 'db.sqlite'
        target.parent.mkdir()
        target.write_bytes(b'keep me')
        with self.assertRaises(FileExistsError):
            await self.writer.write_file('data/db.sqlite', 'out', CollisionPolicy.FAIL)
        self.assertFileContents(target, b'keep me')

    async def test_policy_replace(self):
        target = self.root / 'out' / 'db.sqlite'
        target.parent.mkdir()
        target.write_bytes(B'X' * 1000)
        await self.writer.write_file('data/db.sqlite', 'out')
        self.assertFileContents(target, self.data)

    async def test_policy_unique_name(self):
        target = self.root / 'out' / 'db.sqlite'
        target.parent.mkdir()
        target.write_bytes(b'keep me')
        path = await self.writer.write_file('data/db.sqlite', 'out', CollisionPolicy.GENERATE_UNIQUE_NAME)
        self.assertEqual(path.name, 'db (2).sqlite')
        self.assertFileContents(path, self.data)
        self.assertFileContents(target, b'keep me')

    async def test_policy_open_existing(self):
        target = self.root / 'out' / 'db.sqlite'
        target.parent.mkdir()
        target.write_bytes(B'X' * 150)
        await self.writer.write_file('data/db.sqlite', 'out', CollisionPolicy.OPEN_EXISTING)
        self.assertFileContents(target, self.data + B'X' * 50)

    async def test_write_resource(self):
        path = await self.writer.write_resource(self.root / 'a' / 'b' / 'c.png', 'App.icons.home.png')
        self.assertFileContents(path, self.home)

    async def test_write_resource_ambiguous(self):
        with self.assertRaises(AmbiguousResource):
            await self.writer.write_resource('x.png', '.png')
        self.assertEqual(self.list_files(self.root), set())

    async def test_small_buffer(self):
        writer = ResourceWriter(self.bundle, LocalStorage(self.root), buffer_size=7)
        path = await writer.write_file('icons/home.png', 'out')
        self.assertFileContents(path, self.home)

    def test_invalid_buffer_size(self):
        with self.assertRaises(ValueError):
            ResourceWriter(self.bundle, LocalStorage(self.root), buffer_size=0)

    async def test_write_folder_with_hidden_folder(self):
        bundle = MemoryBundle('App', {'App.icons..tmp.escape.txt': b'hidden'})
        writer = ResourceWriter(bundle, LocalStorage(self.root))
        paths = await writer.write_folder('icons', 'out')
        self.assertEqual(paths, [self.root / 'out' / 'tmp' / 'escape.txt'])
        self.assertEqual(self.list_files(self.root), {'out/tmp/escape.txt'})

    async def test_write_folder_rejects_parent_reference(self):
        bundle = MemoryBundle('App', {'App.icons...': b'up', 'App.icons.a.txt': b'a'})
        writer = ResourceWriter(bundle, LocalStorage(self.root / 'inner'))
        with self.assertRaises(UnsafePath):
            await writer.write_folder('icons', 'out', recursive=False)
        self.assertEqual(self.list_files(self.root), set())

    async def test_write_file_rejects_parent_reference(self):
        with self.assertRaises(UnsafePath):
            await self.writer.write_file('data/..', 'out')

    async def test_write_folder_names_differing_in_case(self):
        bundle = MemoryBundle('App', {'App.icons.Home.png': b'upper', 'App.icons.home.png': b'lower'})
        writer = ResourceWriter(bundle, LocalStorage(self.root))
        paths = await writer.write_folder('icons', 'out', policy=CollisionPolicy.GENERATE_UNIQUE_NAME)
        self.assertEqual(len(paths), 2)
        self.assertEqual(sorted(p.read_bytes() for p in paths), [b'lower', b'upper'])

    async def test_write_folder_names_ending_with_other_names(self):
        bundle = MemoryBundle('App', {'App.x.png': b'short', 'App.App.x.png': b'long'})
        writer = ResourceWriter(bundle, LocalStorage(self.root))
        await writer.write_folder('', 'out')
        self.assertFileContents(self.root / 'out' / 'x.png', b'short')
        self.assertFileContents(self.root / 'out' / 'App' / 'x.png', b'long')

    async def test_stream_is_read_outside_the_event_loop(self):
        readers = set()

        class RecordingStream(io.BytesIO):
            def read(self, *args):
                readers.add(threading.get_ident())
                return super().read(*args)

        class RecordingBundle(MemoryBundle):
            def open(self, name):
                return RecordingStream(self.resources[name])

        bundle = RecordingBundle('App', {'App.data.blob.bin': self.home})
        writer = ResourceWriter(bundle, LocalStorage(self.root), buffer_size=100)
        path = await writer.write_file('data/blob.bin', 'out')
        self.assertFileContents(path, self.home)
        self.assertTrue(readers)
        self.assertNotIn(threading.get_ident(), readers)

    def test_resources(self):
        self.assertEqual(self.writer.resources('icons'), ['App.icons.back.png', 'App.icons.home.png'])
        self.assertEqual(len(self.writer.resources()), 3)


class TestZipExtraction(TestBase):

    async def test_zip_bundle_roundtrip(self):
        root = self.make_temporary_folder()
        files = {
            'icons/home.png': self.generate_random_buffer(400),
            'icons/small/back.png': self.generate_random_buffer(300),
            'data/db.sqlite': self.generate_random_text(200),
        }
        with io.BytesIO() as buffer:
            with zipfile.ZipFile(buffer, 'w') as archive:
                for name, data in files.items():
                    archive.writestr(name, data)
            archive = buffer.getvalue()
        with ZipBundle(archive, identifier='App') as bundle:
            writer = ResourceWriter(bundle, LocalStorage(root))
            await writer.write_folder('icons', 'out')
            await writer.write_file('data/db.sqlite', 'out')
        self.assertEqual(self.list_files(root), {'out/home.png', 'out/small/back.png', 'out/db.sqlite'})
        self.assertFileContents(root / 'out' / 'small' / 'back.png', files['icons/small/back.png'])
        self.assertFileContents(root / 'out' / 'db.sqlite', files['data/db.sqlite'])

    async def test_zip_member_in_hidden_folder(self):
        root = self.make_temporary_folder()
        with io.BytesIO() as buffer:
            with zipfile.ZipFile(buffer, 'w') as archive:
                archive.writestr('icons/.cache/x.txt', b'cached')
            archive = buffer.getvalue()
        with ZipBundle(archive, identifier='App') as bundle:
            writer = ResourceWriter(bundle, LocalStorage(root))
            self.assertEqual(bundle.names(), ['App.icons..cache.x.txt'])
            await writer.write_folder('icons', 'out')
        self.assertEqual(self.list_files(root), {'out/cache/x.txt'})
        self.assertFileContents(root / 'out' / 'cache' / 'x.txt', b'cached')
