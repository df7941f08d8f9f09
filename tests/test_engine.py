import errno
import os
import stat
import unittest
from unittest import mock

from _support import listed_entry, make_repo_tmpdir

from duopane.fileops import engine


def _write(path, data):
    with open(path, "wb") as stream:
        stream.write(data)


def _read(path):
    with open(path, "rb") as stream:
        return stream.read()


def _run(request, operation_id=1, **kwargs):
    return list(engine.execute(request, operation_id, **kwargs))


class EngineTestCase(unittest.TestCase):
    def setUp(self):
        self.tmp = make_repo_tmpdir()
        self.src = os.path.join(self.tmp.name, "src")
        self.dst = os.path.join(self.tmp.name, "dst")
        os.mkdir(self.src)
        os.mkdir(self.dst)
        # a.txt (10 bytes) and b/c.txt (5 bytes)
        _write(os.path.join(self.src, "a.txt"), b"0123456789")
        os.mkdir(os.path.join(self.src, "b"))
        _write(os.path.join(self.src, "b", "c.txt"), b"hello")

    def tearDown(self):
        self.tmp.cleanup()

    def sources(self, *names):
        return [listed_entry(os.path.join(self.src, name)) for name in names]

    def request(self, *names, **kwargs):
        return engine.OperationRequest(
            sources=self.sources(*names), destination=self.dst, **kwargs
        )


class CopyTests(EngineTestCase):
    def test_copy_into_empty_destination_reports_totals(self):
        events = _run(self.request("a.txt", "b"))

        final = events[-1]
        self.assertIsInstance(final, engine.ProgressEvent)
        self.assertTrue(final.ok)
        self.assertEqual(final.total_bytes, 15)
        self.assertEqual(final.bytes_done, 15)
        self.assertEqual(final.total_files, 2)
        self.assertEqual(final.files_done, 2)
        self.assertEqual(_read(os.path.join(self.dst, "a.txt")), b"0123456789")
        self.assertEqual(_read(os.path.join(self.dst, "b", "c.txt")), b"hello")

    def test_progress_is_monotonic_and_only_last_event_is_terminal(self):
        _write(os.path.join(self.src, "big.bin"), os.urandom(300 * 1024))

        events = _run(self.request("a.txt", "b", "big.bin"), granularity=64 * 1024)

        self.assertTrue(all(isinstance(e, engine.ProgressEvent) for e in events))
        self.assertEqual([e.done for e in events].count(True), 1)
        self.assertTrue(events[-1].done)
        for before, after in zip(events, events[1:]):
            self.assertLessEqual(before.bytes_done, after.bytes_done)
            self.assertLessEqual(before.files_done, after.files_done)
        self.assertEqual({e.operation_id for e in events}, {1})
        # Byte events were coalesced while the large file streamed.
        self.assertGreater(len(events), 6)

    def test_one_event_announces_each_top_level_item(self):
        events = _run(self.request("a.txt", "b"))

        announced = [e.current_file for e in events if not e.done and e.files_done in (0, 1)]
        self.assertIn("a.txt", announced)
        self.assertIn("b", announced)

    def test_copy_delete_copy_again_is_byte_identical_with_mode_bits(self):
        os.chmod(os.path.join(self.src, "a.txt"), 0o640)
        os.chmod(os.path.join(self.src, "b", "c.txt"), 0o600)

        _run(self.request("a.txt", "b"))
        engine.remove_path(os.path.join(self.dst, "a.txt"))
        engine.remove_path(os.path.join(self.dst, "b"))
        events = _run(self.request("a.txt", "b"))

        self.assertTrue(events[-1].ok)
        for rel in ("a.txt", os.path.join("b", "c.txt")):
            src_path = os.path.join(self.src, rel)
            dst_path = os.path.join(self.dst, rel)
            self.assertEqual(_read(src_path), _read(dst_path))
            self.assertEqual(
                stat.S_IMODE(os.stat(src_path).st_mode),
                stat.S_IMODE(os.stat(dst_path).st_mode),
            )

    def test_read_only_directory_mode_applied_after_contents(self):
        ro_dir = os.path.join(self.src, "b")
        os.chmod(ro_dir, 0o555)
        try:
            events = _run(self.request("b"))
            copied = os.path.join(self.dst, "b")
            self.assertTrue(events[-1].ok)
            self.assertEqual(_read(os.path.join(copied, "c.txt")), b"hello")
            self.assertEqual(stat.S_IMODE(os.stat(copied).st_mode), 0o555)
        finally:
            os.chmod(ro_dir, 0o755)
            if os.path.isdir(os.path.join(self.dst, "b")):
                os.chmod(os.path.join(self.dst, "b"), 0o755)

    @unittest.skipUnless(hasattr(os, "symlink"), "symlinks unavailable")
    def test_symlink_is_recreated_and_counts_as_one_empty_file(self):
        link = os.path.join(self.src, "link")
        try:
            os.symlink("a.txt", link)
        except (OSError, NotImplementedError):
            self.skipTest("cannot create symlinks here")
        source = engine.Entry(name="link", path=link)

        events = _run(engine.OperationRequest([source], self.dst))

        self.assertTrue(events[-1].ok)
        self.assertEqual(events[-1].total_files, 1)
        self.assertEqual(events[-1].total_bytes, 0)
        self.assertEqual(os.readlink(os.path.join(self.dst, "link")), "a.txt")

    def test_forced_copy_merges_into_existing_directory(self):
        os.mkdir(os.path.join(self.dst, "b"))
        _write(os.path.join(self.dst, "b", "keep.txt"), b"keep")
        _write(os.path.join(self.dst, "b", "c.txt"), b"old content")

        events = _run(self.request("b", force=True))

        self.assertTrue(events[-1].ok)
        self.assertEqual(_read(os.path.join(self.dst, "b", "c.txt")), b"hello")
        self.assertEqual(_read(os.path.join(self.dst, "b", "keep.txt")), b"keep")

    def test_failure_aborts_remaining_items_and_names_failed_item(self):
        real_copy_file = engine._copy_file

        def failing_copy(src, dst, tracker):
            if src.endswith("c.txt"):
                raise PermissionError(errno.EACCES, "Permission denied", src)
            yield from real_copy_file(src, dst, tracker)

        _write(os.path.join(self.src, "z.txt"), b"zz")
        with mock.patch.object(engine, "_copy_file", side_effect=failing_copy):
            events = _run(self.request("a.txt", "b", "z.txt"))

        final = events[-1]
        self.assertTrue(final.done)
        self.assertFalse(final.ok)
        self.assertEqual(final.failed_item, "b")
        self.assertIn("Permission denied", final.error)
        self.assertTrue(os.path.exists(os.path.join(self.dst, "a.txt")))
        self.assertFalse(os.path.exists(os.path.join(self.dst, "z.txt")))


class ConflictTests(EngineTestCase):
    def test_existing_destination_yields_conflicts_and_writes_nothing(self):
        _write(os.path.join(self.dst, "a.txt"), b"old")

        events = _run(self.request("a.txt", "b"))

        self.assertEqual(len(events), 1)
        found = events[0]
        self.assertIsInstance(found, engine.ConflictsFound)
        self.assertEqual(found.mode, engine.OperationMode.COPY)
        self.assertEqual([c.source.name for c in found.conflicts], ["a.txt"])
        self.assertEqual(found.conflicts[0].destination, os.path.join(self.dst, "a.txt"))
        self.assertEqual(_read(os.path.join(self.dst, "a.txt")), b"old")
        self.assertFalse(os.path.exists(os.path.join(self.dst, "b")))

    def test_conflicts_are_reported_in_source_order(self):
        _write(os.path.join(self.src, "d.txt"), b"d")
        for name in ("d.txt", "a.txt"):
            _write(os.path.join(self.dst, name), b"x")

        found = _run(self.request("a.txt", "b", "d.txt"))[0]

        self.assertEqual([c.source.name for c in found.conflicts], ["a.txt", "d.txt"])

    def test_forced_request_overwrites(self):
        _write(os.path.join(self.dst, "a.txt"), b"old")

        events = _run(self.request("a.txt", force=True))

        self.assertTrue(events[-1].ok)
        self.assertEqual(_read(os.path.join(self.dst, "a.txt")), b"0123456789")

    @unittest.skipUnless(hasattr(os, "symlink"), "symlinks unavailable")
    def test_forced_overwrite_replaces_destination_symlink(self):
        outside = os.path.join(self.tmp.name, "outside.txt")
        _write(outside, b"untouched")
        link = os.path.join(self.dst, "a.txt")
        dangling = os.path.join(self.dst, "z.txt")
        _write(os.path.join(self.src, "z.txt"), b"zz")
        try:
            os.symlink(outside, link)
            os.symlink(os.path.join(self.tmp.name, "nowhere"), dangling)
        except (OSError, NotImplementedError):
            self.skipTest("cannot create symlinks here")

        events = _run(self.request("a.txt", "z.txt", force=True))

        self.assertTrue(events[-1].ok)
        self.assertFalse(os.path.islink(link))
        self.assertEqual(_read(link), b"0123456789")
        self.assertEqual(_read(outside), b"untouched")
        self.assertFalse(os.path.islink(dangling))
        self.assertEqual(_read(dangling), b"zz")
        self.assertFalse(os.path.exists(os.path.join(self.tmp.name, "nowhere")))


class ValidationTests(EngineTestCase):
    def test_same_source_and_destination_is_rejected(self):
        request = engine.OperationRequest(
            sources=self.sources("a.txt"), destination=self.src, force=True
        )

        events = _run(request)

        self.assertEqual(len(events), 1)
        self.assertEqual(events[0].error, "Source and destination are the same.")
        self.assertEqual(events[0].failed_item, "a.txt")

    def test_directory_into_its_own_child_is_rejected_before_mutation(self):
        request = engine.OperationRequest(
            sources=self.sources("a.txt", "b"),
            destination=os.path.join(self.src, "b"),
        )

        events = _run(request)

        self.assertEqual(len(events), 1)
        self.assertEqual(
            events[0].error, "Cannot copy/move a directory into itself or its children."
        )
        self.assertEqual(events[0].failed_item, "b")
        self.assertFalse(os.path.exists(os.path.join(self.src, "b", "a.txt")))

    def test_missing_source_fails_pre_pass(self):
        ghost = engine.Entry(name="ghost", path=os.path.join(self.src, "ghost"))

        events = _run(engine.OperationRequest([ghost], self.dst))

        self.assertTrue(events[-1].done)
        self.assertEqual(events[-1].failed_item, "ghost")
        self.assertEqual(os.listdir(self.dst), [])

    def test_missing_destination_directory(self):
        request = engine.OperationRequest(
            sources=self.sources("a.txt"),
            destination=os.path.join(self.tmp.name, "nowhere"),
            force=True,
        )

        events = _run(request)

        self.assertEqual(events[-1].error, "Destination directory does not exist.")


class MoveTests(EngineTestCase):
    def test_move_renames_and_credits_each_item(self):
        events = _run(self.request("a.txt", "b", mode=engine.OperationMode.MOVE))

        final = events[-1]
        self.assertTrue(final.ok)
        self.assertEqual(final.bytes_done, 15)
        self.assertEqual(final.files_done, 2)
        self.assertFalse(os.path.exists(os.path.join(self.src, "a.txt")))
        self.assertFalse(os.path.exists(os.path.join(self.src, "b")))
        self.assertEqual(_read(os.path.join(self.dst, "b", "c.txt")), b"hello")

    def test_cross_device_move_falls_back_to_copy_and_remove(self):
        request = self.request("a.txt", "b", mode=engine.OperationMode.MOVE)
        exdev = OSError(errno.EXDEV, "Invalid cross-device link")

        with mock.patch.object(engine.os, "replace", side_effect=exdev):
            events = _run(request)

        self.assertTrue(events[-1].ok)
        self.assertEqual(events[-1].bytes_done, 15)
        self.assertEqual(_read(os.path.join(self.dst, "a.txt")), b"0123456789")
        self.assertFalse(os.path.exists(os.path.join(self.src, "a.txt")))
        self.assertFalse(os.path.exists(os.path.join(self.src, "b")))

    def test_cross_device_move_without_fallback_surfaces_error(self):
        request = self.request("a.txt", mode=engine.OperationMode.MOVE)
        exdev = OSError(errno.EXDEV, "Invalid cross-device link")

        with mock.patch.object(engine.os, "replace", side_effect=exdev):
            events = _run(request, move_fallback=False)

        self.assertFalse(events[-1].ok)
        self.assertEqual(events[-1].failed_item, "a.txt")
        self.assertTrue(os.path.exists(os.path.join(self.src, "a.txt")))

    def test_forced_move_onto_non_empty_directory_merges(self):
        os.mkdir(os.path.join(self.dst, "b"))
        _write(os.path.join(self.dst, "b", "other.txt"), b"x")

        events = _run(self.request("b", mode=engine.OperationMode.MOVE, force=True))

        self.assertTrue(events[-1].ok)
        self.assertEqual(
            sorted(os.listdir(os.path.join(self.dst, "b"))), ["c.txt", "other.txt"]
        )
        self.assertFalse(os.path.exists(os.path.join(self.src, "b")))


class SingleEntryOperationTests(unittest.TestCase):
    def setUp(self):
        self.tmp = make_repo_tmpdir()

    def tearDown(self):
        self.tmp.cleanup()

    def test_create_directory(self):
        path = engine.create_directory(self.tmp.name, "  new  ")

        self.assertEqual(path, os.path.join(self.tmp.name, "new"))
        self.assertTrue(os.path.isdir(path))

    def test_create_directory_rejects_bad_names(self):
        with self.assertRaises(engine.OperationError) as ctx:
            engine.create_directory(self.tmp.name, "   ")
        self.assertEqual(ctx.exception.message, "Folder name cannot be empty.")
        with self.assertRaises(engine.OperationError):
            engine.create_directory(self.tmp.name, "a" + os.sep + "b")

    def test_create_existing_directory_raises_os_error(self):
        os.mkdir(os.path.join(self.tmp.name, "dup"))
        with self.assertRaises(FileExistsError):
            engine.create_directory(self.tmp.name, "dup")

    def test_remove_path_handles_files_and_trees(self):
        tree = os.path.join(self.tmp.name, "tree")
        os.makedirs(os.path.join(tree, "inner"))
        _write(os.path.join(tree, "inner", "f"), b"x")
        single = os.path.join(self.tmp.name, "single")
        _write(single, b"y")

        engine.remove_path(tree)
        engine.remove_path(single)

        self.assertEqual(os.listdir(self.tmp.name), [])

    def test_progress_fraction(self):
        event = engine.ProgressEvent(1, total_bytes=200, bytes_done=50)
        self.assertAlmostEqual(event.fraction, 0.25)
        by_files = engine.ProgressEvent(1, total_files=4, files_done=1)
        self.assertAlmostEqual(by_files.fraction, 0.25)
        self.assertEqual(engine.ProgressEvent(1, done=True).fraction, 1.0)


if __name__ == "__main__":
    unittest.main()
