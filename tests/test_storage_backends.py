"""Tests for the file and keyring credential backends."""

import asyncio
import os
import stat
import sys
import tempfile
import unittest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from keyring.backend import KeyringBackend as KeyringImpl
from keyring.backends import fail
from keyring.errors import PasswordDeleteError, PasswordSetError

from bank_client.auth import CredentialStore
from bank_client.storage import BackendError, BackendUnavailable, FileBackend, KeyringBackend

KEY = "auth_token"


class DictKeyring(KeyringImpl):
    """In-process keyring implementation."""

    priority = 1

    def __init__(self, fail_set: bool = False, fail_delete: bool = False):
        super().__init__()
        self.passwords: dict[tuple[str, str], str] = {}
        self.fail_set = fail_set
        self.fail_delete = fail_delete

    def get_password(self, service, username):
        return self.passwords.get((service, username))

    def set_password(self, service, username, password):
        if self.fail_set:
            raise PasswordSetError("keychain locked")
        self.passwords[(service, username)] = password

    def delete_password(self, service, username):
        if self.fail_delete:
            raise PasswordDeleteError("keychain locked")
        try:
            del self.passwords[(service, username)]
        except KeyError:
            raise PasswordDeleteError("not found") from None


class TestFileBackend(unittest.TestCase):
    def test_write_read_delete(self):
        with tempfile.TemporaryDirectory() as tmp:
            backend = FileBackend(Path(tmp) / "nested" / "credentials.json")

            async def run():
                self.assertIsNone(await backend.read(KEY))
                await backend.write(KEY, "tok-1")
                self.assertEqual(await backend.read(KEY), "tok-1")
                await backend.write(KEY, "tok-2")
                self.assertEqual(await backend.read(KEY), "tok-2")
                await backend.delete(KEY)
                self.assertIsNone(await backend.read(KEY))
                await backend.delete(KEY)

            asyncio.run(run())

    def test_persists_across_instances(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "credentials.json"
            asyncio.run(FileBackend(path).write(KEY, "tok"))
            self.assertEqual(asyncio.run(FileBackend(path).read(KEY)), "tok")

    def test_other_keys_untouched(self):
        with tempfile.TemporaryDirectory() as tmp:
            backend = FileBackend(Path(tmp) / "credentials.json")

            async def run():
                await backend.write("other", "keep")
                await backend.write(KEY, "tok")
                await backend.delete(KEY)
                self.assertEqual(await backend.read("other"), "keep")

            asyncio.run(run())

    @unittest.skipIf(os.name == "nt", "POSIX permissions")
    def test_file_is_private(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "credentials.json"
            asyncio.run(FileBackend(path).write(KEY, "tok"))
            self.assertEqual(stat.S_IMODE(path.stat().st_mode), 0o600)

    def test_corrupt_document(self):
        """Corrupt file reads as an error; write and delete replace it."""
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "credentials.json"
            path.write_text("{not json", encoding="utf-8")
            backend = FileBackend(path)

            async def run():
                with self.assertRaises(BackendError):
                    await backend.read(KEY)
                await backend.delete(KEY)
                self.assertIsNone(await backend.read(KEY))
                path.write_text("[1, 2]", encoding="utf-8")
                await backend.write(KEY, "tok")
                self.assertEqual(await backend.read(KEY), "tok")

            asyncio.run(run())

    def test_unwritable_location(self):
        with tempfile.TemporaryDirectory() as tmp:
            blocker = Path(tmp) / "blocker"
            blocker.write_text("file, not a directory", encoding="utf-8")
            backend = FileBackend(blocker / "credentials.json")
            with self.assertRaises(BackendError):
                asyncio.run(backend.write(KEY, "tok"))

    def test_concurrent_writes_serialized(self):
        with tempfile.TemporaryDirectory() as tmp:
            backend = FileBackend(Path(tmp) / "credentials.json")

            async def run():
                await asyncio.gather(*(backend.write(f"k{i}", str(i)) for i in range(10)))
                for i in range(10):
                    self.assertEqual(await backend.read(f"k{i}"), str(i))

            asyncio.run(run())


class TestKeyringBackend(unittest.TestCase):
    def test_write_read_delete(self):
        impl = DictKeyring()
        backend = KeyringBackend(service="bank-client-test", keyring_impl=impl)

        async def run():
            self.assertIsNone(await backend.read(KEY))
            await backend.write(KEY, "tok")
            self.assertEqual(impl.passwords[("bank-client-test", KEY)], "tok")
            self.assertEqual(await backend.read(KEY), "tok")
            await backend.delete(KEY)
            self.assertIsNone(await backend.read(KEY))
            # Deleting an absent entry is fine
            await backend.delete(KEY)

        asyncio.run(run())

    def test_keyring_error_wrapped(self):
        backend = KeyringBackend(service="svc", keyring_impl=DictKeyring(fail_set=True))
        with self.assertRaises(BackendError) as ctx:
            asyncio.run(backend.write(KEY, "tok"))
        self.assertNotIsInstance(ctx.exception, BackendUnavailable)
        self.assertEqual(ctx.exception.backend, "secure")

    def test_no_keyring_is_unavailable(self):
        backend = KeyringBackend(service="svc", keyring_impl=fail.Keyring())
        self.assertFalse(backend.is_available())
        with self.assertRaises(BackendUnavailable):
            asyncio.run(backend.read(KEY))

    def test_store_falls_back_to_file_when_keychain_locked(self):
        with tempfile.TemporaryDirectory() as tmp:
            secure = KeyringBackend(service="svc", keyring_impl=DictKeyring(fail_set=True))
            general = FileBackend(Path(tmp) / "credentials.json")
            store = CredentialStore([secure, general], key=KEY)

            async def run():
                self.assertEqual(await store.store("tok-123"), "general")
                self.assertEqual(await store.retrieve(), "tok-123")
                await store.clear()
                self.assertIsNone(await store.retrieve())

            asyncio.run(run())

    def test_store_prefers_keychain(self):
        with tempfile.TemporaryDirectory() as tmp:
            impl = DictKeyring()
            general = FileBackend(Path(tmp) / "credentials.json")
            store = CredentialStore([KeyringBackend(service="svc", keyring_impl=impl), general], key=KEY)

            async def run():
                self.assertEqual(await store.store("tok-123"), "secure")
                self.assertIsNone(await general.read(KEY))
                self.assertEqual(await store.retrieve(), "tok-123")

            asyncio.run(run())

    def test_refused_delete_is_an_error(self):
        """A delete the keychain refuses while keeping the entry is not reported as success."""
        impl = DictKeyring(fail_delete=True)
        impl.passwords[("svc", KEY)] = "tok"
        backend = KeyringBackend(service="svc", keyring_impl=impl)
        with self.assertRaises(BackendError):
            asyncio.run(backend.delete(KEY))
        self.assertEqual(impl.passwords[("svc", KEY)], "tok")

    def test_locked_keychain_logout_does_not_resurrect_token(self):
        with tempfile.TemporaryDirectory() as tmp:
            impl = DictKeyring()
            secure = KeyringBackend(service="svc", keyring_impl=impl)
            general = FileBackend(Path(tmp) / "credentials.json")
            store = CredentialStore([secure, general], key=KEY)

            async def run():
                await store.store("tok-123")
                impl.fail_delete = True
                report = await store.clear()
                self.assertEqual(report.cleared, ["general"])
                self.assertIn("secure", report.failed)
                self.assertEqual(store.revoked, frozenset({"secure"}))
                self.assertIsNone(await store.retrieve())

            asyncio.run(run())


if __name__ == "__main__":
    unittest.main()
