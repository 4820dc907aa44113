from pathlib import Path
import os
import stat
import tempfile
import unittest

import git

from gitfluff.errors import HookInstallError
from gitfluff.hooks import HookKind, install_hook, is_merge_in_progress, render_hook_script


class HookInstallTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name).resolve()
        self.repo_dir = self.root / "repo"
        self.repo = git.Repo.init(self.repo_dir)

    def tearDown(self):
        self.repo.close()
        self._tmp.cleanup()

    def test_render_hook_script(self):
        self.assertEqual(
            render_hook_script(HookKind.COMMIT_MSG),
            '#!/bin/sh\n# Installed by gitfluff (commit-msg)\nexec gitfluff lint "$1"\n',
        )
        self.assertTrue(render_hook_script(HookKind.COMMIT_MSG, write=True).endswith('"$1" --write\n'))

    def test_install_from_subdirectory(self):
        nested = self.repo_dir / "src" / "pkg"
        nested.mkdir(parents=True)

        path = install_hook(nested, HookKind.COMMIT_MSG, write=True)

        self.assertEqual(path, self.repo_dir / ".git" / "hooks" / "commit-msg")
        content = path.read_text(encoding="utf-8")
        self.assertTrue(content.startswith("#!/bin/sh\n"))
        self.assertIn('exec gitfluff lint "$1" --write', content)
        if os.name == "posix":
            self.assertTrue(path.stat().st_mode & stat.S_IXUSR)

    def test_existing_hook_requires_force(self):
        install_hook(self.repo_dir)
        with self.assertRaises(HookInstallError) as ctx:
            install_hook(self.repo_dir, write=True)
        self.assertIn("--force", str(ctx.exception))

        path = install_hook(self.repo_dir, write=True, force=True)
        self.assertIn("--write", path.read_text(encoding="utf-8"))

    def test_core_hooks_path_is_respected(self):
        with self.repo.config_writer() as writer:
            writer.set_value("core", "hooksPath", ".githooks")

        path = install_hook(self.repo_dir)
        self.assertEqual(path, self.repo_dir / ".githooks" / "commit-msg")

    def test_outside_repository(self):
        outside = self.root / "not-a-repo"
        outside.mkdir()
        with self.assertRaises(HookInstallError):
            install_hook(outside)


class MergeDetectionTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name).resolve()

    def tearDown(self):
        self._tmp.cleanup()

    def test_merge_head_marks_merge_in_progress(self):
        repo_dir = self.root / "repo"
        with git.Repo.init(repo_dir) as repo:
            self.assertFalse(is_merge_in_progress(repo_dir))
            (Path(repo.git_dir) / "MERGE_HEAD").write_text("0" * 40 + "\n", encoding="utf-8")
            self.assertTrue(is_merge_in_progress(repo_dir))

    def test_outside_repository_is_not_merging(self):
        self.assertFalse(is_merge_in_progress(self.root))


if __name__ == "__main__":
    unittest.main()
