"""Tests for the site build runner's step ordering and exit codes."""

from __future__ import annotations

import subprocess
import unittest
from unittest import mock

from magazine.site import build


class TestBuildMain(unittest.TestCase):
    def setUp(self) -> None:
        self.calls: list[str] = []
        patches = {
            "load_dotenv": mock.Mock(),
            "ensure_data_dirs": mock.Mock(),
            "update_navigation": mock.Mock(side_effect=lambda: self.calls.append("navigation")),
            "write_sitemap": mock.Mock(side_effect=lambda: self.calls.append("sitemap")),
            "load_articles_or_empty": mock.Mock(),
            "validate_outputs": mock.Mock(return_value=[]),
            "run_build_command": mock.Mock(side_effect=lambda cmd: self.calls.append(cmd)),
        }
        self._patchers = [mock.patch.object(build, name, value) for name, value in patches.items()]
        self.mocks = {name: p.start() for name, p in zip(patches, self._patchers)}

    def tearDown(self) -> None:
        for p in self._patchers:
            p.stop()

    def test_runs_steps_in_order(self) -> None:
        build.main(["--build-command", "npm run build"])
        self.assertEqual(self.calls, ["navigation", "sitemap", "npm run build"])
        self.mocks["validate_outputs"].assert_called_once()

    def test_skip_flags(self) -> None:
        build.main(["--skip-navigation", "--skip-validate", "--build-command", ""])
        self.assertEqual(self.calls, ["sitemap"])
        self.mocks["validate_outputs"].assert_not_called()

    def test_validation_errors_exit_nonzero(self) -> None:
        self.mocks["validate_outputs"].return_value = ["Feed has 3 items, expected 4"]
        with self.assertRaises(SystemExit) as ctx:
            build.main(["--build-command", "npm run build"])
        self.assertEqual(ctx.exception.code, 1)
        self.assertNotIn("npm run build", self.calls)

    def test_failed_build_command_exits_nonzero(self) -> None:
        self.mocks["run_build_command"].side_effect = subprocess.CalledProcessError(2, ["npm"])
        with self.assertRaises(SystemExit) as ctx:
            build.main(["--build-command", "npm run build"])
        self.assertEqual(ctx.exception.code, 1)


if __name__ == "__main__":
    unittest.main()
