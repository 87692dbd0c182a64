"""End-to-end tests for the pincore command line."""

import io
import os
import platform
import subprocess
import sys
import unittest
from contextlib import redirect_stderr, redirect_stdout
from unittest.mock import patch

from pincore.errors import PRIVILEGE_REMINDER, AffinityError, ErrorKind
from pincore.main import EXIT_FAILURE, EXIT_SUCCESS, main

IS_LINUX = platform.system() == "Linux"


def run_cli(argv):
    """Run main() and return (exit_code, stdout, stderr)."""
    out, err = io.StringIO(), io.StringIO()
    with redirect_stdout(out), redirect_stderr(err):
        code = main(argv, prog="pincore")
    return code, out.getvalue(), err.getvalue()


# =============================================================================
# Argument errors
# =============================================================================

class TestArgumentErrors(unittest.TestCase):
    def test_wrong_count_prints_usage_only(self):
        with patch("pincore.main.logical_core_count") as mock_count, \
             patch("pincore.main.apply_affinity") as mock_apply:
            for argv in [[], ["1234"], ["1", "2", "3"]]:
                with self.subTest(argv=argv):
                    code, out, err = run_cli(argv)
                    self.assertEqual(code, EXIT_FAILURE)
                    self.assertEqual(out, "")
                    self.assertTrue(err.startswith("A cross-platform tool"))
                    self.assertIn("Usage: pincore <pid> <core_id>", err)

        mock_count.assert_not_called()
        mock_apply.assert_not_called()

    def test_invalid_argument(self):
        with patch("pincore.main.apply_affinity") as mock_apply:
            code, _, err = run_cli(["abc", "0"])
        self.assertEqual(code, EXIT_FAILURE)
        self.assertIn("Error: Invalid argument. PID and core_id must be integers.", err)
        self.assertIn("Usage: pincore <pid> <core_id>", err)
        mock_apply.assert_not_called()

    def test_dash_tokens_report_invalid_argument(self):
        with patch("pincore.main.logical_core_count") as mock_count, \
             patch("pincore.main.apply_affinity") as mock_apply:
            for argv in [["-x", "0"], ["--", "5"], ["1", "--help"]]:
                with self.subTest(argv=argv):
                    code, out, err = run_cli(argv)
                    self.assertEqual(code, EXIT_FAILURE)
                    self.assertEqual(out, "")
                    self.assertTrue(err.startswith(
                        "Error: Invalid argument. PID and core_id must be integers.\n"
                    ))
                    self.assertIn("Usage: pincore <pid> <core_id>", err)

        mock_count.assert_not_called()
        mock_apply.assert_not_called()

    def test_fractional_core(self):
        code, _, err = run_cli(["1", "12.5"])
        self.assertEqual(code, EXIT_FAILURE)
        self.assertIn("Invalid argument", err)

    def test_out_of_range(self):
        code, _, err = run_cli(["1", "99999999999"])
        self.assertEqual(code, EXIT_FAILURE)
        self.assertIn("Error: Argument is out of range.", err)
        self.assertIn("Usage: pincore <pid> <core_id>", err)


# =============================================================================
# Core bound check
# =============================================================================

class TestCoreBounds(unittest.TestCase):
    def test_negative_core_with_known_count(self):
        with patch("pincore.main.logical_core_count", return_value=4), \
             patch("pincore.main.apply_affinity") as mock_apply:
            code, out, err = run_cli([str(os.getpid()), "-1"])

        self.assertEqual(code, EXIT_FAILURE)
        self.assertEqual(out, "")
        self.assertIn("Available cores on this system: 0 to 3.", err)
        self.assertNotIn("Usage:", err)
        mock_apply.assert_not_called()

    def test_core_equal_to_count(self):
        with patch("pincore.main.logical_core_count", return_value=2), \
             patch("pincore.main.apply_affinity") as mock_apply:
            code, _, err = run_cli(["100", "2"])
        self.assertEqual(code, EXIT_FAILURE)
        self.assertIn("Core ID 2 is out of range", err)
        mock_apply.assert_not_called()

    def test_unknown_count_passes_to_setter(self):
        with patch("pincore.main.logical_core_count", return_value=0), \
             patch("pincore.main.apply_affinity", return_value=None) as mock_apply:
            code, out, _ = run_cli(["100", "5000"])

        self.assertEqual(code, EXIT_SUCCESS)
        self.assertIn("Successfully set affinity for PID 100 to core 5000", out)
        request = mock_apply.call_args[0][0]
        self.assertEqual((request.pid, request.core_id), (100, 5000))


# =============================================================================
# Setter outcomes
# =============================================================================

class TestSetterOutcomes(unittest.TestCase):
    def test_success_report(self):
        with patch("pincore.main.logical_core_count", return_value=8), \
             patch("pincore.main.platform_family", return_value="Windows"), \
             patch("pincore.main.apply_affinity", return_value=None):
            code, out, err = run_cli(["6789", "1"])

        self.assertEqual(code, EXIT_SUCCESS)
        self.assertEqual(
            out.splitlines(),
            ["Running on Windows.", "Successfully set affinity for PID 6789 to core 1"],
        )
        self.assertEqual(err, "")

    def test_runtime_error_prints_privilege_reminder(self):
        error = AffinityError(ErrorKind.PROCESS_ACCESS, "Could not open process with PID 5. Error code: 5", 5)
        with patch("pincore.main.logical_core_count", return_value=8), \
             patch("pincore.main.apply_affinity", return_value=error):
            code, out, err = run_cli(["5", "0"])

        self.assertEqual(code, EXIT_FAILURE)
        self.assertNotIn("Successfully", out)
        self.assertEqual(
            err.splitlines(),
            ["An error occurred: Could not open process with PID 5. Error code: 5", PRIVILEGE_REMINDER],
        )

    def test_unexpected_setter_fault_is_logged_with_traceback(self):
        with patch("pincore.main.logical_core_count", return_value=8), \
             patch("pincore.main.apply_affinity", side_effect=OSError("access violation")):
            code, out, err = run_cli(["5", "0"])

        self.assertEqual(code, EXIT_FAILURE)
        self.assertNotIn("Successfully", out)
        self.assertIn("Unexpected failure while setting affinity for PID 5", err)
        self.assertIn("OSError: access violation", err)
        self.assertIn(PRIVILEGE_REMINDER, err)

    def test_unsupported_platform(self):
        error = AffinityError(ErrorKind.UNSUPPORTED_PLATFORM, "Unsupported operating system.")
        with patch("pincore.main.logical_core_count", return_value=8), \
             patch("pincore.main.platform_family", return_value=None), \
             patch("pincore.main.apply_affinity", return_value=error):
            code, out, err = run_cli(["5", "0"])

        self.assertEqual(code, EXIT_FAILURE)
        self.assertEqual(out, "")
        self.assertIn("An error occurred: Unsupported operating system.", err)


# =============================================================================
# Live runs against the operating system
# =============================================================================

@unittest.skipUnless(IS_LINUX, "sched_setaffinity is Linux-only")
class TestLiveLinux(unittest.TestCase):
    def test_missing_process_fails(self):
        code, _, err = run_cli(["99999999", "0"])
        self.assertEqual(code, EXIT_FAILURE)
        self.assertIn("sched_setaffinity failed: No such process", err)
        self.assertIn(PRIVILEGE_REMINDER, err)

    def test_pins_running_process(self):
        core = min(os.sched_getaffinity(0))
        child = subprocess.Popen([sys.executable, "-c", "import time; time.sleep(30)"])
        try:
            code, out, _ = run_cli([str(child.pid), str(core)])
            self.assertEqual(code, EXIT_SUCCESS)
            self.assertIn("Running on Linux.", out)
            self.assertIn(f"Successfully set affinity for PID {child.pid} to core {core}", out)
            self.assertEqual(os.sched_getaffinity(child.pid), {core})
        finally:
            child.kill()
            child.wait()


if __name__ == "__main__":
    unittest.main(verbosity=2)
