"""
Smoke tests to catch basic import and startup failures.

These tests are designed to catch crashes that occur during:
1. Module import time
2. CLI command initialization

They run quickly and should be part of every test run.
"""

import importlib
import pkgutil
import subprocess
import sys
from pathlib import Path

import pytest

import deepdecision

PROJECT_ROOT = Path(__file__).parent.parent


class TestModuleImports:
    """Test that all modules can be imported without errors."""

    def test_all_modules_import(self):
        """Test that all deepdecision modules can be imported."""
        failed_imports = []

        for _, module_name, _ in pkgutil.walk_packages(
            deepdecision.__path__, prefix="deepdecision."
        ):
            if module_name == "deepdecision.__main__":
                continue
            try:
                importlib.import_module(module_name)
            except Exception as e:
                failed_imports.append((module_name, str(e)))

        if failed_imports:
            error_msg = "Failed to import modules:\n"
            for module, error in failed_imports:
                error_msg += f"  - {module}: {error}\n"
            pytest.fail(error_msg)

    def test_critical_imports(self):
        """Test the modules every entry point depends on."""
        critical_modules = [
            "deepdecision.api.cli.main",
            "deepdecision.api.http.app",
            "deepdecision.services.decision_service",
            "deepdecision.providers.llm",
        ]

        for module_name in critical_modules:
            try:
                importlib.import_module(module_name)
            except Exception as e:
                pytest.fail(f"Failed to import {module_name}: {e}")


class TestCLICommands:
    """Test that CLI commands at least show help without crashing."""

    @pytest.mark.parametrize(
        "command",
        [
            ["--help"],
            ["--version"],
            ["analyze", "--help"],
            ["serve", "--help"],
        ],
    )
    def test_cli_help_commands(self, command):
        """Test that CLI help commands work without crashing."""
        result = subprocess.run(
            [sys.executable, "-m", "deepdecision", *command],
            capture_output=True,
            text=True,
            timeout=30,
            cwd=PROJECT_ROOT,
        )

        assert result.returncode == 0, f"Command failed: {result.stderr}"
        assert "Traceback" not in result.stderr

    def test_missing_command_shows_help(self):
        result = subprocess.run(
            [sys.executable, "-m", "deepdecision"],
            capture_output=True,
            text=True,
            timeout=30,
            cwd=PROJECT_ROOT,
        )

        assert result.returncode == 1
        assert "usage" in result.stdout.lower()
