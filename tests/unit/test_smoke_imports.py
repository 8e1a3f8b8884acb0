"""Smoke tests for package imports.

This module verifies that all key packages can be imported successfully.
It serves as a basic sanity check for the project structure.
"""

import pytest


@pytest.mark.unit
class TestSmokeImports:
    """Smoke tests to verify all key packages are importable."""

    def test_import_tenant_loader_package(self) -> None:
        """Test that the tenant_loader package can be imported."""
        import tenant_loader
        assert tenant_loader.__version__

    def test_import_core(self) -> None:
        """Test that the core package can be imported."""
        from tenant_loader import core
        assert core is not None

    def test_import_core_trace(self) -> None:
        """Test that the core.trace subpackage can be imported."""
        from tenant_loader.core import trace
        assert trace is not None

    def test_import_libs_resource(self) -> None:
        """Test that the libs.resource subpackage can be imported."""
        from tenant_loader.libs import resource
        assert resource is not None

    def test_import_libs_http(self) -> None:
        """Test that the libs.http subpackage can be imported."""
        from tenant_loader.libs import http
        assert http is not None

    def test_import_loading(self) -> None:
        """Test that the loading package can be imported."""
        from tenant_loader import loading
        assert loading is not None

    def test_import_observability(self) -> None:
        """Test that the observability package can be imported."""
        from tenant_loader import observability
        assert observability is not None

    def test_import_cli(self) -> None:
        """Test that the CLI entrypoint can be imported."""
        import main
        assert callable(main.main)
