# ABOUTME: Tests for import structure consistency across the application
# ABOUTME: Validates that modules can be imported properly without unsafe sys.path manipulation

import importlib
import sys

import pytest

APP_MODULES = [
    'app.core.config',
    'app.core.exceptions',
    'app.core.error_handling',
    'app.core.security_headers',
    'app.core.structured_logging',
    'app.services.redirect_service',
    'app.utils.ip_validator',
    'app.utils.port_validator',
    'app.main',
]


class TestImportStructure:
    """Test suite for validating proper import resolution and module loading."""

    def test_app_modules_importable_without_syspath_manipulation(self):
        """Test that all app modules can be imported without sys.path manipulation."""
        original_path = sys.path[:]

        try:
            if any('../..' in path for path in sys.path):
                sys.path = [path for path in sys.path if '../..' not in path]

            import app.main
            import app.services.redirect_service
            import app.utils.ip_validator
            import app.utils.port_validator

            assert hasattr(app.main, 'app')
            assert hasattr(app.services.redirect_service, 'evaluate_request')
            assert hasattr(app.utils.ip_validator, 'is_private_or_reserved')
            assert hasattr(app.utils.port_validator, 'validate_port_strict')

        finally:
            sys.path[:] = original_path

    @pytest.mark.parametrize('module_name', APP_MODULES)
    def test_module_loading_consistency(self, module_name):
        """Test that every module resolves under the app.* namespace."""
        module = importlib.import_module(module_name)

        assert module.__name__ == module_name
        assert module.__file__ is not None

    def test_route_is_registered(self):
        """Test that the catch-all redirect route is mounted on the application."""
        from app.main import app

        paths = {getattr(route, 'path', None) for route in app.routes}
        assert '/{path:path}' in paths
