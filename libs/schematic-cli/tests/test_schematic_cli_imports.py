"""Test that all public exports are importable."""


def test_schematic_cli_imports():
    import schematic_cli

    assert schematic_cli is not None


def test_public_api_exports():
    from schematic_cli import ConnectionProfile, LintConfig, SchematicConfig, init_state, is_initialized, load_config

    assert all([ConnectionProfile, LintConfig, SchematicConfig, init_state, is_initialized, load_config])


def test_app_importable():
    from schematic_cli.cli import app

    assert app is not None
