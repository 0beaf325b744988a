"""Basic project scaffolding tests."""

import importlib


def test_package_importable() -> None:
    import seabattle

    assert seabattle.__version__


def test_submodules_exist() -> None:
    modules = [
        "seabattle.engine",
        "seabattle.engine.instrumented_game",
        "seabattle.telemetry",
        "seabattle.config",
        "seabattle.scores",
        "seabattle.simulation",
        "seabattle.cli",
    ]

    for module in modules:
        assert importlib.import_module(module) is not None
