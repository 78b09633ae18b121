from __future__ import annotations

from pathlib import Path

import pytest

SAMPLE_CONFIG_RB = """require 'compass/import-once/activate'

http_path = "/"
css_dir = "stylesheets"
sass_dir = "_compass_sass"
images_dir = "images"
javascripts_dir = "javascripts"
line_comments = false
output_style = :compressed

# after changing SCSS: compass compile"""

DEFAULT_OPTIONS = {
    "http_path": "/",
    "css_dir": "stylesheets",
    "sass_dir": "_compass_sass",
    "images_dir": "images",
    "javascripts_dir": "javascripts",
    "line_comments": False,
    "output_style": "compressed",
}


def write_config(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture()
def config_rb(tmp_path: Path) -> Path:
    return write_config(tmp_path / "config.rb", SAMPLE_CONFIG_RB)


@pytest.fixture()
def config_factory(tmp_path: Path):
    def _factory(filename: str, text: str) -> Path:
        return write_config(tmp_path / filename, text)

    return _factory
