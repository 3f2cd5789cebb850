import pytest


@pytest.fixture
def make_project(tmp_path):
    """Create a project folder under ``tmp_path`` holding ``files``."""

    def _make(name, files=None):
        root = tmp_path / name
        root.mkdir(parents=True, exist_ok=True)
        for relative, content in (files or {}).items():
            target = root / relative
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        return root

    return _make
