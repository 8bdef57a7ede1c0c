"""Feature-level fixtures for translation core tests.

Provides remote bundle data and a YAML translations directory.
"""

import pytest
import yaml

from tests.factories.backends import DictBackend


REMOTE_BUNDLES = {
    "en": {
        "common": {"hello": "Hello", "bye": "Bye"},
        "admin": {"title": "Admin"},
    },
    "en-US": {"common": {"hello": "Howdy"}},
    "fr": {"common": {"hello": "Bonjour"}},
}


@pytest.fixture
def remote_bundles():
    return {lng: {ns: dict(tree) for ns, tree in nss.items()} for lng, nss in REMOTE_BUNDLES.items()}


@pytest.fixture
def dict_backend(remote_bundles):
    return DictBackend(remote_bundles)


@pytest.fixture
def temp_translations_dir(tmp_path):
    """Create temporary directory with sample YAML translation files.

    - common.en.yml
    - common.fr.yml
    - common.en-US.yml
    """
    with open(tmp_path / "common.en.yml", "w", encoding="utf-8") as f:
        yaml.dump(
            {
                "greeting": "Hello {{name}}",
                "item": "{{count}} item",
                "item_plural": "{{count}} items",
                "menu": {"file": "File", "edit": "Edit"},
            },
            f,
        )
    with open(tmp_path / "common.fr.yml", "w", encoding="utf-8") as f:
        yaml.dump({"greeting": "Bonjour {{name}}"}, f, allow_unicode=True)
    with open(tmp_path / "common.en-US.yml", "w", encoding="utf-8") as f:
        yaml.dump({"color": "color"}, f)
    return tmp_path
