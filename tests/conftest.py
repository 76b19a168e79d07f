"""Test configuration."""

import pytest
from pathlib import Path
import tempfile
import os

from installator.core.config import Config
from installator.core.models import Repository
from installator.utils.metrics import MetricsCollector


LAZY_README = '''# plug.nvim

A plugin that does things.

## Installation

Install with lazy.nvim:

```lua
{ "me/plug" }
```

Then run `:Lazy sync`.
'''

PACKER_README = '''# plug.nvim

## Installation

Using packer:

```lua
use { "me/plug", requires = "dep/x", opt = true }
```
'''

PACKER_ALIAS_README = '''# plug.nvim

Using packer:

```lua
use { "me/plug", as = "plug" }
```
'''

VIM_PLUG_README = '''# plug.nvim

Using vim-plug

```vim
Plug 'nvim-lua/plenary.nvim'
Plug 'me/plug'
```
'''

NO_INSTALL_README = '''# plug.nvim

A plugin without installation instructions.

```lua
require("plug").setup()
```
'''


# Test fixtures
@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)

@pytest.fixture
def repository():
    """Repository the sample READMEs describe."""
    return Repository(full_name="me/plug")

@pytest.fixture
def config():
    """Default configuration without any file lookups."""
    return Config()

@pytest.fixture
def metrics():
    """Collector that never starts an HTTP server."""
    return MetricsCollector()

@pytest.fixture
def lazy_readme():
    return LAZY_README

@pytest.fixture
def packer_readme():
    return PACKER_README

@pytest.fixture
def packer_alias_readme():
    return PACKER_ALIAS_README

@pytest.fixture
def vim_plug_readme():
    return VIM_PLUG_README

@pytest.fixture
def no_install_readme():
    return NO_INSTALL_README

@pytest.fixture
def readmes_dir(temp_dir):
    """Directory laid out as <dir>/<owner>/<name>/README.md."""
    samples = {
        "me/plug": LAZY_README,
        "me/other": PACKER_README.replace("me/plug", "me/other"),
    }
    for full_name, text in samples.items():
        repo_dir = temp_dir / "readmes" / full_name
        repo_dir.mkdir(parents=True)
        (repo_dir / "README.md").write_text(text, encoding='utf-8')
    return temp_dir / "readmes"

@pytest.fixture
def no_github_token():
    """Remove GitHub tokens from the environment for the test."""
    saved = {name: os.environ.pop(name, None) for name in ('GITHUB_TOKEN', 'GH_TOKEN')}
    yield
    for name, value in saved.items():
        if value is not None:
            os.environ[name] = value
