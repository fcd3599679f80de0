"""
Shared fixtures: throwaway git remotes, a stand-in lingo executable and
credentials.
"""

import os
import stat
import sys
from pathlib import Path
from typing import Dict, Optional

import pytest
from git import Actor, Repo

from speedlingo.config import Credentials, reset_config_manager
from speedlingo.logging import close_logging

SEED_AUTHOR = Actor("Seeder", "seeder@example.com")

FAKE_LINGO = """#!{python}
import os
import sys
from pathlib import Path

args = sys.argv[1:]
exit_code = int(os.environ.get("FAKE_LINGO_EXIT", "0"))
if exit_code:
    sys.stderr.write("lingo: simulated failure\\n")
    sys.exit(exit_code)

if not Path("codelingo.yaml").is_file():
    sys.stderr.write("lingo: codelingo.yaml missing\\n")
    sys.exit(3)

mode = args[1]
if mode == "review":
    Path(args[args.index("-o") + 1]).write_text('{{"issues": []}}')
elif os.environ.get("FAKE_LINGO_NOOP") != "1":
    target = Path("main.go")
    target.write_text(target.read_text() + "// Main runs the program.\\n")
print("lingo: done")
"""


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Keep the operator's environment out of the settings under test."""
    for name in list(os.environ):
        if name.startswith("SPEEDLINGO_") or name.startswith("LOG_") or name.startswith("FAKE_LINGO_"):
            monkeypatch.delenv(name, raising=False)
    reset_config_manager()
    yield
    reset_config_manager()
    close_logging()


@pytest.fixture
def credentials():
    return Credentials(username="octocat", email="octocat@example.com", token="ghp_secret123")


def seed_remote(tmp_path: Path, with_vendor: bool = False, extra_files: Optional[Dict[str, str]] = None) -> Path:
    """Create a bare repository on branch ``main`` with one commit."""
    bare_path = tmp_path / "origin.git"
    bare = Repo.init(bare_path, bare=True)
    bare.git.symbolic_ref("HEAD", "refs/heads/main")

    seed_path = tmp_path / "seed"
    seed = Repo.init(seed_path)
    seed.git.checkout("-b", "main")

    (seed_path / "main.go").write_text("package main\n")
    files = ["main.go"]
    if with_vendor:
        (seed_path / "vendor").mkdir()
        (seed_path / "vendor" / "lib.go").write_text("package lib\n")
        files.append("vendor/lib.go")
    for name, content in (extra_files or {}).items():
        (seed_path / name).parent.mkdir(parents=True, exist_ok=True)
        (seed_path / name).write_text(content)
        files.append(name)

    seed.index.add(files)
    seed.index.commit("Initial commit", author=SEED_AUTHOR, committer=SEED_AUTHOR)
    seed.create_remote("origin", str(bare_path))
    seed.git.push("origin", "main:main")
    seed.close()
    return bare_path


@pytest.fixture
def origin_repo(tmp_path):
    return seed_remote(tmp_path)


@pytest.fixture
def origin_repo_with_vendor(tmp_path):
    return seed_remote(tmp_path, with_vendor=True)


@pytest.fixture
def clone(tmp_path, origin_repo):
    repo = Repo.clone_from(str(origin_repo), tmp_path / "work")
    yield repo
    repo.close()


@pytest.fixture
def fake_lingo(tmp_path):
    script = tmp_path / "bin" / "lingo"
    script.parent.mkdir()
    script.write_text(FAKE_LINGO.format(python=sys.executable))
    script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return script
