#!/usr/bin/env python
"""
End-to-end local smoke test:

1) python -m build
2) create fresh .venv-vi-test
3) pip install the built wheel into that venv
4) import vectorindex, build a tiny index, save/load it through SQLite
"""

import os
import shutil
import subprocess
import sys
from pathlib import Path


ROOT = Path(__file__).resolve().parent.parent  # assuming script is in ./scripts/
DIST_DIR = ROOT / "dist"
VENV_DIR = ROOT / ".venv-vi-test"


def run(cmd, cwd=None):
    """Run a command, print it, and fail fast on error."""
    print(f"\n$ {' '.join(cmd)}")
    subprocess.run(cmd, cwd=cwd, check=True)


def build_python_package():
    """Run python -m build to create sdist + wheel in ./dist/."""
    if DIST_DIR.exists():
        shutil.rmtree(DIST_DIR)

    print("[python] Building package with python -m build")
    run([sys.executable, "-m", "build"], cwd=ROOT)


def create_fresh_venv():
    """Delete old venv and create a new one."""
    if VENV_DIR.exists():
        print(f"[venv] Removing existing venv at {VENV_DIR}")
        shutil.rmtree(VENV_DIR)

    print(f"[venv] Creating venv at {VENV_DIR}")
    run([sys.executable, "-m", "venv", str(VENV_DIR)])

    if os.name == "nt":
        return VENV_DIR / "Scripts" / "python.exe"
    return VENV_DIR / "bin" / "python"


def install_wheel_in_venv(venv_python: Path):
    """Install the freshly built wheel into the venv."""
    wheels = sorted(DIST_DIR.glob("vectorindex-*.whl"))
    if not wheels:
        raise RuntimeError("No vectorindex-*.whl found in dist/")

    wheel = wheels[-1]  # most recent
    print(f"[venv] Using wheel: {wheel.name}")

    run([str(venv_python), "-m", "pip", "install", "--upgrade", "pip"])
    run([str(venv_python), "-m", "pip", "install", str(wheel)])


def smoke_test_roundtrip(venv_python: Path):
    """Build, save and reload an index inside the venv."""
    code = r"""
import asyncio, tempfile, os
import vectorindex
from vectorindex import VectorIndex, SQLiteIndexStore

async def main():
    with tempfile.TemporaryDirectory() as d:
        store = SQLiteIndexStore(os.path.join(d, "VectorIndexDB.sqlite"))
        idx = VectorIndex(3, store=store)
        idx.add([1, 0, 0], {"id": 1})
        idx.add([0, 1, 0], {"id": 2})
        await idx.save("smoke")

        fresh = VectorIndex(3, store=store)
        assert await fresh.load("smoke")
        assert fresh.search([1, 0, 0], 1)[0]["id"] == 1
        store.close()

asyncio.run(main())
print("vectorindex imported OK")
print("   module:", vectorindex.__file__)
print("   version:", getattr(vectorindex, "__version__", None))
"""
    run([str(venv_python), "-c", code])


def main():
    print(f"[info] Project root: {ROOT}")

    build_python_package()
    venv_python = create_fresh_venv()
    install_wheel_in_venv(venv_python)
    smoke_test_roundtrip(venv_python)

    print("\nSmoke test completed successfully.")


if __name__ == "__main__":
    main()
