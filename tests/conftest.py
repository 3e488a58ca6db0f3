from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Generator, Iterable, Optional

import pytest

from rdeptree.utils.console import reconfigure_console


@pytest.fixture(autouse=True)
def reset_rdeptree_state() -> Generator[None, None, None]:
    """Restore the rdeptree logger and console between tests.

    CLI invocations call ``setup_logging``, which stops propagation to the
    root logger and would hide records from ``caplog`` in later tests.

    Yields:
        None
    """
    yield

    root_logger = logging.getLogger("rdeptree")
    root_logger.handlers.clear()
    root_logger.setLevel(logging.NOTSET)
    root_logger.propagate = True
    reconfigure_console()


@pytest.fixture
def make_distribution(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing a ``*.dist-info/METADATA`` file under ``tmp_path``.

    Returns:
        Callable ``(name, version, requires=(), *, directory=None, body=None)``
        returning the path of the written METADATA file.
    """

    def _make(
        name: str,
        version: str,
        requires: Iterable[str] = (),
        *,
        directory: Optional[Path] = None,
        body: Optional[str] = None,
    ) -> Path:
        root = directory or tmp_path / "site-packages"
        dist_info = root / f"{name.replace('-', '_')}-{version}.dist-info"
        dist_info.mkdir(parents=True, exist_ok=True)

        lines = ["Metadata-Version: 2.1", f"Name: {name}", f"Version: {version}"]
        lines.extend(f"Requires-Dist: {requirement}" for requirement in requires)
        text = "\n".join(lines) + "\n"
        if body is not None:
            text += "\n" + body

        metadata = dist_info / "METADATA"
        metadata.write_text(text, encoding="utf-8")
        return metadata

    return _make


@pytest.fixture
def site_packages(tmp_path: Path, make_distribution) -> Path:
    """Provide a small installed environment.

    ``app`` requires ``requests`` and ``click``; ``requests`` requires
    ``urllib3`` (installed, in range), ``idna`` (installed, out of range)
    and ``certifi`` (not installed). ``click`` has an extra-only
    requirement on ``colorama``.

    Returns:
        Path of the site-packages directory.
    """
    make_distribution("app", "1.0", ["requests>=2.0", "click"])
    make_distribution(
        "requests",
        "2.31.0",
        ["urllib3<3,>=1.21.1", "idna<4,>=2.5", "certifi>=2017.4.17"],
    )
    make_distribution("urllib3", "2.0.7")
    make_distribution("idna", "1.0")
    make_distribution("click", "8.1.7", ['colorama; extra == "windows"'])
    return tmp_path / "site-packages"
