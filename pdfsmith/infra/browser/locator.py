"""
Locate a Chromium-family browser, or download a pinned Chromium snapshot.

Lookup order: installed browsers on PATH / well-known locations, then the
local cache directory, then a download into that cache.
"""

import os
import platform
import shutil
import stat
import sys
import tempfile
import zipfile
from pathlib import Path

import requests

from pdfsmith.config import get_settings
from pdfsmith.shared.errors import BrowserError
from pdfsmith.shared.logging import get_logger

logger = get_logger(__name__)

# Chromium snapshot revision known to print correctly
CHROMIUM_REVISION = "1056772"
SNAPSHOT_BASE_URL = "https://storage.googleapis.com/chromium-browser-snapshots"

DOWNLOAD_TIMEOUT = 300
CHUNK_SIZE = 1024 * 1024


def known_browser_paths(system: str | None = None) -> list[str]:
    """Executable names or absolute paths to try for the host OS."""
    system = system or platform.system()
    if system == "Windows":
        return ["chrome", "msedge", "chromium"]
    if system == "Darwin":
        return [
            "/Applications/Google Chrome.app/Contents/MacOS/Google Chrome",
            "/Applications/Microsoft Edge.app/Contents/MacOS/Microsoft Edge",
            "/Applications/Chromium.app/Contents/MacOS/Chromium",
        ]
    if system == "Linux":
        return ["google-chrome", "microsoft-edge", "chromium-browser", "chromium"]
    return []


def download_url(system: str | None = None, machine: str | None = None) -> str:
    """Snapshot archive URL for the host OS/architecture."""
    system = system or platform.system()
    machine = (machine or platform.machine()).lower()

    if system == "Windows":
        return f"{SNAPSHOT_BASE_URL}/Win_x64/{CHROMIUM_REVISION}/chrome-win.zip"
    if system == "Darwin":
        folder = "Mac_Arm" if machine in ("arm64", "aarch64") else "Mac"
        return f"{SNAPSHOT_BASE_URL}/{folder}/{CHROMIUM_REVISION}/chrome-mac.zip"
    if system == "Linux":
        return f"{SNAPSHOT_BASE_URL}/Linux_x64/{CHROMIUM_REVISION}/chrome-linux.zip"
    raise BrowserError(f"unsupported operating system: {system}")


def cached_executable(cache_dir: Path, system: str | None = None) -> Path:
    """Where the extracted snapshot's executable lives inside the cache."""
    system = system or platform.system()
    if system == "Windows":
        return cache_dir / "chrome.exe"
    if system == "Darwin":
        return cache_dir / "Chromium.app" / "Contents" / "MacOS" / "Chromium"
    return cache_dir / "chrome"


def find_installed() -> str | None:
    for candidate in known_browser_paths():
        found = shutil.which(candidate)
        if found:
            return found
    return None


def find_or_download(cache_dir: Path | None = None) -> str:
    """
    Return the path of a usable browser executable.

    Raises:
        BrowserError: nothing installed and the download failed
    """
    installed = find_installed()
    if installed:
        logger.info(f"Found existing browser at: {installed}")
        return installed

    cache_dir = Path(cache_dir or get_settings().browser_cache_dir)
    executable = cached_executable(cache_dir)
    if executable.is_file():
        logger.info(f"Found cached browser at: {executable}")
        return str(executable)

    logger.info(f"Browser not found. Downloading Chromium {CHROMIUM_REVISION} to {cache_dir}")
    return str(download_and_extract(cache_dir))


def download_and_extract(cache_dir: Path) -> Path:
    """Download the pinned snapshot and unpack it into cache_dir."""
    url = download_url()
    cache_dir.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(prefix="chromium-", suffix=".zip")
    os.close(fd)
    try:
        logger.info(f"Downloading from: {url}")
        try:
            with requests.get(url, stream=True, timeout=DOWNLOAD_TIMEOUT) as response:
                response.raise_for_status()
                with open(tmp_name, "wb") as f:
                    for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                        f.write(chunk)
        except requests.RequestException as e:
            raise BrowserError(f"failed to download Chromium: {e}") from e

        try:
            extract_archive(Path(tmp_name), cache_dir)
        except (zipfile.BadZipFile, OSError) as e:
            raise BrowserError(f"failed to unzip Chromium: {e}") from e
    finally:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)

    executable = cached_executable(cache_dir)
    if not executable.is_file():
        raise BrowserError(f"downloaded archive has no executable at {executable}")

    if sys.platform != "win32":
        executable.chmod(executable.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)

    logger.info("Download and extraction complete.")
    return executable


def extract_archive(archive: Path, dest: Path) -> None:
    """Extract a zip, dropping the archive's top-level directory."""
    dest = dest.resolve()
    with zipfile.ZipFile(archive) as zf:
        for info in zf.infolist():
            parts = Path(info.filename).parts
            if len(parts) <= 1:
                continue
            target = dest.joinpath(*parts[1:]).resolve()
            if not target.is_relative_to(dest):
                raise OSError(f"archive entry escapes destination: {info.filename}")

            if info.is_dir():
                target.mkdir(parents=True, exist_ok=True)
                continue

            target.parent.mkdir(parents=True, exist_ok=True)
            with zf.open(info) as src, open(target, "wb") as out:
                shutil.copyfileobj(src, out)

            mode = info.external_attr >> 16
            if mode:
                target.chmod(mode & 0o777)
