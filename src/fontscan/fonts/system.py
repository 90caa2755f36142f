"""
System Font Discovery
=====================

Resolves the font directories of the local machine and walks them for
candidate font files. Handles the standard locations of Windows, macOS and
Linux/Unix plus any caller-supplied directories.
"""

import logging
import os
import platform
from pathlib import Path

from ..core.models import ScanOptions
from .metadata import FONT_EXTENSIONS

# Optional Windows dependency
try:
    import winreg
except ImportError:
    winreg = None

logger = logging.getLogger(__name__)

WINDOWS_FONTS_KEY = r"SOFTWARE\Microsoft\Windows NT\CurrentVersion\Fonts"
REGISTRY_FONT_EXTENSIONS = {".ttf", ".otf", ".ttc"}

# Directory names never descended into
EXCLUDED_DIR_NAMES = {"node_modules", "cache", "tmp", "temp"}


def get_platform_font_dirs(
    options: ScanOptions | None = None,
    system: str | None = None,
    home: Path | None = None,
) -> list[Path]:
    """
    Get font directories for the current operating system.

    Args:
        options: Scan options selecting system, user and custom directories
        system: Override for ``platform.system().lower()``
        home: Override for the user's home directory

    Returns:
        De-duplicated directories in scan order, custom directories first.
        Directories are not checked for existence.
    """
    options = options or ScanOptions()
    system = system or platform.system().lower()
    home = home or Path.home()

    directories: list[Path] = list(options.custom_dirs)

    if system == "windows":
        if options.include_system_fonts:
            directories.append(Path(os.environ.get("WINDIR", "C:\\Windows")) / "Fonts")
            directories.extend(get_windows_registry_font_dirs())
        if options.include_user_fonts:
            directories.append(home / "AppData" / "Local" / "Microsoft" / "Windows" / "Fonts")

    elif system == "darwin":  # macOS
        if options.include_system_fonts:
            directories.extend(
                [
                    Path("/System/Library/Fonts"),
                    Path("/Library/Fonts"),
                    Path("/System/Library/Assets/com_apple_MobileAsset_Font6"),
                ]
            )
        if options.include_user_fonts:
            directories.append(home / "Library" / "Fonts")

    else:  # Linux and other Unix-like systems
        if options.include_system_fonts:
            directories.extend(
                [
                    Path("/usr/share/fonts"),
                    Path("/usr/local/share/fonts"),
                    Path("/usr/X11R6/lib/X11/fonts"),
                ]
            )
        if options.include_user_fonts:
            directories.extend([home / ".fonts", home / ".local" / "share" / "fonts"])

    return list(dict.fromkeys(directories))


def get_windows_registry_font_dirs() -> list[Path]:
    """Directories of fonts registered with absolute paths in the Windows registry."""
    if winreg is None:
        return []

    directories: list[Path] = []
    try:
        font_key = winreg.OpenKey(winreg.HKEY_LOCAL_MACHINE, WINDOWS_FONTS_KEY)
    except OSError as e:
        logger.debug(f"Failed to open Windows font registry key: {e}")
        return directories

    try:
        index = 0
        while True:
            try:
                _, value_data, _ = winreg.EnumValue(font_key, index)
            except OSError:
                break
            index += 1

            font_path = Path(str(value_data).strip())
            if font_path.is_absolute() and font_path.suffix.lower() in REGISTRY_FONT_EXTENSIONS:
                directories.append(font_path.parent)
    finally:
        winreg.CloseKey(font_key)

    return list(dict.fromkeys(directories))


def _is_excluded_dir(name: str) -> bool:
    return name.startswith(".") or name.lower() in EXCLUDED_DIR_NAMES


def walk_font_directory(root: Path, max_depth: int = 3) -> list[Path]:
    """
    Recursively collect font files below ``root``.

    Files directly in ``root`` are at depth ``max_depth``; recursion stops
    when the remaining depth reaches zero. Hidden and cache-like directories
    are skipped and symlinked directories are not followed.
    """
    font_files: list[Path] = []
    _walk(Path(root), font_files, max_depth)
    return font_files


def _walk(directory: Path, font_files: list[Path], depth: int) -> None:
    if depth <= 0:
        return

    try:
        entries = sorted(os.scandir(directory), key=lambda entry: entry.name)
    except OSError as e:
        logger.debug(f"Cannot read directory {directory}: {e}")
        return

    for entry in entries:
        try:
            if entry.is_dir(follow_symlinks=False):
                if not _is_excluded_dir(entry.name):
                    _walk(Path(entry.path), font_files, depth - 1)
            elif entry.is_file() and Path(entry.name).suffix.lower() in FONT_EXTENSIONS:
                font_files.append(Path(entry.path))
        except OSError as e:
            logger.debug(f"Skipping {entry.path}: {e}")


def collect_font_files(directories: list[Path], max_depth: int = 3) -> tuple[list[Path], int]:
    """
    Walk every existing root directory.

    Returns:
        Tuple of (candidate font paths, number of root directories walked).
        Missing roots are skipped silently.
    """
    font_files: list[Path] = []
    directories_scanned = 0

    for directory in directories:
        if not directory.is_dir():
            logger.debug(f"Font directory not found: {directory}")
            continue
        font_files.extend(walk_font_directory(directory, max_depth))
        directories_scanned += 1

    return font_files, directories_scanned


class SystemFontProvider:
    """
    Provider for font files available on the local machine.

    Resolves platform font directories once and walks them on demand.
    """

    def __init__(self, options: ScanOptions | None = None, system: str | None = None):
        """
        Initialize system font provider.

        Args:
            options: Scan options selecting directories and depth
            system: Override for the detected operating system name
        """
        self.options = options or ScanOptions()
        self.system = system or platform.system().lower()
        self.font_directories = get_platform_font_dirs(self.options, self.system)

        logger.debug(f"SystemFontProvider initialized for {self.system}")
        logger.debug(f"Font directories: {self.font_directories}")

    def list_font_files(self) -> tuple[list[Path], int]:
        """List candidate font files and the number of directories walked."""
        return collect_font_files(self.font_directories, self.options.max_depth)

    def get_system_font_info(self) -> dict[str, object]:
        """Get a summary of the resolved font directories."""
        existing = [d for d in self.font_directories if d.is_dir()]
        return {
            "system": self.system,
            "font_directories": [str(d) for d in self.font_directories],
            "existing_directories": [str(d) for d in existing],
            "total_directories": len(self.font_directories),
        }
