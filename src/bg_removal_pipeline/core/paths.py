"""Object key filtering and local output path rules."""

import re
from pathlib import Path
from typing import Union

SUPPORTED_EXTENSIONS = (".png", ".webp", ".jpeg", ".jpg")

# remove.bg always answers with PNG
CANONICAL_EXTENSION = ".png"
_CONVERTIBLE_SUFFIX = re.compile(r"\.(jpeg|jpg|webp)$", re.IGNORECASE)


def is_supported_image(key: str) -> bool:
    """Return True when the key ends with one of the supported image extensions."""
    return key.lower().endswith(SUPPORTED_EXTENSIONS)


def needs_conversion(key: str) -> bool:
    """Return True when the key's extension gets relabelled to PNG."""
    return _CONVERTIBLE_SUFFIX.search(key) is not None


def canonical_key(key: str) -> str:
    """Rewrite a jpeg/jpg/webp extension to .png, leaving other keys alone."""
    return _CONVERTIBLE_SUFFIX.sub(CANONICAL_EXTENSION, key)


def relative_key(key: str, folder_prefix: str) -> str:
    """
    Strip the folder prefix from a key.

    Args:
        key: Object key
        folder_prefix: Prefix to remove

    Returns:
        Key relative to the prefix, without a leading slash
    """
    if folder_prefix and key.startswith(folder_prefix):
        return key[len(folder_prefix) :].lstrip("/")
    return key.lstrip("/")


def calculate_output_path(
    key: str, folder_prefix: str, output_dir: Union[str, Path]
) -> Path:
    """
    Calculate the local output path for an object key.

    The result depends only on its arguments, so the same key always maps
    to the same file and an existing file marks the key as done.

    Args:
        key: Object key
        folder_prefix: Prefix stripped from the key
        output_dir: Local output root

    Returns:
        Output file path
    """
    return Path(output_dir) / canonical_key(relative_key(key, folder_prefix))
