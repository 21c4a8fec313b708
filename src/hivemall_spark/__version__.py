"""
Version information for hivemall-spark.
"""

import os
import platform
import sys
from typing import Any, Dict

__version__ = "0.4.0"
__version_info__ = tuple(int(x) for x in __version__.split("."))

__build__ = os.environ.get("BUILD_NUMBER", "dev")
__git_revision__ = os.environ.get("GIT_COMMIT", "main")

# Hivemall release the function catalog was written against
HIVEMALL_VERSION = "0.4.0"

MIN_VERSIONS = {
    "python": "3.8.0",
    "pyspark": "3.5.0",
    "pydantic": "2.0.0",
    "click": "8.0.0",
}


def _version_tuple(version: str):
    parts = []
    for piece in version.split(".")[:3]:
        digits = "".join(ch for ch in piece if ch.isdigit())
        parts.append(int(digits) if digits else 0)
    return tuple(parts)


def get_version_info() -> Dict[str, Any]:
    """
    Get version information.

    Returns:
        Dictionary containing version, build, and system information
    """
    return {
        "version": __version__,
        "build": __build__,
        "git_revision": __git_revision__,
        "hivemall_version": HIVEMALL_VERSION,
        "min_versions": MIN_VERSIONS,
        "system_info": {
            "platform": platform.platform(),
            "python_version": platform.python_version(),
            "python_implementation": platform.python_implementation(),
        },
    }


def check_compatibility() -> bool:
    """
    Check if current environment meets minimum requirements.

    Raises:
        RuntimeError: If compatibility requirements are not met
    """
    python_version = ".".join(map(str, sys.version_info[:3]))
    if sys.version_info[:3] < _version_tuple(MIN_VERSIONS["python"]):
        raise RuntimeError(
            f"Python {MIN_VERSIONS['python']} or higher is required. "
            f"Current version: {python_version}"
        )

    incompatible = []
    for package, min_version in MIN_VERSIONS.items():
        if package == "python":
            continue
        try:
            module = __import__(package)
        except ImportError:
            incompatible.append(f"{package} (missing, >= {min_version} required)")
            continue
        current_version = getattr(module, "__version__", None)
        if current_version and _version_tuple(current_version) < _version_tuple(min_version):
            incompatible.append(f"{package} {current_version} (>= {min_version} required)")

    if incompatible:
        raise RuntimeError("Incompatible dependencies: " + ", ".join(incompatible))
    return True
