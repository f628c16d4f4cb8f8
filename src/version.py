"""
Version stamping

GIT_COMMIT and GIT_DESCRIBE are filled in by the build environment
(SIGVISOR_GIT_COMMIT / SIGVISOR_GIT_DESCRIBE); both are empty in a plain
checkout.
"""

import os

VERSION = "1.0.0"

# Pre-release marker ("dev", "beta", "rc1", ...). Empty string means final.
VERSION_PRERELEASE = "alpha"

GIT_COMMIT = os.environ.get("SIGVISOR_GIT_COMMIT", "")
GIT_DESCRIBE = os.environ.get("SIGVISOR_GIT_DESCRIBE", "")


def full_version() -> str:
    """Version string with pre-release and commit suffixes, e.g. 1.0.0-alpha+3f2c1ab"""
    version = VERSION
    if VERSION_PRERELEASE:
        version = f"{version}-{VERSION_PRERELEASE}"
    if GIT_COMMIT:
        version = f"{version}+{GIT_COMMIT[:7]}"
    return version
