"""Labels of GitHub-hosted runners, for ``Job.runs_on``."""

from __future__ import annotations

UBUNTU_LATEST = "ubuntu-latest"
UBUNTU_24_04 = "ubuntu-24.04"
UBUNTU_22_04 = "ubuntu-22.04"
WINDOWS_LATEST = "windows-latest"
WINDOWS_2022 = "windows-2022"
MACOS_LATEST = "macos-latest"
MACOS_14 = "macos-14"

SELF_HOSTED = "self-hosted"
