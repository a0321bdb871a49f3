# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Allow `python -m syngrep`."""

from syngrep.cli.__main__ import main


if __name__ == "__main__":
    main()
