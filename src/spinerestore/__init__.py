# SPDX-FileCopyrightText: 2025-present DouglasMacKrell <d.mackrell@gmail.com>
#
# SPDX-License-Identifier: MIT

"""spine-restore - Spine asset extension recovery and organizer."""

from spinerestore.__about__ import __version__

__all__ = ["__version__"]
