# SPDX-FileCopyrightText: 2025-present DouglasMacKrell <d.mackrell@gmail.com>
#
# SPDX-License-Identifier: MIT

"""OpenDouban - Douban metadata and artwork lookup for media servers."""

from opendouban.__about__ import __version__

__all__ = ["__version__"]
