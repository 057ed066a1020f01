# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Username/password authentication with stateless signed access tokens."""

__version__ = "0.1.0"
