from __future__ import annotations

DEFAULT_ORGANIZATION = "TanStack"


def create_banner(display_name: str, organization: str = DEFAULT_ORGANIZATION) -> str:
    # Emitted verbatim at the top of every output file; keep byte-exact.
    return (
        "/**\n"
        f" * {display_name}\n"
        " *\n"
        f" * Copyright (c) {organization}\n"
        " *\n"
        " * This source code is licensed under the MIT license found in the\n"
        " * LICENSE.md file in the root directory of this source tree.\n"
        " *\n"
        " * @license MIT\n"
        " */"
    )
