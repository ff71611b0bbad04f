# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Main CLI entry point for the qualifier."""

from cyclopts import App

from qualifier.cli_commands.collect import collect_app

app = App(
    name="qualifier",
    help="Collect and report benchmark results of EC2 instance qualifier runs.",
)
app.command(collect_app)

if __name__ == "__main__":
    app()
