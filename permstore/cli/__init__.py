"""Command-line interface for inspecting and exercising permissioned stores."""
