"""CLI subpackage — click commands over the boundary API."""
