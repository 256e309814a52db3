"""HTTP surface: routers and error translation."""
