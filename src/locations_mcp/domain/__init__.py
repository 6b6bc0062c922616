"""Location lookup domain."""
