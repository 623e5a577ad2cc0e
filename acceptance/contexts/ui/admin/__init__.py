"""Administration panel contexts."""
