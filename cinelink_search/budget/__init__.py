"""Remote API call quota."""
