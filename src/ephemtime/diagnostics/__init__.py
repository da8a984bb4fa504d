"""Diagnostics package.

Plotting tools; they need the optional extra:
  pip install "ephemtime[diagnostics]"
"""

__all__ = ["plot_deltat"]
