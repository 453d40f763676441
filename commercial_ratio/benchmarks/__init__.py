"""Performance zones and industry quartile positioning for a Commercial Ratio."""
