"""Fire perimeter forest-composition summary: load, normalize, resolve dominant forest type, report, plot."""
