"""Chart view models for the dashboard templates.

The geometry lives in the Django-free `analysis` package; this package adapts
its results into the shapes the templates iterate over.
"""
