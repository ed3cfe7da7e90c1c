"""Browser-based web UI for pagesim.

This package provides a Flask application for running and replaying
simulations in a browser.  It is an **optional** extra; install with::

    pip install pagesim[web]

The ``create_app`` factory in ``app.py`` serves the simulator page and
a small JSON API (simulate, compare, export, and a shell endpoint).
"""
