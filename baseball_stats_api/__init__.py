"""Baseball stats tracker API.

Teams, players and per-game stat lines behind bearer-token auth, with
derived batting/pitching rates and shareable public views.
"""

__version__ = "1.0.0"
